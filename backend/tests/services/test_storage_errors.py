"""Storage Errors — driver failures leave the session manager as StorageError."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from worksite.core.errors import StorageError
from worksite.infrastructure.database import storage_operation
from worksite.models.user import User


@pytest.mark.parametrize("error,operation", [
    (IntegrityError("INSERT", {}, Exception("unique")), "commit"),
    (OperationalError("SELECT", {}, Exception("gone")), "execute"),
    (SQLAlchemyError("other"), "unknown"),
])
def test_storage_operation(error, operation):
    assert storage_operation(error) == operation


async def test_bad_query_becomes_storage_error(db_manager):
    with pytest.raises(StorageError) as exc:
        async with db_manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))

    assert exc.value.operation == "execute"
    assert "no_such_table" not in exc.value.message


async def test_failed_commit_leaves_nothing_behind(db_manager):
    with pytest.raises(StorageError):
        async with db_manager.session() as db:
            for name in ("twin", "twin"):
                db.add(User(
                    username=name, email=f"{name}@example.com",
                    password_hash="x", role="user", active=True,
                ))
            await db.commit()

    async with db_manager.session() as db:
        count = (await db.execute(text("SELECT COUNT(*) FROM users"))).scalar_one()
    assert count == 0


async def test_non_storage_errors_pass_through(db_manager):
    with pytest.raises(KeyError):
        async with db_manager.session():
            raise KeyError("not a storage problem")
