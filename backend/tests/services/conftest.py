"""Service test fixtures — async DB, activity log writer, FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - app.state.db and app.state.activity_log are set by hand: ASGITransport
      does not run the lifespan
    - Tests call `await activity_dispatcher.flush()` before reading the log

Design Decisions:
    - SQLite file over :memory: the request session and the log writer open
      separate connections, which an in-memory database would not share
    - Users are inserted directly and tokens minted with create_access_token:
      most tests are about workers/projects, not the auth flow
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from worksite.db.base import Base
from worksite.infrastructure.database import DatabaseSessionManager
from worksite.infrastructure.security import create_access_token, get_password_hash
from worksite.main import app
from worksite.models.user import User
from worksite.services.activity_logger import ActivityLogDispatcher
import worksite.models  # noqa: F401


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def activity_dispatcher(db_manager):
    dispatcher = ActivityLogDispatcher(db_manager.session, max_queue_size=100)
    dispatcher.start()
    yield dispatcher
    await dispatcher.stop()


@pytest.fixture
async def client(db_manager, activity_dispatcher):
    """FastAPI test client bound to the test DB and log writer."""
    app.state.db = db_manager
    app.state.activity_log = activity_dispatcher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    del app.state.db
    del app.state.activity_log


@pytest.fixture
def make_user(test_session_factory):
    """Insert an account directly; returns the persisted User."""
    async def _make(
        username: str, role: str = "user", active: bool = True,
        password: str = "secret123",
    ) -> User:
        async with test_session_factory() as session:
            user = User(
                username=username,
                email=f"{username}@example.com",
                password_hash=get_password_hash(password),
                role=role,
                active=active,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user
    return _make


@pytest.fixture
def headers_for():
    """Bearer header for a user, minted without going through login."""
    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob")


@pytest.fixture
async def admin(make_user):
    return await make_user("root", role="admin")
