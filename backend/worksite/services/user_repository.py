"""User Repository — account lookups for auth and the admin surface.

Invariants:
    - No tenant predicate: callers are the auth flow or an admin
    - Users are never deleted; status and role are the only admin mutations
"""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.domain_types import Role
from worksite.core.payload_checks import require_fields
from worksite.core.query_plan import (
    QueryPlan, UserFilters, USER_QUERY, is_storable_int,
)
from worksite.core.errors import DuplicateAccountError, ResourceNotFoundError
from worksite.models.user import User
from worksite.services.scoped_query import apply_search, apply_sort, fetch_page


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int, for_update: bool = False) -> User:
        if not is_storable_int(user_id):
            raise ResourceNotFoundError("User", user_id)
        stmt = select(User).where(User.id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        user = (await self.db.execute(stmt)).scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.username == username),
        )
        return result.scalar_one_or_none()

    async def username_or_email_taken(self, username: str, email: str) -> bool:
        result = await self.db.execute(
            select(User.id)
            .where(or_(User.username == username, User.email == email))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def create(self, user: User) -> User:
        require_fields(user, ("username", "email", "password_hash"))
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # unique username/email lost a race with a concurrent registration
            await self.db.rollback()
            raise DuplicateAccountError()
        await self.db.refresh(user)
        return user

    async def list_all(
        self, plan: QueryPlan[UserFilters],
    ) -> tuple[list[User], int]:
        f = plan.filters
        stmt = apply_search(select(User), User, USER_QUERY, f.search)
        if f.role is not None:
            stmt = stmt.where(User.role == f.role.value)
        if f.active is not None:
            stmt = stmt.where(User.active.is_(f.active))
        stmt = apply_sort(stmt, User, plan.sort)
        return await fetch_page(self.db, stmt, plan.page)

    async def update_status(self, user_id: int, active: bool) -> User:
        user = await self.get_by_id(user_id, for_update=True)
        user.active = active
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def update_role(self, user_id: int, role: Role) -> User:
        user = await self.get_by_id(user_id, for_update=True)
        user.role = role.value
        await self.db.commit()
        await self.db.refresh(user)
        return user
