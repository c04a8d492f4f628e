"""Admin Service — cross-tenant user listing, status/role changes, activity history.

Invariants:
    - No tenant predicate anywhere: the caller has already passed the admin check
    - A missing target user is ResourceNotFoundError
"""

from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.domain_types import Role
from worksite.core.query_plan import PageRequest, QueryPlan, UserFilters
from worksite.models.activity_log import ActivityLog
from worksite.models.user import User
from worksite.services.activity_log_repository import ActivityLogRepository
from worksite.services.user_repository import UserRepository


class AdminService:
    def __init__(self, db: AsyncSession):
        self.users = UserRepository(db)
        self.logs = ActivityLogRepository(db)

    async def list_all_users(
        self, plan: QueryPlan[UserFilters],
    ) -> tuple[list[User], int]:
        return await self.users.list_all(plan)

    async def update_user_status(self, user_id: int, active: bool) -> User:
        return await self.users.update_status(user_id, active)

    async def update_user_role(self, user_id: int, role: Role) -> User:
        return await self.users.update_role(user_id, role)

    async def get_user_activity(
        self, user_id: int, page: PageRequest,
    ) -> tuple[list[ActivityLog], int]:
        """Newest-first activity of one user."""
        await self.users.get_by_id(user_id)
        return await self.logs.list_for_user(user_id, page)
