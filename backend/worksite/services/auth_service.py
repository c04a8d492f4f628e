"""Auth Service — registration and login, both outcomes recorded in the activity log.

Invariants:
    - Every login attempt produces exactly one entry: login or login_failed
    - Every registration attempt produces exactly one entry: register or register_failed
    - Unknown username and wrong password fail with the same error and message
    - New accounts are always role=user, active=True
    - Password hashing and verification run in the threadpool, off the event loop
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from worksite.core.domain_types import EntityType, LogType, Role
from worksite.core.errors import (
    DuplicateAccountError, ForbiddenError, UnauthenticatedError,
)
from worksite.infrastructure.security import (
    create_access_token, get_password_hash, verify_password,
)
from worksite.models.user import User
from worksite.services.activity_logger import ActivityLogger
from worksite.services.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession, activity: ActivityLogger):
        self.users = UserRepository(db)
        self.activity = activity

    async def register(
        self, username: str, email: str, password: str,
    ) -> tuple[User, str]:
        async def _create() -> User:
            if await self.users.username_or_email_taken(username, email):
                raise DuplicateAccountError()
            return await self.users.create(User(
                username=username,
                email=email,
                password_hash=await run_in_threadpool(get_password_hash, password),
                role=Role.USER.value,
                active=True,
            ))

        user = await self.activity.track(
            _create(),
            log_type=LogType.REGISTER,
            entity_type=EntityType.USER,
            user_id=lambda u: u.id,
            entity_id=lambda u: u.id,
            details={"username": username},
        )
        logger.info("User registered", extra={"user_id": user.id})
        return user, create_access_token(user.id, user.role)

    async def login(self, username: str, password: str) -> tuple[User, str]:
        known = await self.users.find_by_username(username)

        async def _authenticate() -> User:
            if known is None or not await run_in_threadpool(
                verify_password, password, known.password_hash,
            ):
                raise UnauthenticatedError("Invalid username or password")
            if not known.active:
                raise ForbiddenError("Account is disabled")
            return known

        user = await self.activity.track(
            _authenticate(),
            log_type=LogType.LOGIN,
            entity_type=EntityType.USER,
            user_id=known.id if known else None,
            entity_id=known.id if known else None,
            details={"username": username},
        )
        return user, create_access_token(user.id, user.role)
