"""API Dependencies — identity resolution, role check, activity logger.

Invariants:
    - get_current_identity reloads the user on every request: role and active
      changes made by an admin apply to the very next call
    - Missing/invalid/expired token, unknown user, inactive user -> UnauthenticatedError
    - require_admin -> ForbiddenError for non-admins
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.domain_types import Identity, Role, TenantId
from worksite.core.errors import ForbiddenError, UnauthenticatedError
from worksite.core.query_plan import is_storable_int
from worksite.infrastructure.database import get_db
from worksite.infrastructure.security import decode_access_token
from worksite.models.user import User
from worksite.services.activity_logger import ActivityLogDispatcher, ActivityLogger

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    if credentials is None:
        raise UnauthenticatedError()
    claims = decode_access_token(credentials.credentials)
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise UnauthenticatedError("Invalid token")
    if not is_storable_int(user_id):
        raise UnauthenticatedError("Invalid token")

    user = await db.get(User, user_id)
    if user is None or not user.active:
        raise UnauthenticatedError("Account is not available")
    return Identity(user_id=TenantId(user.id), role=Role(user.role))


async def require_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    if not identity.is_admin:
        raise ForbiddenError("Admin role required")
    return identity


def get_activity_logger(request: Request) -> ActivityLogger:
    dispatcher: ActivityLogDispatcher | None = getattr(
        request.app.state, "activity_log", None,
    )
    if dispatcher is None:
        raise RuntimeError("Activity log dispatcher not initialized")
    return ActivityLogger(dispatcher)
