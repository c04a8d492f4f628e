"""Admin Routes — cross-tenant user management and activity history.

Invariants:
    - Every route depends on require_admin (403 for non-admins, 401 unauthenticated)
    - Status/role changes are logged with the admin as actor and the target as entity
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.api.deps import get_activity_logger, require_admin
from worksite.config import get_settings
from worksite.core.domain_types import EntityType, Identity, LogType
from worksite.core.query_plan import (
    USER_QUERY, compose_plan, parse_user_filters, resolve_page,
)
from worksite.infrastructure.database import get_db
from worksite.schemas.activity_log import ActivityLogResponse
from worksite.schemas.pagination import Page, page_of
from worksite.schemas.user import UserResponse, UserRoleUpdate, UserStatusUpdate
from worksite.services.activity_logger import ActivityLogger
from worksite.services.admin_service import AdminService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/users", response_model=Page[UserResponse])
async def list_users(
    request: Request,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List every account. Filters: search, role, active."""
    plan = compose_plan(
        request.query_params, USER_QUERY, parse_user_filters,
        get_settings().max_page_size,
    )
    users, total = await AdminService(db).list_all_users(plan)
    return page_of(UserResponse, users, total, plan.page.page, plan.page.page_size)


@router.put("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: int,
    body: UserStatusUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    user = await activity.track(
        AdminService(db).update_user_status(user_id, body.active),
        log_type=LogType.UPDATE,
        entity_type=EntityType.USER,
        user_id=identity.user_id,
        entity_id=user_id,
        details={"active": body.active},
    )
    return UserResponse.model_validate(user)


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    body: UserRoleUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    user = await activity.track(
        AdminService(db).update_user_role(user_id, body.role),
        log_type=LogType.UPDATE,
        entity_type=EntityType.USER,
        user_id=identity.user_id,
        entity_id=user_id,
        details={"role": body.role.value},
    )
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}/activity", response_model=Page[ActivityLogResponse])
async def get_user_activity(
    user_id: int,
    request: Request,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Activity of one user, most recent first."""
    page = resolve_page(
        request.query_params.get("page"),
        request.query_params.get("page_size"),
        get_settings().max_page_size,
    )
    entries, total = await AdminService(db).get_user_activity(user_id, page)
    return page_of(ActivityLogResponse, entries, total, page.page, page.page_size)
