"""Auth Routes — register, login, current account.

Invariants:
    - register/login outcomes are recorded by AuthService, success or failure
    - A register/login body rejected by validation never reaches AuthService;
      the validation handler records it as a failed attempt instead
    - Responses never include password hashes
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.api.deps import get_activity_logger, get_current_identity
from worksite.core.activity_events import ActivityEvent, auth_log_type
from worksite.core.domain_types import EntityType, Identity, LogType
from worksite.infrastructure.database import get_db
from worksite.schemas.user import (
    LoginRequest, RegisterRequest, TokenResponse, UserResponse,
)
from worksite.services.activity_logger import ActivityLogger
from worksite.services.auth_service import AuthService
from worksite.services.user_repository import UserRepository

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

REJECTED_PAYLOAD_ACTIONS = {
    f"{router.prefix}/login": LogType.LOGIN,
    f"{router.prefix}/register": LogType.REGISTER,
}


def record_rejected_payload(request: Request, body: Any) -> None:
    """Log a login/register attempt whose body failed validation."""
    action = REJECTED_PAYLOAD_ACTIONS.get(request.url.path)
    dispatcher = getattr(request.app.state, "activity_log", None)
    if action is None or dispatcher is None:
        return
    details: dict[str, Any] = {"reason": "VALIDATION_ERROR"}
    username = body.get("username") if isinstance(body, dict) else None
    if isinstance(username, str):
        details["username"] = username[:50]
    ActivityLogger(dispatcher).record(ActivityEvent(
        log_type=auth_log_type(action, succeeded=False),
        entity_type=EntityType.USER,
        user_id=None,
        details=details,
    ))


@router.post(
    "/register", response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    user, token = await AuthService(db, activity).register(
        body.username, body.email, body.password,
    )
    return TokenResponse(
        access_token=token, user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    user, token = await AuthService(db, activity).login(
        body.username, body.password,
    )
    return TokenResponse(
        access_token=token, user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def me(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).get_by_id(identity.user_id)
    return UserResponse.model_validate(user)
