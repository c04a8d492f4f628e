"""Activity Events — pure description of what the activity log records and when.

Invariants:
    - Successful operations are always logged
    - Failed operations are logged ONLY for authentication (login/register),
      under a distinct *_failed log type
    - created_at is captured when the event is built, not when it is written

Design Decisions:
    - Event is a frozen dataclass: the dispatcher queue holds immutable values,
      never ORM instances bound to a request session
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from worksite.core.domain_types import EntityType, LogType

_AUTH_OUTCOMES: dict[LogType, tuple[LogType, LogType]] = {
    LogType.LOGIN: (LogType.LOGIN, LogType.LOGIN_FAILED),
    LogType.REGISTER: (LogType.REGISTER, LogType.REGISTER_FAILED),
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ActivityEvent:
    """One append-only activity log entry, ready to persist."""
    log_type: LogType
    entity_type: EntityType
    user_id: int | None
    entity_id: int | None = None
    details: dict[str, Any] | None = None
    created_at: datetime = field(default_factory=_utc_now)


def is_auth_action(log_type: LogType) -> bool:
    return log_type in _AUTH_OUTCOMES


def auth_log_type(action: LogType, succeeded: bool) -> LogType:
    """Map an auth action plus its outcome to the log type to record."""
    if action not in _AUTH_OUTCOMES:
        raise ValueError(f"{action.value} is not an authentication action")
    ok, failed = _AUTH_OUTCOMES[action]
    return ok if succeeded else failed


def should_log(log_type: LogType, succeeded: bool) -> bool:
    """Only auth actions are recorded on failure."""
    return succeeded or is_auth_action(log_type)
