"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TenantId wraps the owning user's integer id — repositories take it explicitly
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and store in String columns without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TenantId = NewType("TenantId", int)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Binary role model: admins bypass tenant scoping on the admin surface."""
    USER = "user"
    ADMIN = "admin"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class EntityType(str, Enum):
    """Entity kinds referenced by activity log entries."""
    WORKER = "worker"
    PROJECT = "project"
    USER = "user"


class LogType(str, Enum):
    """Activity log entry kinds. Auth outcomes are distinct types."""
    LOGIN = "login"
    LOGIN_FAILED = "login_failed"
    REGISTER = "register"
    REGISTER_FAILED = "register_failed"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ASSIGN = "assign"
    UNASSIGN = "unassign"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Identity ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Identity:
    """Resolved caller: the tenant id plus the role used for admin checks."""
    user_id: TenantId
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
