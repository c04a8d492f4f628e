"""Payload Checks — last-line validation before an entity reaches storage.

Invariants:
    - Raise PayloadValidationError naming the first offending field
    - Never touch the database; operate on plain attribute access
    - The owning user_id must be set by the caller before create

Design Decisions:
    - Schemas (pydantic) validate the HTTP boundary; these checks guard the
      repositories themselves, which can be called without going through HTTP
"""

from typing import Any

from worksite.core.domain_types import ProjectStatus
from worksite.core.errors import PayloadValidationError

WORKER_REQUIRED = ("name", "position", "age", "salary")
PROJECT_REQUIRED = ("name", "status", "start_date", "latitude", "longitude")

WORKER_AGE_RANGE = (18, 100)
LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def require_owner(entity: Any) -> None:
    if getattr(entity, "user_id", None) is None:
        raise PayloadValidationError("user_id must be set before create", "user_id")


def require_fields(entity: Any, fields: tuple[str, ...]) -> None:
    for name in fields:
        value = getattr(entity, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PayloadValidationError(f"{name} is required", name)


def require_in_range(
    entity: Any, name: str, bounds: tuple[float, float],
) -> None:
    value = getattr(entity, name)
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadValidationError(f"{name} must be a number", name)
    if not low <= value <= high:
        raise PayloadValidationError(
            f"{name} must be between {low} and {high}", name,
        )


def check_worker(worker: Any) -> None:
    require_owner(worker)
    require_fields(worker, WORKER_REQUIRED)
    require_in_range(worker, "age", WORKER_AGE_RANGE)
    if isinstance(worker.salary, bool) or not isinstance(worker.salary, int):
        raise PayloadValidationError("salary must be an integer", "salary")
    if worker.salary < 0:
        raise PayloadValidationError("salary must be at least 0", "salary")


def check_project(project: Any) -> None:
    require_owner(project)
    require_fields(project, PROJECT_REQUIRED)
    status = getattr(project.status, "value", project.status)
    if status not in {s.value for s in ProjectStatus}:
        raise PayloadValidationError(
            "status must be one of: active, completed, on_hold, cancelled",
            "status",
        )
    require_in_range(project, "latitude", LATITUDE_RANGE)
    require_in_range(project, "longitude", LONGITUDE_RANGE)
    if project.end_date is not None and project.end_date < project.start_date:
        raise PayloadValidationError(
            "end_date must not be before start_date", "end_date",
        )
