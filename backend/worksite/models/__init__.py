"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Worker and Project rows are owned by exactly one User (user_id)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from worksite.models.user import User  # noqa: F401
from worksite.models.worker import Worker  # noqa: F401
from worksite.models.project import Project  # noqa: F401
from worksite.models.worker_project import WorkerProject  # noqa: F401
from worksite.models.activity_log import ActivityLog  # noqa: F401
