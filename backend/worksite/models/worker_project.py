"""WorkerProject ORM — the assignment join between workers and projects.

Invariants:
    - (worker_id, project_id) is the primary key: one row per pair
    - user_id equals the owner of both the worker and the project
    - Rows are removed with their worker or project (FK ON DELETE CASCADE,
      and explicitly by the repositories inside the delete transaction)

Design Decisions:
    - user_id denormalized: tenant filtering without joining workers/projects
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from worksite.db.base import Base


class WorkerProject(Base):
    """Assignment of one worker to one project."""
    __tablename__ = "worker_projects"

    worker_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workers.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True, index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
