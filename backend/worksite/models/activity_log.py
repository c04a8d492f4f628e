"""ActivityLog ORM — append-only audit trail of mutations and auth attempts.

Invariants:
    - Rows are inserted by the activity log dispatcher only; never updated or deleted
    - user_id is nullable: failed logins for unknown usernames have no account
    - created_at is the time the event was captured, not the time it was written

Design Decisions:
    - Logging table, not enforcement: no business logic reads it except the admin surface
    - JSON details column: free-form context per log type
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from worksite.db.base import Base


class ActivityLog(Base):
    """Activity log entry."""
    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True,
    )
    log_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True,
    )
    entity_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True,
    )
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
