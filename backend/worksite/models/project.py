"""Project ORM — a worksite owned by one tenant.

Invariants:
    - user_id is set at creation and never changed
    - status in {active, completed, on_hold, cancelled}
    - workers is a read-only view over worker_projects; writes go through
      RelationshipManager so the denormalized user_id is always set

Design Decisions:
    - Composite (latitude, longitude) index for map-area lookups
    - workers loaded with selectin: project detail always shows its roster
"""

from datetime import date, datetime, timezone

from sqlalchemy import (
    Date, DateTime, Float, ForeignKey, Index, Integer, String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksite.db.base import Base


class Project(Base):
    """Project owned by one tenant."""
    __tablename__ = "projects"
    __table_args__ = (
        Index("idx_projects_location", "latitude", "longitude"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", index=True,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    workers: Mapped[list["Worker"]] = relationship(
        "Worker", secondary="worker_projects",
        viewonly=True, lazy="selectin", order_by="Worker.id",
    )
