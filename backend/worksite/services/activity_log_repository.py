"""Activity Log Repository — append and per-user read of activity entries.

Invariants:
    - append() is the only write; there is no update or delete
    - list_for_user() orders newest first, id descending as tiebreak
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.activity_events import ActivityEvent
from worksite.core.query_plan import PageRequest
from worksite.models.activity_log import ActivityLog
from worksite.services.scoped_query import fetch_page


class ActivityLogRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(self, event: ActivityEvent) -> ActivityLog:
        entry = ActivityLog(
            user_id=event.user_id,
            log_type=event.log_type.value,
            entity_type=event.entity_type.value,
            entity_id=event.entity_id,
            details=event.details,
            created_at=event.created_at,
        )
        self.db.add(entry)
        await self.db.commit()
        return entry

    async def list_for_user(
        self, user_id: int, page: PageRequest,
    ) -> tuple[list[ActivityLog], int]:
        stmt = (
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        )
        return await fetch_page(self.db, stmt, page)
