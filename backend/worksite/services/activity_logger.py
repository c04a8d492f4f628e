"""Activity Logger — best-effort, out-of-band pipeline for the activity log.

Invariants:
    - The caller's result never waits on a log write: track() only enqueues
    - A log failure (full queue, store outage, anything else) is counted and sent
      to the fallback logger; it never raises into the caller
    - Successful operations are logged; failures only for login/register
    - One writer task consumes the queue in FIFO order, so entries are written in
      the order they were submitted

Design Decisions:
    - Bounded asyncio.Queue + single background task over BackgroundTasks:
      entries from every route share one ordered writer, and the queue bound
      caps memory when the store is down
    - The writer opens its OWN session per entry via the injected session
      factory: the request session may already be closed
"""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, suppress
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.activity_events import (
    ActivityEvent, auth_log_type, is_auth_action, should_log,
)
from worksite.core.domain_types import EntityType, LogType
from worksite.core.errors import LogWriteFailure, WorksiteError
from worksite.infrastructure.observability import ACTIVITY_FALLBACK_LOGGER
from worksite.services.activity_log_repository import ActivityLogRepository

logger = logging.getLogger(__name__)
fallback_logger = logging.getLogger(ACTIVITY_FALLBACK_LOGGER)

T = TypeVar("T")
SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]
ResultValue = int | None | Callable[[Any], int | None]


def _record_fallback(event: ActivityEvent, failure: LogWriteFailure) -> None:
    fallback_logger.warning(
        failure.message,
        extra={
            "user_id": event.user_id,
            "log_type": event.log_type.value,
            "entity_type": event.entity_type.value,
            "entity_id": event.entity_id,
            "reason": failure.reason,
            "event_created_at": event.created_at.isoformat(),
        },
    )


class ActivityLogDispatcher:
    """Bounded queue drained by one background writer task."""

    def __init__(self, session_factory: SessionFactory, max_queue_size: int = 1000):
        self._session_factory = session_factory
        self._queue: asyncio.Queue[ActivityEvent] = asyncio.Queue(
            maxsize=max_queue_size,
        )
        self._worker: asyncio.Task | None = None
        self.written = 0
        self.failed = 0
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        if not self.running:
            self._worker = asyncio.create_task(
                self._run(), name="activity-log-writer",
            )
            logger.info("Activity log writer started")

    def submit(self, event: ActivityEvent) -> bool:
        """Enqueue without waiting. False when the entry had to be dropped."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            _record_fallback(event, LogWriteFailure("queue full"))
            return False
        return True

    async def flush(self) -> None:
        """Wait until every submitted entry has been attempted."""
        self.start()
        await self._queue.join()

    async def stop(self) -> None:
        """Drain the queue, then stop the writer. Called once on shutdown."""
        if self._worker is None:
            return
        await self.flush()
        self._worker.cancel()
        with suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None
        logger.info(
            f"Activity log writer stopped: written={self.written} "
            f"failed={self.failed} dropped={self.dropped}",
        )

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._write(event)
                self.written += 1
            except Exception as e:
                self.failed += 1
                reason = e.code if isinstance(e, WorksiteError) else type(e).__name__
                _record_fallback(event, LogWriteFailure(reason))
            finally:
                self._queue.task_done()

    async def _write(self, event: ActivityEvent) -> None:
        async with self._session_factory() as db:
            await ActivityLogRepository(db).append(event)


def _resolve(value: ResultValue, result: Any) -> int | None:
    if callable(value):
        return value(result) if result is not None else None
    return value


class ActivityLogger:
    """Pipeline stage wrapped around each mutating or auth operation."""

    def __init__(self, dispatcher: ActivityLogDispatcher):
        self._dispatcher = dispatcher

    async def track(
        self,
        operation: Awaitable[T],
        *,
        log_type: LogType,
        entity_type: EntityType,
        user_id: ResultValue,
        entity_id: ResultValue = None,
        details: dict[str, Any] | None = None,
    ) -> T:
        """Await the operation, then enqueue its log entry per its outcome.

        For auth actions `log_type` is the action (LOGIN/REGISTER); the stored
        type reflects the outcome. Exceptions from the operation propagate
        unchanged.
        """
        try:
            result = await operation
        except Exception as e:
            if should_log(log_type, succeeded=False):
                failure_details = dict(details or {})
                failure_details["reason"] = (
                    e.code if isinstance(e, WorksiteError) else "INTERNAL_ERROR"
                )
                self.record(ActivityEvent(
                    log_type=auth_log_type(log_type, succeeded=False),
                    entity_type=entity_type,
                    user_id=_resolve(user_id, None),
                    entity_id=_resolve(entity_id, None),
                    details=failure_details,
                ))
            raise

        stored_type = (
            auth_log_type(log_type, succeeded=True)
            if is_auth_action(log_type) else log_type
        )
        self.record(ActivityEvent(
            log_type=stored_type,
            entity_type=entity_type,
            user_id=_resolve(user_id, result),
            entity_id=_resolve(entity_id, result),
            details=details,
        ))
        return result

    def record(self, event: ActivityEvent) -> None:
        """Hand an event to the dispatcher. Never raises."""
        try:
            self._dispatcher.submit(event)
        except Exception as e:
            _record_fallback(event, LogWriteFailure(type(e).__name__))
