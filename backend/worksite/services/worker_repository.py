"""Worker Repository — tenant-scoped CRUD and filtered listing for workers.

Invariants:
    - All methods except create() take the tenant id; create() requires
      worker.user_id to be set by the caller
    - update() writes only name/position/age/salary; user_id never changes
    - delete() removes the worker's assignments in the same transaction
"""

import logging
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.payload_checks import check_worker
from worksite.core.query_plan import QueryPlan, WorkerFilters, WORKER_QUERY
from worksite.models.worker import Worker
from worksite.models.worker_project import WorkerProject
from worksite.services.scoped_query import (
    apply_search, apply_sort, fetch_page, get_owned_or_404, owned_by,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "position", "age", "salary")


class WorkerRepository:
    """Workers of one tenant."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self, tenant_id: int, plan: QueryPlan[WorkerFilters],
    ) -> tuple[list[Worker], int]:
        f = plan.filters
        stmt = owned_by(select(Worker), Worker, tenant_id)
        stmt = apply_search(stmt, Worker, WORKER_QUERY, f.search)
        if f.position:
            stmt = stmt.where(Worker.position.icontains(f.position, autoescape=True))
        if f.min_age is not None:
            stmt = stmt.where(Worker.age >= f.min_age)
        if f.max_age is not None:
            stmt = stmt.where(Worker.age <= f.max_age)
        if f.min_salary is not None:
            stmt = stmt.where(Worker.salary >= f.min_salary)
        if f.max_salary is not None:
            stmt = stmt.where(Worker.salary <= f.max_salary)
        stmt = apply_sort(stmt, Worker, plan.sort)
        return await fetch_page(self.db, stmt, plan.page)

    async def get_by_id(self, tenant_id: int, worker_id: int) -> Worker:
        return await get_owned_or_404(
            self.db, Worker, worker_id, tenant_id, "Worker",
        )

    async def create(self, worker: Worker) -> Worker:
        check_worker(worker)
        self.db.add(worker)
        await self.db.commit()
        await self.db.refresh(worker)
        logger.info(
            "Worker created",
            extra={"user_id": worker.user_id, "entity_id": worker.id},
        )
        return worker

    async def update(
        self, tenant_id: int, worker_id: int, changes: Mapping[str, Any],
    ) -> Worker:
        worker = await get_owned_or_404(
            self.db, Worker, worker_id, tenant_id, "Worker", for_update=True,
        )
        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(worker, field, changes[field])
        check_worker(worker)
        await self.db.commit()
        await self.db.refresh(worker)
        return worker

    async def delete(self, tenant_id: int, worker_id: int) -> None:
        worker = await get_owned_or_404(
            self.db, Worker, worker_id, tenant_id, "Worker", for_update=True,
        )
        await self.db.execute(
            delete(WorkerProject).where(WorkerProject.worker_id == worker.id),
        )
        await self.db.delete(worker)
        await self.db.commit()
        logger.info(
            "Worker deleted",
            extra={"user_id": tenant_id, "entity_id": worker_id},
        )
