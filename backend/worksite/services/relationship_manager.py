"""Relationship Manager — worker<->project assignments and the available-worker diff.

Invariants:
    - assign() requires BOTH the project and the worker to be owned by the tenant;
      otherwise ResourceNotFoundError (foreign and missing look the same)
    - assign() is idempotent: an existing pair is a successful no-op
    - unassign() never fails on a missing pair; it only deletes rows of the tenant
    - available_workers() never returns a worker assigned to the project

Design Decisions:
    - available_workers filters BEFORE paginating (NOT EXISTS in SQL), so every
      page except the last is full and total counts available workers only
    - Concurrent duplicate assign: the primary key rejects the second insert,
      the loser re-checks and reports success
"""

import logging

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.errors import StorageError
from worksite.core.query_plan import PageRequest, is_storable_int
from worksite.models.project import Project
from worksite.models.worker import Worker
from worksite.models.worker_project import WorkerProject
from worksite.services.scoped_query import fetch_page, get_owned_or_404, owned_by

logger = logging.getLogger(__name__)


class RelationshipManager:
    """Assignments between a tenant's workers and projects."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def assign(
        self, tenant_id: int, project_id: int, worker_id: int,
    ) -> Project:
        """Attach a worker to a project; returns the project with its roster."""
        await get_owned_or_404(self.db, Project, project_id, tenant_id, "Project")
        await get_owned_or_404(self.db, Worker, worker_id, tenant_id, "Worker")

        if not await self._is_assigned(project_id, worker_id):
            self.db.add(WorkerProject(
                worker_id=worker_id, project_id=project_id, user_id=tenant_id,
            ))
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                if not await self._is_assigned(project_id, worker_id):
                    logger.error(
                        "Assignment insert rejected",
                        extra={"user_id": tenant_id, "entity_id": project_id},
                    )
                    raise StorageError("commit")
            else:
                logger.info(
                    f"Worker {worker_id} assigned to project {project_id}",
                    extra={"user_id": tenant_id, "entity_id": project_id},
                )

        return await get_owned_or_404(
            self.db, Project, project_id, tenant_id, "Project",
        )

    async def unassign(
        self, tenant_id: int, project_id: int, worker_id: int,
    ) -> None:
        if not (is_storable_int(project_id) and is_storable_int(worker_id)):
            return
        result = await self.db.execute(
            delete(WorkerProject)
            .where(WorkerProject.project_id == project_id)
            .where(WorkerProject.worker_id == worker_id)
            .where(WorkerProject.user_id == tenant_id)
        )
        await self.db.commit()
        if not result.rowcount:
            logger.debug(
                f"Unassign of worker {worker_id} from project {project_id}: no assignment",
                extra={"user_id": tenant_id},
            )

    async def list_project_workers(
        self, tenant_id: int, project_id: int,
    ) -> list[Worker]:
        project = await get_owned_or_404(
            self.db, Project, project_id, tenant_id, "Project",
        )
        return list(project.workers)

    async def available_workers(
        self, tenant_id: int, project_id: int, page: PageRequest,
    ) -> tuple[list[Worker], int]:
        """Tenant workers not on the project, paginated by id."""
        await get_owned_or_404(self.db, Project, project_id, tenant_id, "Project")
        assigned = exists().where(
            WorkerProject.worker_id == Worker.id,
            WorkerProject.project_id == project_id,
        )
        stmt = (
            owned_by(select(Worker), Worker, tenant_id)
            .where(~assigned)
            .order_by(Worker.id.asc())
        )
        return await fetch_page(self.db, stmt, page)

    async def _is_assigned(self, project_id: int, worker_id: int) -> bool:
        result = await self.db.execute(
            select(WorkerProject.worker_id)
            .where(WorkerProject.project_id == project_id)
            .where(WorkerProject.worker_id == worker_id)
        )
        return result.scalar_one_or_none() is not None
