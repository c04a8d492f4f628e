"""Project Repository — tenant-scoped CRUD and filtered listing for projects.

Invariants:
    - All methods except create() take the tenant id; create() requires
      project.user_id to be set by the caller
    - Returned projects always carry a freshly loaded `workers` roster
    - delete() removes the project's assignments in the same transaction
"""

import logging
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.payload_checks import check_project
from worksite.core.query_plan import PROJECT_QUERY, ProjectFilters, QueryPlan
from worksite.models.project import Project
from worksite.models.worker_project import WorkerProject
from worksite.services.scoped_query import (
    apply_search, apply_sort, fetch_page, get_owned_or_404, owned_by,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name", "description", "status", "start_date", "end_date",
    "latitude", "longitude",
)


def _plain(value: Any) -> Any:
    """Store enum members by value."""
    return getattr(value, "value", value)


class ProjectRepository:
    """Projects of one tenant."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self, tenant_id: int, plan: QueryPlan[ProjectFilters],
    ) -> tuple[list[Project], int]:
        f = plan.filters
        stmt = owned_by(select(Project), Project, tenant_id)
        stmt = apply_search(stmt, Project, PROJECT_QUERY, f.search)
        if f.name:
            stmt = stmt.where(Project.name.icontains(f.name, autoescape=True))
        if f.status:
            stmt = stmt.where(Project.status == f.status)
        stmt = apply_sort(stmt, Project, plan.sort)
        return await fetch_page(self.db, stmt, plan.page)

    async def get_by_id(self, tenant_id: int, project_id: int) -> Project:
        return await get_owned_or_404(
            self.db, Project, project_id, tenant_id, "Project",
        )

    async def create(self, project: Project) -> Project:
        project.status = _plain(project.status)
        check_project(project)
        self.db.add(project)
        await self.db.commit()
        logger.info(
            "Project created",
            extra={"user_id": project.user_id, "entity_id": project.id},
        )
        return await self.get_by_id(project.user_id, project.id)

    async def update(
        self, tenant_id: int, project_id: int, changes: Mapping[str, Any],
    ) -> Project:
        project = await get_owned_or_404(
            self.db, Project, project_id, tenant_id, "Project", for_update=True,
        )
        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(project, field, _plain(changes[field]))
        check_project(project)
        await self.db.commit()
        return await self.get_by_id(tenant_id, project_id)

    async def delete(self, tenant_id: int, project_id: int) -> None:
        project = await get_owned_or_404(
            self.db, Project, project_id, tenant_id, "Project", for_update=True,
        )
        await self.db.execute(
            delete(WorkerProject).where(WorkerProject.project_id == project.id),
        )
        await self.db.delete(project)
        await self.db.commit()
        logger.info(
            "Project deleted",
            extra={"user_id": tenant_id, "entity_id": project_id},
        )
