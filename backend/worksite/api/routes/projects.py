"""Project Routes — tenant-scoped project CRUD plus worker assignment.

Invariants:
    - The tenant is always the authenticated user; user_id in bodies is ignored
    - assign/unassign/create/update/delete are logged after they succeed
    - available workers of a missing or foreign project -> 404
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.api.deps import get_activity_logger, get_current_identity
from worksite.config import get_settings
from worksite.core.domain_types import EntityType, Identity, LogType
from worksite.core.query_plan import (
    PROJECT_QUERY, compose_plan, parse_project_filters, resolve_page,
)
from worksite.infrastructure.database import get_db
from worksite.models.project import Project
from worksite.schemas.pagination import Page, page_of
from worksite.schemas.project import (
    AssignWorkerRequest, ProjectPayload, ProjectResponse,
)
from worksite.schemas.worker import WorkerResponse
from worksite.services.activity_logger import ActivityLogger
from worksite.services.project_repository import ProjectRepository
from worksite.services.relationship_manager import RelationshipManager

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=Page[ProjectResponse])
async def list_projects(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """List projects. Filters: search, name, status."""
    plan = compose_plan(
        request.query_params, PROJECT_QUERY, parse_project_filters,
        get_settings().max_page_size,
    )
    projects, total = await ProjectRepository(db).list(identity.user_id, plan)
    return page_of(
        ProjectResponse, projects, total, plan.page.page, plan.page.page_size,
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    project = await ProjectRepository(db).get_by_id(identity.user_id, project_id)
    return ProjectResponse.model_validate(project)


@router.post(
    "", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectPayload,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    project = Project(**body.model_dump(), user_id=identity.user_id)
    project = await activity.track(
        ProjectRepository(db).create(project),
        log_type=LogType.CREATE,
        entity_type=EntityType.PROJECT,
        user_id=identity.user_id,
        entity_id=lambda p: p.id,
    )
    return ProjectResponse.model_validate(project)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    body: ProjectPayload,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    project = await activity.track(
        ProjectRepository(db).update(
            identity.user_id, project_id, body.model_dump(),
        ),
        log_type=LogType.UPDATE,
        entity_type=EntityType.PROJECT,
        user_id=identity.user_id,
        entity_id=project_id,
    )
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    await activity.track(
        ProjectRepository(db).delete(identity.user_id, project_id),
        log_type=LogType.DELETE,
        entity_type=EntityType.PROJECT,
        user_id=identity.user_id,
        entity_id=project_id,
    )


# ─── Assignments ─────────────────────────────────────────────────

@router.post("/{project_id}/workers", response_model=ProjectResponse)
async def assign_worker(
    project_id: int,
    body: AssignWorkerRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """Assign a worker to the project. Re-assigning is a no-op."""
    project = await activity.track(
        RelationshipManager(db).assign(identity.user_id, project_id, body.worker_id),
        log_type=LogType.ASSIGN,
        entity_type=EntityType.PROJECT,
        user_id=identity.user_id,
        entity_id=project_id,
        details={"worker_id": body.worker_id},
    )
    return ProjectResponse.model_validate(project)


@router.get("/{project_id}/workers", response_model=list[WorkerResponse])
async def list_project_workers(
    project_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    workers = await RelationshipManager(db).list_project_workers(
        identity.user_id, project_id,
    )
    return [WorkerResponse.model_validate(w) for w in workers]


@router.get(
    "/{project_id}/workers/available", response_model=Page[WorkerResponse],
)
async def get_available_workers(
    project_id: int,
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Tenant workers not yet assigned to the project."""
    page = resolve_page(
        request.query_params.get("page"),
        request.query_params.get("page_size"),
        get_settings().max_page_size,
    )
    workers, total = await RelationshipManager(db).available_workers(
        identity.user_id, project_id, page,
    )
    return page_of(WorkerResponse, workers, total, page.page, page.page_size)


@router.delete(
    "/{project_id}/workers/{worker_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def unassign_worker(
    project_id: int,
    worker_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    await activity.track(
        RelationshipManager(db).unassign(identity.user_id, project_id, worker_id),
        log_type=LogType.UNASSIGN,
        entity_type=EntityType.PROJECT,
        user_id=identity.user_id,
        entity_id=project_id,
        details={"worker_id": worker_id},
    )
