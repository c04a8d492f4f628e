"""Worker Routes — tenant-scoped worker CRUD with filtered listing.

Invariants:
    - The tenant is always the authenticated user; user_id in bodies is ignored
    - create/update/delete are logged after they succeed
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.api.deps import get_activity_logger, get_current_identity
from worksite.config import get_settings
from worksite.core.domain_types import EntityType, Identity, LogType
from worksite.core.query_plan import WORKER_QUERY, compose_plan, parse_worker_filters
from worksite.infrastructure.database import get_db
from worksite.models.worker import Worker
from worksite.schemas.pagination import Page, page_of
from worksite.schemas.worker import WorkerPayload, WorkerResponse
from worksite.services.activity_logger import ActivityLogger
from worksite.services.worker_repository import WorkerRepository

router = APIRouter(prefix="/api/v1/workers", tags=["workers"])


@router.get("", response_model=Page[WorkerResponse])
async def list_workers(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """List workers. Filters: search, position, min/max_age, min/max_salary."""
    plan = compose_plan(
        request.query_params, WORKER_QUERY, parse_worker_filters,
        get_settings().max_page_size,
    )
    workers, total = await WorkerRepository(db).list(identity.user_id, plan)
    return page_of(
        WorkerResponse, workers, total, plan.page.page, plan.page.page_size,
    )


@router.get("/{worker_id}", response_model=WorkerResponse)
async def get_worker(
    worker_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    worker = await WorkerRepository(db).get_by_id(identity.user_id, worker_id)
    return WorkerResponse.model_validate(worker)


@router.post(
    "", response_model=WorkerResponse, status_code=status.HTTP_201_CREATED,
)
async def create_worker(
    body: WorkerPayload,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    worker = Worker(**body.model_dump(), user_id=identity.user_id)
    worker = await activity.track(
        WorkerRepository(db).create(worker),
        log_type=LogType.CREATE,
        entity_type=EntityType.WORKER,
        user_id=identity.user_id,
        entity_id=lambda w: w.id,
    )
    return WorkerResponse.model_validate(worker)


@router.put("/{worker_id}", response_model=WorkerResponse)
async def update_worker(
    worker_id: int,
    body: WorkerPayload,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    worker = await activity.track(
        WorkerRepository(db).update(identity.user_id, worker_id, body.model_dump()),
        log_type=LogType.UPDATE,
        entity_type=EntityType.WORKER,
        user_id=identity.user_id,
        entity_id=worker_id,
    )
    return WorkerResponse.model_validate(worker)


@router.delete("/{worker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_worker(
    worker_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    await activity.track(
        WorkerRepository(db).delete(identity.user_id, worker_id),
        log_type=LogType.DELETE,
        entity_type=EntityType.WORKER,
        user_id=identity.user_id,
        entity_id=worker_id,
    )
