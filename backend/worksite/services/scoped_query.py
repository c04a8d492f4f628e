"""Scoped Query — ownership guard plus application of a QueryPlan to a SELECT.

Invariants:
    - owned_by() is the ONLY place a tenant predicate is built
    - A row owned by another tenant is reported exactly like a missing row
    - So is an id no integer column can hold: it never reaches the driver
    - Sorting always ends with the primary key so pages never overlap or skip
    - total is counted from the same filtered statement the page is cut from

Design Decisions:
    - Column lookup by allow-listed name (core/query_plan.py) — no user input
      reaches getattr() without passing the allow-list first
    - Search terms are autoescaped: % and _ in user input match literally
"""

from typing import Any, TypeVar

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from worksite.core.domain_types import SortOrder
from worksite.core.errors import ResourceNotFoundError
from worksite.core.query_plan import (
    PageRequest, ResourceQuerySpec, SortSpec, is_storable_int,
)

T = TypeVar("T")


def owned_by(stmt: Select, model: Any, tenant_id: int) -> Select:
    """Inject the tenant equality predicate."""
    return stmt.where(model.user_id == tenant_id)


def apply_search(
    stmt: Select, model: Any, spec: ResourceQuerySpec, term: str | None,
) -> Select:
    if not term:
        return stmt
    return stmt.where(or_(*(
        getattr(model, column).icontains(term, autoescape=True)
        for column in spec.searchable
    )))


def apply_sort(stmt: Select, model: Any, sort: SortSpec) -> Select:
    column = getattr(model, sort.column)
    ordering = column.desc() if sort.order == SortOrder.DESC else column.asc()
    if sort.column == "id":
        return stmt.order_by(ordering)
    return stmt.order_by(ordering, model.id.asc())


async def fetch_page(
    db: AsyncSession, stmt: Select, page: PageRequest,
) -> tuple[list, int]:
    """Run count + page for one filtered statement."""
    count_stmt = select(func.count()).select_from(
        stmt.order_by(None).subquery(),
    )
    total = await db.scalar(count_stmt)
    result = await db.execute(stmt.limit(page.page_size).offset(page.offset))
    return list(result.scalars().all()), int(total or 0)


async def get_owned_or_404(
    db: AsyncSession,
    model: type[T],
    entity_id: int,
    tenant_id: int,
    resource_type: str,
    for_update: bool = False,
) -> T:
    """Fetch one row by id under the tenant predicate.

    for_update locks the row for the rest of the transaction, so the
    ownership check and the write that follows see the same row.
    """
    if not is_storable_int(entity_id):
        raise ResourceNotFoundError(resource_type, entity_id)
    stmt = owned_by(
        select(model).where(model.id == entity_id), model, tenant_id,
    ).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    row = (await db.execute(stmt)).scalar_one_or_none()
    if row is None:
        raise ResourceNotFoundError(resource_type, entity_id)
    return row
