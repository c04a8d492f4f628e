"""Query Plan — turns raw filter/sort/page parameters into a bounded, typed plan.

Invariants:
    - Unknown parameter keys are ignored
    - Malformed numeric/boolean values are dropped (no bound), never raised;
      integers outside the 32-bit range of the integer columns count as malformed
    - sort column always comes from the resource allow-list; anything else -> default
    - page >= 1 and 1 <= page_size <= max_page_size
    - Pure: no IO, no SQLAlchemy — services/scoped_query.py applies the plan

Design Decisions:
    - One frozen dataclass per resource instead of an open dict: the allowed filters
      are visible in the type, parsing happens once at the boundary
    - Allow-lists hold column NAMES only; mapping to columns lives with the models
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, TypeVar

from worksite.core.domain_types import Role, SortOrder

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_PAGE_SIZE = 100

# Integer columns (ids, age, salary) are 32-bit.
MIN_STORED_INT = -(2 ** 31)
MAX_STORED_INT = 2 ** 31 - 1

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


# ─── Per-resource allow-lists ────────────────────────────────────

@dataclass(frozen=True)
class ResourceQuerySpec:
    """Columns a resource exposes to sorting and free-text search."""
    sortable: frozenset[str]
    searchable: tuple[str, ...]
    default_sort: str = "id"


WORKER_QUERY = ResourceQuerySpec(
    sortable=frozenset({"id", "name", "position", "age", "salary", "created_at"}),
    searchable=("name", "position"),
)

PROJECT_QUERY = ResourceQuerySpec(
    sortable=frozenset({
        "id", "name", "status", "start_date", "end_date", "created_at",
    }),
    searchable=("name", "description", "status"),
)

USER_QUERY = ResourceQuerySpec(
    sortable=frozenset({"id", "username", "email", "role", "active", "created_at"}),
    searchable=("username", "email"),
)


# ─── Typed filters ───────────────────────────────────────────────

@dataclass(frozen=True)
class WorkerFilters:
    search: str | None = None
    position: str | None = None
    min_age: int | None = None
    max_age: int | None = None
    min_salary: int | None = None
    max_salary: int | None = None


@dataclass(frozen=True)
class ProjectFilters:
    search: str | None = None
    name: str | None = None
    status: str | None = None


@dataclass(frozen=True)
class UserFilters:
    search: str | None = None
    role: Role | None = None
    active: bool | None = None


@dataclass(frozen=True)
class SortSpec:
    column: str = "id"
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


F = TypeVar("F")


@dataclass(frozen=True)
class QueryPlan(Generic[F]):
    """Everything a repository needs to run one list query."""
    filters: F
    sort: SortSpec
    page: PageRequest


# ─── Raw value parsing ───────────────────────────────────────────

def is_storable_int(value: int) -> bool:
    return MIN_STORED_INT <= value <= MAX_STORED_INT


def parse_int(raw: Any) -> int | None:
    """Parse an integer; None for missing, malformed or out-of-range input."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            return None
    return value if is_storable_int(value) else None


def parse_text(raw: Any) -> str | None:
    """Strip a text value; empty strings count as missing."""
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def parse_bool(raw: Any) -> bool | None:
    if isinstance(raw, bool):
        return raw
    text = parse_text(raw)
    if text is None:
        return None
    lowered = text.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def parse_role(raw: Any) -> Role | None:
    text = parse_text(raw)
    if text is None:
        return None
    try:
        return Role(text.lower())
    except ValueError:
        return None


# ─── Filter parsing ──────────────────────────────────────────────

def parse_worker_filters(params: Mapping[str, Any]) -> WorkerFilters:
    return WorkerFilters(
        search=parse_text(params.get("search")),
        position=parse_text(params.get("position")),
        min_age=parse_int(params.get("min_age")),
        max_age=parse_int(params.get("max_age")),
        min_salary=parse_int(params.get("min_salary")),
        max_salary=parse_int(params.get("max_salary")),
    )


def parse_project_filters(params: Mapping[str, Any]) -> ProjectFilters:
    return ProjectFilters(
        search=parse_text(params.get("search")),
        name=parse_text(params.get("name")),
        status=parse_text(params.get("status")),
    )


def parse_user_filters(params: Mapping[str, Any]) -> UserFilters:
    return UserFilters(
        search=parse_text(params.get("search")),
        role=parse_role(params.get("role")),
        active=parse_bool(params.get("active")),
    )


# ─── Sort & page ─────────────────────────────────────────────────

def resolve_sort(
    spec: ResourceQuerySpec, sort_by: Any, sort_order: Any,
) -> SortSpec:
    """Fall back to the default column when sort_by is not allow-listed."""
    column = parse_text(sort_by)
    if column not in spec.sortable:
        column = spec.default_sort
    order_text = (parse_text(sort_order) or "").lower()
    order = SortOrder.DESC if order_text == SortOrder.DESC.value else SortOrder.ASC
    return SortSpec(column=column, order=order)


def resolve_page(
    page: Any, page_size: Any, max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> PageRequest:
    """Defaults for malformed values, then clamp into the allowed window."""
    parsed_page = parse_int(page)
    parsed_size = parse_int(page_size)
    if parsed_page is None:
        parsed_page = DEFAULT_PAGE
    if parsed_size is None:
        parsed_size = DEFAULT_PAGE_SIZE
    return PageRequest(
        page=max(parsed_page, 1),
        page_size=min(max(parsed_size, 1), max(max_page_size, 1)),
    )


def compose_plan(
    params: Mapping[str, Any],
    spec: ResourceQuerySpec,
    parse_filters: Callable[[Mapping[str, Any]], F],
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
) -> QueryPlan[F]:
    """Build a complete plan from an untyped parameter mapping."""
    return QueryPlan(
        filters=parse_filters(params),
        sort=resolve_sort(spec, params.get("sort_by"), params.get("sort_order")),
        page=resolve_page(
            params.get("page"), params.get("page_size"), max_page_size,
        ),
    )
