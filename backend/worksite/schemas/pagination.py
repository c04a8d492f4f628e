"""Pagination Envelope — shared shape of every list response."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    data: list[T]
    total: int
    page: int
    page_size: int


def page_of(
    schema: type[BaseModel], items: list, total: int, page: int, page_size: int,
) -> dict:
    """Build a list response from ORM rows."""
    return {
        "data": [schema.model_validate(item) for item in items],
        "total": total,
        "page": page,
        "page_size": page_size,
    }
