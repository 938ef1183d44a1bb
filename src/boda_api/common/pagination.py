"""Limit/offset pagination helpers shared by list endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from boda_api.common.schema import BaseSchema
from boda_api.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


class PageParams(BaseSchema):
    """Standard query parameters for paginated list endpoints."""

    page: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(
        DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description=f"Items per page (max {MAX_PAGE_SIZE})",
    )
    include_total: bool = Field(
        False, description="Include total item count for the query"
    )


class Page(BaseSchema, Generic[T]):
    """Uniform response envelope for list endpoints."""

    items: Sequence[T]
    page: int
    page_size: int
    has_next: bool
    has_previous: bool
    total: int | None = None


async def paginate_sql(
    session: AsyncSession,
    stmt: Select,
    *,
    page: int,
    page_size: int,
    order_by: Sequence[ColumnElement[Any]],
    include_total: bool = False,
) -> Page[Any]:
    """Execute ``stmt`` with limit/offset pagination."""

    offset = (page - 1) * page_size
    ordered_stmt = stmt.order_by(*order_by)

    if include_total:
        count_stmt = select(func.count()).select_from(ordered_stmt.order_by(None).subquery())
        total = (await session.execute(count_stmt)).scalar_one()
        result = await session.execute(ordered_stmt.limit(page_size).offset(offset))
        rows = list(result.scalars().all())
        has_next = (page * page_size) < total
    else:
        result = await session.execute(ordered_stmt.limit(page_size + 1).offset(offset))
        rows = list(result.scalars().all())
        has_next = len(rows) > page_size
        rows = rows[:page_size]
        total = None

    return Page(
        items=rows,
        page=page,
        page_size=page_size,
        has_next=has_next,
        has_previous=page > 1,
        total=total,
    )


__all__ = ["Page", "PageParams", "paginate_sql"]
