from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Query, Session

from querypage.schemas.paging import PageRequest, PageResult
from querypage.services.page_augmenter import SchemaDescriptor, augment


def _total_pages(total: int, page_size: int) -> int:
    if page_size <= 0 or total <= 0:
        return 0
    return (total + page_size - 1) // page_size


def _build_result(rows: list, total: int, page: PageRequest) -> PageResult:
    has_next = page.page_size > 0 and page.offset + page.page_size < total
    return PageResult(
        rows=rows,
        total=total,
        page_index=page.page_index,
        page_size=page.page_size,
        total_pages=_total_pages(total, page.page_size),
        has_next=has_next,
        sort=list(page.sort),
    )


def fetch_page(
    schema: SchemaDescriptor,
    query: Query,
    page: PageRequest,
    *,
    serializer: Callable[[Any], Any] | None = None,
) -> PageResult:
    # augment first: an unknown sort field must fail before the count query runs.
    paged = augment(schema, query, page)
    total = query.order_by(None).count()
    rows = paged.all()
    if serializer is not None:
        rows = [serializer(row) for row in rows]
    return _build_result(rows, total, page)


def fetch_select_page(
    session: Session,
    schema: SchemaDescriptor,
    stmt: Select,
    page: PageRequest,
    *,
    scalars: bool = False,
    serializer: Callable[[Any], Any] | None = None,
) -> PageResult:
    paged = augment(schema, stmt, page)
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int(session.execute(count_stmt).scalar_one())
    result = session.execute(paged)
    if scalars:
        rows = list(result.scalars().all())
    else:
        rows = [dict(row) for row in result.mappings().all()]
    if serializer is not None:
        rows = [serializer(row) for row in rows]
    return _build_result(rows, total, page)
