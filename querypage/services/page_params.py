from __future__ import annotations

import logging
from typing import Iterable

from querypage.schemas.paging import DIRECTION_ALIASES, PageRequest, SortInstruction
from querypage.services.errors import InvalidPageRequestError

_LOG = logging.getLogger("querypage.paging")

# Largest OFFSET/LIMIT a BIGINT bind parameter can carry.
MAX_SQL_INTEGER = 2**63 - 1


def parse_sort_param(raw: str) -> SortInstruction:
    """Parse ``"field"`` or ``"field,asc|desc"`` into a sort instruction."""
    text = str(raw or "").strip()
    name, _, direction = text.partition(",")
    name = name.strip()
    if not name:
        raise InvalidPageRequestError(f'Empty sort field in "{text}"')
    direction_key = direction.strip().lower() or "asc"
    resolved = DIRECTION_ALIASES.get(direction_key)
    if resolved is None:
        raise InvalidPageRequestError(
            f'Invalid sort direction "{direction.strip()}" for field "{name}"',
            field_name=name,
        )
    return SortInstruction(field=name, direction=resolved)


def _coerce_non_negative(param: str, value, default: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidPageRequestError(f'Parameter "{param}" must be an integer')
    if number < 0:
        raise InvalidPageRequestError(f'Parameter "{param}" must not be negative')
    return number


def clamp_page_size(page: PageRequest, max_size: int | None) -> PageRequest:
    """Cap ``page_size`` at ``max_size`` and reject pages the database cannot address."""
    if max_size is not None and page.page_size > max_size:
        _LOG.debug("page size %s clamped to %s", page.page_size, max_size)
        page = page.model_copy(update={"page_size": max_size})
    if page.page_size > MAX_SQL_INTEGER:
        raise InvalidPageRequestError('Parameter "size" is too large')
    if page.offset > MAX_SQL_INTEGER:
        raise InvalidPageRequestError(
            f"Page {page.page_index} of size {page.page_size} is beyond the last addressable row"
        )
    return page


def page_request_from_params(
    page=None,
    size=None,
    sort: Iterable[str] | None = None,
    *,
    default_size: int = 20,
    max_size: int | None = None,
) -> PageRequest:
    page_index = _coerce_non_negative("page", page, 0)
    page_size = _coerce_non_negative("size", size, default_size)
    instructions = [parse_sort_param(item) for item in (sort or []) if str(item or "").strip()]
    request = PageRequest(page_index=page_index, page_size=page_size, sort=instructions)
    return clamp_page_size(request, max_size)
