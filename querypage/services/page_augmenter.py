from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Sequence, TypeVar

from sqlalchemy import asc, desc
from sqlalchemy import inspect as sa_inspect

from querypage.schemas.paging import PageRequest, SortDirection, SortInstruction
from querypage.services.errors import UnknownSortFieldError

_LOG = logging.getLogger("querypage.paging")

# Anything generative with order_by/offset/limit: orm.Query or a Core Select.
Q = TypeVar("Q")


def _pick_fields(
    fields: list[tuple[str, Any]],
    only: Iterable[str] | None,
    exclude: Iterable[str],
) -> list[tuple[str, Any]]:
    known = {name for name, _ in fields}
    excluded = set(exclude or ())
    if only is not None:
        wanted = list(only)
        missing = [name for name in wanted if name not in known]
        if missing:
            raise ValueError(f"Unknown fields requested for schema descriptor: {', '.join(missing)}")
        wanted_set = set(wanted)
        fields = [(name, handle) for name, handle in fields if name in wanted_set]
    return [(name, handle) for name, handle in fields if name not in excluded]


class SchemaDescriptor:
    """Read-only name -> column handle map used to resolve sort fields.

    Lookups are exact and case-sensitive. Handles are whatever the query
    builder accepts in ``order_by``: ORM attributes or Core columns.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Iterable[tuple[str, Any]] = ()):
        collected: dict[str, Any] = {}
        for name, handle in fields:
            if name in collected:
                raise ValueError(f'Duplicate field "{name}" in schema descriptor')
            if handle is None:
                raise ValueError(f'Field "{name}" has no column handle')
            collected[name] = handle
        self._fields: Mapping[str, Any] = MappingProxyType(collected)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "SchemaDescriptor":
        return cls(mapping.items())

    @classmethod
    def from_model(cls, model, *, only: Iterable[str] | None = None, exclude: Iterable[str] = ()) -> "SchemaDescriptor":
        mapper = sa_inspect(model)
        fields = [(attr.key, getattr(model, attr.key)) for attr in mapper.column_attrs]
        return cls(_pick_fields(fields, only, exclude))

    @classmethod
    def from_table(cls, table, *, only: Iterable[str] | None = None, exclude: Iterable[str] = ()) -> "SchemaDescriptor":
        fields = [(column.key, column) for column in table.c]
        return cls(_pick_fields(fields, only, exclude))

    def lookup(self, name: str) -> Any | None:
        if not isinstance(name, str):
            return None
        return self._fields.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"SchemaDescriptor({', '.join(self._fields)})"


@dataclass(frozen=True)
class ResolvedSort:
    field_name: str
    handle: Any
    direction: SortDirection

    def clause(self):
        if self.direction == SortDirection.DESCENDING:
            return desc(self.handle)
        return asc(self.handle)


def resolve_sort(schema: SchemaDescriptor, sort: Sequence[SortInstruction]) -> list[ResolvedSort]:
    """Resolve every sort field or none: the first unknown name raises."""
    resolved: list[ResolvedSort] = []
    for instruction in sort:
        handle = schema.lookup(instruction.field)
        if handle is None:
            _LOG.info("rejected unknown sort field %r", instruction.field)
            raise UnknownSortFieldError(instruction.field)
        resolved.append(ResolvedSort(instruction.field, handle, instruction.direction))
    return resolved


def augment(schema: SchemaDescriptor, query: Q, page: PageRequest) -> Q:
    """Return ``query`` with ORDER BY, OFFSET and LIMIT for ``page`` applied.

    Sort fields are validated before any clause is added, so an
    ``UnknownSortFieldError`` leaves the caller's builder untouched. The
    query is never executed here.
    """
    resolved = resolve_sort(schema, page.sort)
    if resolved:
        query = query.order_by(*[item.clause() for item in resolved])
    query = query.offset(page.offset)
    query = query.limit(page.page_size)
    _LOG.debug(
        "paged query order_by=%s offset=%s limit=%s",
        ",".join(f"{item.field_name}:{item.direction.value}" for item in resolved) or "-",
        page.offset,
        page.page_size,
    )
    return query
