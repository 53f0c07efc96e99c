from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SortDirection(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


DIRECTION_ALIASES = {
    "asc": SortDirection.ASCENDING,
    "ascending": SortDirection.ASCENDING,
    "desc": SortDirection.DESCENDING,
    "descending": SortDirection.DESCENDING,
}


class SortInstruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    direction: SortDirection = SortDirection.ASCENDING

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value):
        # Same spellings as the ?sort=field,dir query parameter.
        if isinstance(value, str) and not isinstance(value, SortDirection):
            return DIRECTION_ALIASES.get(value.strip().lower(), value)
        return value


class PageRequest(BaseModel):
    """Zero-based page of an ordered result set.

    ``page_size=0`` is a literal ``LIMIT 0``: the page is empty, it does not
    mean "no limit".
    """

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=20, ge=0)
    sort: List[SortInstruction] = []

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size


class PageResult(BaseModel):
    rows: List[Any] = []
    total: int = 0
    page_index: int = 0
    page_size: int = 0
    total_pages: int = 0
    has_next: bool = False
    sort: List[SortInstruction] = []
