from __future__ import annotations


class PagingError(ValueError):
    """Rejected page request; safe to report back to the caller as-is."""

    field_name: str | None = None


class UnknownSortFieldError(PagingError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f'Unknown sort field "{field_name}"')


class InvalidPageRequestError(PagingError):
    def __init__(self, message: str, *, field_name: str | None = None):
        self.field_name = field_name
        super().__init__(message)
