"""Per-request id shared by the HTTP layer and the paging loggers.

The id comes from ``X-Request-ID`` when the caller sends a usable one,
otherwise it is generated. It is echoed on the response, returned in
paging error bodies and stamped on ``querypage.*`` log records, so a
rejected ``sort`` parameter can be traced back to the request that sent it.
"""
from __future__ import annotations

import logging
import re
from contextvars import ContextVar
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
TRACED_LOGGERS = ("querypage.http", "querypage.paging")

_ACCEPTED_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")
_request_id: ContextVar[str | None] = ContextVar("querypage_request_id", default=None)
_LOG = logging.getLogger("querypage.http")


def current_request_id() -> str | None:
    return _request_id.get()


def resolve_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if _ACCEPTED_REQUEST_ID.fullmatch(candidate):
        return candidate
    return uuid4().hex


class RequestIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get() or "-"
        return True


REQUEST_ID_FILTER = RequestIdLogFilter()


def install_request_context(app: FastAPI) -> None:
    for name in TRACED_LOGGERS:
        logging.getLogger(name).addFilter(REQUEST_ID_FILTER)

    @app.middleware("http")
    async def _request_context_middleware(request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = _request_id.set(request_id)
        started_at = perf_counter()
        try:
            response = await call_next(request)
            _LOG.info(
                "%s %s?%s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                request.url.query,
                response.status_code,
                (perf_counter() - started_at) * 1000.0,
            )
        finally:
            _request_id.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        # Listings change with every write.
        response.headers["Cache-Control"] = "no-store"
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response
