from __future__ import annotations

import logging

from querypage.core.request_context import REQUEST_ID_FILTER

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper() or "INFO")
        if not isinstance(resolved, int):
            resolved = logging.INFO
    else:
        resolved = int(level)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    for handler in root.handlers:
        handler.addFilter(REQUEST_ID_FILTER)
    logging.getLogger("querypage").setLevel(resolved)
