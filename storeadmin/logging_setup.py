"""Logger configuration for the ``storeadmin`` namespace.

Records emitted inside a request carry the request id so a single admin
action can be followed from the gate decision to the storage write.
"""

from __future__ import annotations

import logging

from flask import g, has_request_context

LOGGER_NAME = "storeadmin"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        rid = "-"
        if has_request_context():
            rid = getattr(g, "request_id", None) or "-"
        record.request_id = rid
        return True


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    # Avoid duplicate attachment when create_app runs more than once (tests)
    if not any(getattr(h, "_storeadmin", False) for h in log.handlers):
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        h.addFilter(RequestIdFilter())
        h._storeadmin = True  # type: ignore[attr-defined]
        log.addHandler(h)
    return log


__all__ = ["LOGGER_NAME", "RequestIdFilter", "configure_logging"]
