"""Domain error taxonomy + JSON handler registration.

Validation problems surface as 4xx with a short reason. Storage failures are
logged in full and reported as a generic 500 carrying only the endpoint's
failure message (declared on the view with ``@failure_message``).
"""
from __future__ import annotations

import logging
import traceback
import uuid
from collections.abc import Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from flask import g, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound, RequestEntityTooLarge
from werkzeug.wrappers.response import Response

from .admin_gate import AuthzError
from .http_errors import (
    error_response,
    forbidden,
    internal_server_error,
    not_found,
    payload_too_large,
)
from .json_store import StoreError

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Internal server error"


class DomainError(Exception):
    status = 400

    def __init__(self, message: str, *, status: int | None = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.extra = extra


class BadRequestError(DomainError):
    status = 400


class NotFoundError(DomainError):
    status = 404


class ConflictError(DomainError):
    status = 409


def failure_message(message: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Attach the 500 message a view reports when storage fails underneath it."""

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            g.failure_message = message
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Any) -> None:
    @app.errorhandler(DomainError)
    def _h_domain(err: DomainError) -> Response:
        return error_response(err.status, err.message, **err.extra)

    @app.errorhandler(AuthzError)
    def _h_authz(err: AuthzError) -> Response:
        return forbidden(str(err) or "Access denied", ip=err.ip)

    @app.errorhandler(StoreError)
    def _h_store(err: StoreError) -> Response:
        message = getattr(g, "failure_message", None) or DEFAULT_FAILURE_MESSAGE
        incident_id = str(uuid.uuid4())
        logger.error(
            "Storage failure incident_id=%s path=%s collection=%s: %s",
            incident_id,
            request.path,
            err.collection,
            err,
            exc_info=err,
        )
        return internal_server_error(message, incident_id=incident_id)

    @app.errorhandler(NotFound)
    def _h404(_: NotFound) -> Response:
        return not_found("Endpoint not found")

    # Unsupported method on a known path behaves like an unknown route
    @app.errorhandler(MethodNotAllowed)
    def _h405(_: MethodNotAllowed) -> Response:
        logger.info("Mapping 405 to 404 method=%s path=%s", request.method, request.path)
        return not_found("Endpoint not found")

    @app.errorhandler(RequestEntityTooLarge)
    def _h413(_: RequestEntityTooLarge) -> Response:
        return payload_too_large()

    @app.errorhandler(HTTPException)
    def _h_http(ex: HTTPException) -> Response:
        status = ex.code or 500
        if status >= 500:
            return internal_server_error()
        return error_response(status, ex.name)

    @app.errorhandler(Exception)
    def _h_exception(ex: Exception) -> Response:
        incident_id = str(uuid.uuid4())
        logger.error(
            "Unhandled exception incident_id=%s path=%s\n%s", incident_id, request.path, traceback.format_exc()
        )
        return internal_server_error(incident_id=incident_id)


__all__ = [
    "DomainError",
    "BadRequestError",
    "NotFoundError",
    "ConflictError",
    "failure_message",
    "register_error_handlers",
]
