"""Shared JSON error envelope helpers: ``{"error": <message>, ...extra}``."""
from __future__ import annotations

import uuid

from flask import g, jsonify
from werkzeug.wrappers.response import Response


def error_response(status: int, message: str, **extra: object) -> Response:
    payload: dict[str, object] = {"error": message}
    for k, v in extra.items():
        if v is not None:
            payload[k] = v
    rid = getattr(g, "request_id", None)
    if rid:
        payload["request_id"] = rid
    resp = jsonify(payload)
    resp.status_code = status
    if rid and "X-Request-Id" not in resp.headers:
        resp.headers["X-Request-Id"] = rid
    return resp


def bad_request(message: str = "Bad request", **extra: object) -> Response:
    return error_response(400, message, **extra)


def forbidden(message: str = "Access denied", **extra: object) -> Response:
    return error_response(403, message, **extra)


def not_found(message: str = "Endpoint not found", **extra: object) -> Response:
    return error_response(404, message, **extra)


def conflict(message: str = "Conflict", **extra: object) -> Response:
    return error_response(409, message, **extra)


def payload_too_large(message: str = "Request body too large", **extra: object) -> Response:
    return error_response(413, message, **extra)


def internal_server_error(message: str = "Internal server error", incident_id: str | None = None, **extra: object) -> Response:
    if not incident_id:
        incident_id = str(uuid.uuid4())
    return error_response(500, message, incident_id=incident_id, **extra)


__all__ = [
    "error_response",
    "bad_request",
    "forbidden",
    "not_found",
    "conflict",
    "payload_too_large",
    "internal_server_error",
]
