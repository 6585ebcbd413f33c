"""CORS allow-list for the storefront frontends.

``CORS_ALLOWED_ORIGINS`` lists exact origins; a single ``*`` entry switches to
the permissive variant that reflects any Origin. Credentials are allowed, so
the wildcard is never sent literally.
"""

from __future__ import annotations

from flask import Flask, request
from werkzeug.wrappers.response import Response

ALLOWED_METHODS = "GET,POST,PUT,DELETE,OPTIONS"


def origin_allowed(allowed: list[str], origin: str | None) -> bool:
    if not origin:
        return False
    return "*" in allowed or origin in allowed


def _apply_cors(app: Flask, resp: Response) -> Response:
    allowed: list[str] = app.config.get("CORS_ALLOWED_ORIGINS", []) or []
    origin = request.headers.get("Origin")
    if not origin_allowed(allowed, origin):
        return resp
    resp.headers.add("Vary", "Origin")
    resp.headers["Access-Control-Allow-Origin"] = origin  # type: ignore[assignment]
    resp.headers["Access-Control-Allow-Credentials"] = "true"
    if request.method == "OPTIONS":
        resp.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        req_hdrs = request.headers.get("Access-Control-Request-Headers")
        if req_hdrs:
            resp.headers["Access-Control-Allow-Headers"] = req_hdrs
        resp.headers["Access-Control-Max-Age"] = "600"
    return resp


def init_security(app: Flask) -> None:
    @app.after_request
    def _cors(resp: Response) -> Response:
        return _apply_cors(app, resp)

    @app.after_request
    def _headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        return resp


__all__ = ["init_security", "origin_allowed"]
