from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app

from .clock import now_iso
from .errors import failure_message

bp = Blueprint("health_api", __name__, url_prefix="/api")


@bp.get("/health")
def health() -> tuple[dict[str, Any], int]:
    return {
        "status": "ok",
        "timestamp": now_iso(),
        "uptime": current_app.collections.uptime(),  # type: ignore[attr-defined]
    }, 200


# Polled by storefront clients to decide whether cached content is stale
@bp.get("/timestamps")
@failure_message("Failed to get timestamps")
def timestamps() -> tuple[dict[str, Any], int]:
    return current_app.collections.timestamps(), 200  # type: ignore[attr-defined]
