"""Page content endpoints.

POST is an upsert: a page is replaced wholesale with the submitted
``changes`` whether or not it existed before.
"""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify

from .admin_gate import require_admin
from .collection_service import CONTENT, record_key
from .errors import failure_message
from .payloads import json_body

bp = Blueprint("content_api", __name__, url_prefix="/api/content")


@bp.get("")
@failure_message("Failed to load content")
def get_content():
    return jsonify(current_app.collections.list_all(CONTENT))  # type: ignore[attr-defined]


@bp.post("")
@require_admin
@failure_message("Failed to save content")
def save_content():
    data = json_body()
    page = data.get("page")
    stored = current_app.collections.create(  # type: ignore[attr-defined]
        CONTENT,
        page,
        data.get("changes"),
        actor=g.client_ip,
        timestamp=data.get("timestamp") or None,
    )
    return jsonify({"success": True, "page": record_key(page), "timestamp": stored["lastModified"]})
