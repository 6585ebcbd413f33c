from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify

from .admin_gate import require_admin
from .clock import now_iso
from .errors import failure_message
from .payloads import json_body

bp = Blueprint("admin_api", __name__, url_prefix="/api")


@bp.get("/admin/status")
@require_admin
def admin_status():
    return jsonify({"authorized": True, "ip": g.client_ip, "timestamp": now_iso()})


@bp.get("/admin/info")
@require_admin
@failure_message("Failed to get admin info")
def admin_info():
    # Exposing the allowlist is opt-out via ADMIN_INFO_EXPOSE_IPS=0
    admin_ips = None
    if current_app.config.get("ADMIN_INFO_EXPOSE_IPS", True):
        admin_ips = current_app.config.get("ADMIN_IPS", [])
    return jsonify(current_app.collections.admin_info(admin_ips))  # type: ignore[attr-defined]


@bp.post("/reset")
@require_admin
@failure_message("Failed to reset data")
def reset_data():
    scope = json_body().get("type")
    current_app.collections.reset(scope)  # type: ignore[attr-defined]
    return jsonify({"success": True, "reset": scope})
