"""Product catalogue endpoints.

Unlike content, POST only creates (409 on an existing id) and PUT only
updates (404 on a missing id). PUT replaces the record; ``createdAt`` and
``createdBy`` are always taken from the stored record.
"""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify

from .admin_gate import check_admin, require_admin
from .collection_service import PRODUCTS
from .errors import failure_message
from .payloads import json_body

bp = Blueprint("products_api", __name__, url_prefix="/api/products")


def _service():
    return current_app.collections  # type: ignore[attr-defined]


@bp.get("")
@failure_message("Failed to load products")
def list_products():
    if current_app.config.get("PRODUCTS_INDEX_REQUIRES_ADMIN", True):
        check_admin()
    return jsonify(_service().list_all(PRODUCTS))


@bp.get("/list")
@failure_message("Failed to load products")
def list_public_products():
    return jsonify(_service().list_public_products())


@bp.get("/<product_id>")
@failure_message("Failed to load product")
def get_product(product_id: str):
    return jsonify(_service().get_one(PRODUCTS, product_id))


@bp.post("")
@require_admin
@failure_message("Failed to save product")
def create_product():
    data = json_body()
    product_id = data.get("productId")
    stored = _service().create(PRODUCTS, product_id, data.get("productData"), actor=g.client_ip)
    return jsonify({"success": True, "productId": stored["id"], "timestamp": stored["lastModified"]})


@bp.put("/<product_id>")
@require_admin
@failure_message("Failed to update product")
def update_product(product_id: str):
    stored = _service().update(PRODUCTS, product_id, json_body(), actor=g.client_ip)
    return jsonify({"success": True, "productId": product_id, "timestamp": stored["lastModified"]})


@bp.delete("/<product_id>")
@require_admin
@failure_message("Failed to delete product")
def delete_product(product_id: str):
    _service().delete(PRODUCTS, product_id)
    return jsonify({"success": True, "deleted": product_id})
