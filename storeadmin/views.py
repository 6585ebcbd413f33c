"""Read-only projections computed from the stored collections."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from .clock import parse_iso, to_iso

DEFAULT_SIZES = ("Standard",)
OPTIONAL_PUBLIC_FIELDS = ("description", "category", "emoji", "imageUrl")


def _or_default(product: Mapping[str, Any], key: str, default: Any) -> Any:
    value = product.get(key)
    return default if value is None else value


def public_product(product_id: str, product: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": product_id,
        "name": product.get("name"),
        "price": product.get("price"),
    }
    # Absent optional text fields stay absent rather than serializing as null
    for key in OPTIONAL_PUBLIC_FIELDS:
        if product.get(key) is not None:
            out[key] = product[key]
    out["inStock"] = product.get("inStock") is not False
    out["featured"] = product.get("featured") or False
    out["sizes"] = _or_default(product, "sizes", list(DEFAULT_SIZES))
    out["scents"] = _or_default(product, "scents", [])
    out["colors"] = _or_default(product, "colors", [])
    return out


def public_product_list(products: Mapping[str, Any]) -> list[dict[str, Any]]:
    return [public_product(pid, p) for pid, p in products.items() if isinstance(p, Mapping)]


def latest_timestamp(records: Iterable[Any]) -> str | None:
    """Newest ``lastModified`` across records, or None when nothing parses."""
    newest: datetime | None = None
    for rec in records:
        if not isinstance(rec, Mapping):
            continue
        ts = parse_iso(rec.get("lastModified"))
        if ts is not None and (newest is None or ts > newest):
            newest = ts
    return to_iso(newest) if newest is not None else None


def timestamps_view(
    content: Mapping[str, Any], products: Mapping[str, Any], now: datetime
) -> dict[str, str | None]:
    return {
        "content": latest_timestamp(content.values()),
        "products": latest_timestamp(products.values()),
        "server": to_iso(now),
    }


def admin_info_view(
    content: Mapping[str, Any],
    products: Mapping[str, Any],
    now: datetime,
    uptime: float,
    admin_ips: Iterable[str] | None = None,
) -> dict[str, Any]:
    info: dict[str, Any] = {
        "contentPages": len(content),
        "totalProducts": len(products),
        "lastActivity": to_iso(now),
        "serverUptime": uptime,
    }
    if admin_ips is not None:
        info["adminIPs"] = list(admin_ips)
    return info


__all__ = [
    "public_product",
    "public_product_list",
    "latest_timestamp",
    "timestamps_view",
    "admin_info_view",
]
