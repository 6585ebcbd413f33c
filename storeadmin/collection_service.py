"""CRUD over the named collections.

Each mutation is a read-modify-write of the whole collection, held under the
store's per-collection lock. Content and products differ:

- content: ``create`` is an upsert, there is no separate update.
- products: ``create`` rejects existing keys (409), ``update`` requires one
  (404), and creation metadata (``createdAt``/``createdBy``) is carried
  forward on every update.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from . import metrics
from .clock import to_iso, utc_now
from .errors import BadRequestError, ConflictError, NotFoundError
from .json_store import Store
from .views import admin_info_view, public_product_list, timestamps_view

logger = logging.getLogger(__name__)

CONTENT = "content"
PRODUCTS = "products"
RESET_SCOPES = {CONTENT: (CONTENT,), PRODUCTS: (PRODUCTS,), "all": (CONTENT, PRODUCTS)}


@dataclass(frozen=True)
class CollectionPolicy:
    name: str
    required_fields: tuple[str, ...] = ()
    create_overwrites: bool = False
    supports_update: bool = True
    tracks_creation: bool = False
    missing_key_message: str = "Key and data required"
    missing_fields_message: str = "Required fields missing"
    not_found_message: str = "Not found"
    conflict_message: str = "Already exists"


POLICIES: dict[str, CollectionPolicy] = {
    CONTENT: CollectionPolicy(
        name=CONTENT,
        create_overwrites=True,
        supports_update=False,
        missing_key_message="Page and changes required",
        not_found_message="Page not found",
    ),
    PRODUCTS: CollectionPolicy(
        name=PRODUCTS,
        required_fields=("name", "price"),
        tracks_creation=True,
        missing_key_message="Product ID and data required",
        missing_fields_message="Product name and price are required",
        not_found_message="Product not found",
        conflict_message="Product already exists",
    ),
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def record_key(value: Any) -> str | None:
    """Normalise a caller-supplied key; None when it cannot name a record.

    Non-blank strings are used as-is and integers (not bools) are converted.
    """
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def missing_fields(record: dict[str, Any], required: Iterable[str]) -> list[str]:
    # Presence only: price 0 or inStock False are legitimate values
    return [f for f in required if _is_blank(record.get(f))]


class CollectionService:
    def __init__(self, store: Store, now: Callable[[], datetime] = utc_now) -> None:
        self.store = store
        self._now = now
        self.started = time.monotonic()

    # --- helpers ---
    def policy(self, collection: str) -> CollectionPolicy:
        try:
            return POLICIES[collection]
        except KeyError:
            raise BadRequestError(f"Unknown collection: {collection}") from None

    def uptime(self) -> float:
        return round(time.monotonic() - self.started, 3)

    def _validate(self, pol: CollectionPolicy, record: Any) -> dict[str, Any]:
        if not isinstance(record, dict):
            raise BadRequestError(pol.missing_key_message)
        if missing_fields(record, pol.required_fields):
            raise BadRequestError(pol.missing_fields_message)
        return record

    # --- reads ---
    def list_all(self, collection: str) -> dict[str, Any]:
        return self.store.load(self.policy(collection).name)

    def get_one(self, collection: str, key: str) -> dict[str, Any]:
        pol = self.policy(collection)
        data = self.store.load(pol.name)
        if key not in data:
            raise NotFoundError(pol.not_found_message)
        return data[key]

    def list_public_products(self) -> list[dict[str, Any]]:
        return public_product_list(self.store.load(PRODUCTS))

    def timestamps(self) -> dict[str, str | None]:
        return timestamps_view(self.store.load(CONTENT), self.store.load(PRODUCTS), self._now())

    def admin_info(self, admin_ips: Iterable[str] | None = None) -> dict[str, Any]:
        return admin_info_view(
            self.store.load(CONTENT), self.store.load(PRODUCTS), self._now(), self.uptime(), admin_ips
        )

    # --- mutations ---
    def create(
        self,
        collection: str,
        key: Any,
        record: Any,
        *,
        actor: str | None,
        timestamp: str | None = None,
    ) -> dict[str, Any]:
        pol = self.policy(collection)
        norm_key = record_key(key)
        if norm_key is None or record is None:
            raise BadRequestError(pol.missing_key_message)
        key = norm_key
        record = self._validate(pol, record)
        now = to_iso(self._now())
        with self.store.lock(pol.name):
            data = self.store.load(pol.name)
            if key in data and not pol.create_overwrites:
                raise ConflictError(pol.conflict_message)
            stored = dict(record)
            if pol.tracks_creation:
                stored["id"] = key
                stored["lastModified"] = now
                stored["modifiedBy"] = actor
                stored["createdAt"] = record.get("createdAt") or now
                stored["createdBy"] = actor
            else:
                stored["lastModified"] = timestamp or now
                stored["modifiedBy"] = actor
            data[key] = stored
            self.store.save(pol.name, data)
        logger.info("%s created key=%s by=%s", pol.name, key, actor)
        metrics.increment(f"collection.{pol.name}.create")
        return stored

    def update(self, collection: str, key: str, record: Any, *, actor: str | None) -> dict[str, Any]:
        pol = self.policy(collection)
        if not pol.supports_update:
            raise BadRequestError(f"Update not supported for {pol.name}")
        record = self._validate(pol, record)
        now = to_iso(self._now())
        with self.store.lock(pol.name):
            data = self.store.load(pol.name)
            if key not in data:
                raise NotFoundError(pol.not_found_message)
            previous = data[key] if isinstance(data[key], dict) else {}
            stored = dict(record)
            stored["id"] = key
            stored["lastModified"] = now
            stored["modifiedBy"] = actor
            # Creation metadata always comes from the stored record, never the body
            stored["createdAt"] = previous.get("createdAt") or now
            stored["createdBy"] = previous.get("createdBy") or "admin"
            data[key] = stored
            self.store.save(pol.name, data)
        logger.info("%s updated key=%s by=%s", pol.name, key, actor)
        metrics.increment(f"collection.{pol.name}.update")
        return stored

    def delete(self, collection: str, key: str) -> None:
        pol = self.policy(collection)
        with self.store.lock(pol.name):
            data = self.store.load(pol.name)
            if key not in data:
                raise NotFoundError(pol.not_found_message)
            del data[key]
            self.store.save(pol.name, data)
        logger.info("%s deleted key=%s", pol.name, key)
        metrics.increment(f"collection.{pol.name}.delete")

    def reset(self, scope: Any) -> list[str]:
        names = RESET_SCOPES.get(scope) if isinstance(scope, str) else None
        if names is None:
            raise BadRequestError("Invalid reset type")
        # content before products, one collection at a time
        for name in names:
            with self.store.lock(name):
                self.store.save(name, {})
            metrics.increment(f"collection.{name}.reset")
        logger.warning("Data reset scope=%s", scope)
        return list(names)


__all__ = [
    "CONTENT",
    "PRODUCTS",
    "POLICIES",
    "CollectionPolicy",
    "CollectionService",
    "missing_fields",
    "record_key",
]
