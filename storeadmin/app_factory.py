"""Flask application factory.

Provides:
 - Configuration from environment (.env aware) with per-app overrides
 - Store, admin authorizer and collection service owned by the app instance
 - Unified JSON error schema {error, ...}
 - Request id / timing middleware and trailing-slash redirect
 - Blueprint registration (health, content, products, admin)
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Any

from dotenv import load_dotenv
from flask import Flask, g, redirect, request
from werkzeug.wrappers.response import Response

from .admin_api import bp as admin_api_bp
from .admin_gate import IPAllowlistAuthorizer, client_ip
from .collection_service import CollectionService
from .config import Config
from .content_api import bp as content_api_bp
from .errors import register_error_handlers
from .health_api import bp as health_bp
from .json_store import build_store
from .logging_setup import configure_logging
from .metrics import build_metrics, set_metrics
from .products_api import bp as products_api_bp
from .security import init_security


def create_app(config_override: dict[str, Any] | None = None) -> Flask:
    load_dotenv()
    app = Flask(__name__)

    # --- Configuration ---
    cfg = Config.from_env()
    if config_override:
        known = {k: v for k, v in config_override.items() if hasattr(cfg, k)}
        if known:
            cfg.override(known)
    if not cfg.data_dir:
        cfg.data_dir = os.path.join(app.instance_path, "data")
    app.config.update(cfg.to_flask_dict())
    if config_override:
        for k, v in config_override.items():  # also allow direct Flask config keys
            if k.isupper():
                app.config[k] = v
    app.json.sort_keys = False  # type: ignore[attr-defined]

    log = configure_logging(cfg.log_level)
    set_metrics(build_metrics(cfg.metrics_backend))

    # --- Owned state: store, gate, service ---
    store = build_store(cfg.store_backend, cfg.data_dir, serialize_writes=cfg.serialize_writes)
    store.ensure_ready()
    app.store = store  # type: ignore[attr-defined]
    app.authorizer = IPAllowlistAuthorizer(cfg.admin_ips)  # type: ignore[attr-defined]
    app.collections = CollectionService(store)  # type: ignore[attr-defined]

    # --- Security middleware (CORS, headers) ---
    init_security(app)

    # --- Request middleware ---
    access_log = logging.getLogger("storeadmin.access")

    @app.before_request
    def _before_req() -> Response | None:
        g._t0 = time.perf_counter()
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        path = request.path
        if len(path) > 1 and path.endswith("/"):
            query = request.query_string.decode("utf-8", "replace")
            target = path.rstrip("/") or "/"
            return redirect(target + (f"?{query}" if query else ""), code=301)
        return None

    @app.after_request
    def _after_req(resp: Response) -> Response:
        dur_ms = int((time.perf_counter() - getattr(g, "_t0", time.perf_counter())) * 1000)
        rid = getattr(g, "request_id", None) or str(uuid.uuid4())
        resp.headers["X-Request-Id"] = rid
        resp.headers["X-Request-Duration-ms"] = str(dur_ms)
        if request.path.startswith("/api/") and "Cache-Control" not in resp.headers:
            resp.headers["Cache-Control"] = "no-store"
        access_log.info(
            {
                "request_id": rid,
                "method": request.method,
                "path": request.path,
                "status": resp.status_code,
                "duration_ms": dur_ms,
                "client_ip": client_ip(),
            }
        )
        return resp

    # --- Error handling ---
    register_error_handlers(app)

    # --- Blueprints ---
    app.register_blueprint(health_bp)
    app.register_blueprint(admin_api_bp)
    app.register_blueprint(content_api_bp)
    app.register_blueprint(products_api_bp)

    # --- Test-only boom endpoint for incident simulation ---
    if app.config.get("TESTING"):

        @app.get("/_test/boom")
        def _test_boom() -> dict[str, Any]:  # pragma: no cover - only used in 500 tests
            raise RuntimeError("boom")

    log.info(
        "storeadmin ready data_dir=%s store=%s admin_ips=%s cors=%s",
        cfg.data_dir,
        cfg.store_backend,
        ",".join(cfg.admin_ips) or "(loopback only)",
        ",".join(cfg.cors_allowed_origins) or "(disabled)",
    )
    return app


__all__ = ["create_app"]
