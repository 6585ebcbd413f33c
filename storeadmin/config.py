from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "https://localhost:3000"]


def _csv(raw: str) -> list[str]:
    return [p for p in [c.strip() for c in raw.split(",")] if p]


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    data_dir: str = ""  # empty -> <instance_path>/data, resolved in create_app
    store_backend: str = "file"
    admin_ips: list[str] = field(default_factory=list)  # loopback is always allowed on top of these
    cors_allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    products_index_requires_admin: bool = True
    admin_info_exposes_ips: bool = True
    serialize_writes: bool = True
    max_content_length: int = 10 * 1024 * 1024
    log_level: str = "INFO"
    metrics_backend: str = "noop"

    @classmethod
    def from_env(cls) -> Config:
        cors = os.getenv("CORS_ALLOW_ORIGINS")
        return cls(
            data_dir=os.getenv("DATA_DIR", "").strip(),
            store_backend=os.getenv("STORE_BACKEND", "file").strip().lower() or "file",
            admin_ips=_csv(os.getenv("ADMIN_IPS", "")),
            # "*" switches CORS to the permissive variant
            cors_allowed_origins=_csv(cors) if cors is not None else list(DEFAULT_CORS_ORIGINS),
            products_index_requires_admin=_flag("PRODUCTS_INDEX_REQUIRES_ADMIN", "1"),
            admin_info_exposes_ips=_flag("ADMIN_INFO_EXPOSE_IPS", "1"),
            serialize_writes=_flag("SERIALIZE_WRITES", "1"),
            max_content_length=int(os.getenv("MAX_CONTENT_LENGTH", str(10 * 1024 * 1024))),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            metrics_backend=os.getenv("METRICS_BACKEND", "noop").strip().lower() or "noop",
        )

    def override(self, d: dict):
        for k, v in d.items():
            if hasattr(self, k):
                setattr(self, k, v)

    def to_flask_dict(self):
        return {
            "DATA_DIR": self.data_dir,
            "STORE_BACKEND": self.store_backend,
            "ADMIN_IPS": list(self.admin_ips),
            "CORS_ALLOWED_ORIGINS": list(self.cors_allowed_origins),
            "PRODUCTS_INDEX_REQUIRES_ADMIN": self.products_index_requires_admin,
            "ADMIN_INFO_EXPOSE_IPS": self.admin_info_exposes_ips,
            "SERIALIZE_WRITES": self.serialize_writes,
            "MAX_CONTENT_LENGTH": self.max_content_length,
            "LOG_LEVEL": self.log_level,
            "METRICS_BACKEND": self.metrics_backend,
        }
