from __future__ import annotations

from storeadmin.config import DEFAULT_CORS_ORIGINS, Config


def test_defaults(monkeypatch):
    for name in (
        "DATA_DIR",
        "STORE_BACKEND",
        "ADMIN_IPS",
        "CORS_ALLOW_ORIGINS",
        "PRODUCTS_INDEX_REQUIRES_ADMIN",
        "ADMIN_INFO_EXPOSE_IPS",
        "SERIALIZE_WRITES",
        "MAX_CONTENT_LENGTH",
        "LOG_LEVEL",
        "METRICS_BACKEND",
    ):
        monkeypatch.delenv(name, raising=False)
    cfg = Config.from_env()
    assert cfg.data_dir == ""
    assert cfg.store_backend == "file"
    assert cfg.admin_ips == []
    assert cfg.cors_allowed_origins == DEFAULT_CORS_ORIGINS
    assert cfg.products_index_requires_admin is True
    assert cfg.serialize_writes is True
    assert cfg.max_content_length == 10 * 1024 * 1024


def test_from_env(monkeypatch):
    monkeypatch.setenv("DATA_DIR", "/srv/storefront")
    monkeypatch.setenv("STORE_BACKEND", "Memory")
    monkeypatch.setenv("ADMIN_IPS", " 198.51.100.7, ,192.0.2.10 ")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "*")
    monkeypatch.setenv("PRODUCTS_INDEX_REQUIRES_ADMIN", "0")
    monkeypatch.setenv("ADMIN_INFO_EXPOSE_IPS", "false")
    monkeypatch.setenv("SERIALIZE_WRITES", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = Config.from_env()
    assert cfg.data_dir == "/srv/storefront"
    assert cfg.store_backend == "memory"
    assert cfg.admin_ips == ["198.51.100.7", "192.0.2.10"]
    assert cfg.cors_allowed_origins == ["*"]
    assert cfg.products_index_requires_admin is False
    assert cfg.admin_info_exposes_ips is False
    assert cfg.serialize_writes is False
    assert cfg.log_level == "DEBUG"


def test_empty_cors_env_disables_cors(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "")
    assert Config.from_env().cors_allowed_origins == []


def test_override_ignores_unknown_keys():
    cfg = Config()
    cfg.override({"admin_ips": ["192.0.2.1"], "nonsense": 1})
    assert cfg.admin_ips == ["192.0.2.1"]
    assert not hasattr(cfg, "nonsense")
    assert cfg.to_flask_dict()["ADMIN_IPS"] == ["192.0.2.1"]
