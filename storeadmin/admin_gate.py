"""Admin gate: caller address resolution + allowlist authorization.

The gate is a coarse capability check keyed on the caller's network address.
It is NOT authentication: ``X-Forwarded-For`` and ``X-Real-IP`` are taken at
face value, so any client able to set headers can claim an allowlisted
address. Deploy behind a proxy that overwrites these headers, or swap the
``Authorizer`` for a token based one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import wraps
from typing import ParamSpec, Protocol, TypeVar, runtime_checkable

from flask import current_app, g, request
from werkzeug.wrappers.request import Request

from . import metrics

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)

LOOPBACK_HOSTNAME = "localhost"
LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "::1", "::ffff:127.0.0.1"})


class AuthzError(Exception):
    """Signals a 403; the central handler renders ``{error, ip}``."""

    def __init__(self, message: str = "Access denied", ip: str | None = None):
        super().__init__(message)
        self.ip = ip


@dataclass(frozen=True)
class RequestOrigin:
    forwarded_for: str | None = None
    real_ip: str | None = None
    remote_addr: str | None = None
    hostname: str | None = None

    @property
    def address(self) -> str | None:
        # Priority: first X-Forwarded-For hop, X-Real-IP, transport peer
        if self.forwarded_for:
            first = self.forwarded_for.split(",")[0].strip()
            if first:
                return first
        if self.real_ip and self.real_ip.strip():
            return self.real_ip.strip()
        return self.remote_addr or None


def _strip_port(host: str) -> str:
    host = host.strip()
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host[1:]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def origin_from_request(req: Request) -> RequestOrigin:
    return RequestOrigin(
        forwarded_for=req.headers.get("X-Forwarded-For"),
        real_ip=req.headers.get("X-Real-IP"),
        remote_addr=req.remote_addr,
        hostname=_strip_port(req.host or "").lower() or None,
    )


def client_ip() -> str | None:
    """Address of the current request's caller (same rules as the gate)."""
    return origin_from_request(request).address


@runtime_checkable
class Authorizer(Protocol):
    def authorize(self, origin: RequestOrigin) -> bool: ...  # pragma: no cover


class IPAllowlistAuthorizer:
    def __init__(self, allowed_ips: Iterable[str] = ()) -> None:
        self.allowed_ips = tuple(ip.strip() for ip in allowed_ips if ip and ip.strip())

    def is_loopback(self, origin: RequestOrigin) -> bool:
        if origin.hostname == LOOPBACK_HOSTNAME:
            return True
        return origin.address in LOOPBACK_ADDRESSES

    def authorize(self, origin: RequestOrigin) -> bool:
        if self.is_loopback(origin):
            return True
        return origin.address is not None and origin.address in self.allowed_ips


def get_authorizer() -> Authorizer:
    return current_app.authorizer  # type: ignore[attr-defined]


def check_admin() -> str | None:
    """Run the gate for the current request; return the caller address or raise AuthzError."""
    origin = origin_from_request(request)
    ip = origin.address
    allowed = get_authorizer().authorize(origin)
    if not allowed:
        logger.warning("Admin access denied ip=%s hostname=%s path=%s", ip, origin.hostname, request.path)
        metrics.increment("admin_gate.denied", {"path": request.path})
        raise AuthzError("Access denied", ip=ip)
    logger.info("Admin access granted ip=%s hostname=%s path=%s", ip, origin.hostname, request.path)
    g.client_ip = ip
    return ip


def require_admin(fn: Callable[P, R]) -> Callable[P, R]:
    @wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        check_admin()
        return fn(*args, **kwargs)

    return wrapper


__all__ = [
    "AuthzError",
    "Authorizer",
    "IPAllowlistAuthorizer",
    "RequestOrigin",
    "check_admin",
    "client_ip",
    "origin_from_request",
    "require_admin",
]
