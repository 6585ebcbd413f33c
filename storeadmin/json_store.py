"""Durable storage for the named JSON collections.

Each collection is one JSON object on disk (``<data_dir>/<name>.json``).
Writes go to a temp file in the same directory and are moved over the target
with ``os.replace`` so readers only ever see a complete document.

A ``Store`` protocol keeps the backend swappable; ``MemoryStore`` serves
tests and throwaway demo instances.
"""
from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
import re
import tempfile
import threading
from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class StoreError(Exception):
    """Base class for storage failures (surfaced to callers as a generic 500)."""

    def __init__(self, message: str, collection: str | None = None) -> None:
        super().__init__(message)
        self.collection = collection


class StoreIOError(StoreError):
    """Backing file could not be read or written."""


class StoreParseError(StoreError):
    """Backing file exists but does not hold a JSON object."""


@runtime_checkable
class Store(Protocol):
    def ensure_ready(self) -> None: ...  # pragma: no cover
    def load(self, name: str) -> dict[str, Any]: ...  # pragma: no cover
    def save(self, name: str, data: dict[str, Any]) -> None: ...  # pragma: no cover
    def lock(self, name: str) -> contextlib.AbstractContextManager[None]: ...  # pragma: no cover


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise ValueError(f"invalid collection name: {name!r}")
    return name


class _CollectionLocks:
    """One re-entrant lock per collection name, created on first use."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    @contextlib.contextmanager
    def hold(self, name: str) -> Iterator[None]:
        if not self.enabled:
            yield
            return
        with self._guard:
            lk = self._locks.setdefault(name, threading.RLock())
        with lk:
            yield


class JsonFileStore:
    def __init__(self, data_dir: str, serialize_writes: bool = True) -> None:
        self.data_dir = os.path.abspath(data_dir)
        self._locks = _CollectionLocks(serialize_writes)

    def path_for(self, name: str) -> str:
        return os.path.join(self.data_dir, f"{_check_name(name)}.json")

    def ensure_ready(self) -> None:
        os.makedirs(self.data_dir, exist_ok=True)

    def lock(self, name: str) -> contextlib.AbstractContextManager[None]:
        return self._locks.hold(_check_name(name))

    def load(self, name: str) -> dict[str, Any]:
        path = self.path_for(name)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as ex:
            raise StoreParseError(f"{path}: {ex}", name) from ex
        except (OSError, UnicodeDecodeError) as ex:
            raise StoreIOError(f"{path}: {ex}", name) from ex
        if not isinstance(data, dict):
            raise StoreParseError(f"{path}: top-level value is {type(data).__name__}, expected object", name)
        return data

    def save(self, name: str, data: dict[str, Any]) -> None:
        path = self.path_for(name)
        try:
            payload = json.dumps(data, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as ex:
            raise StoreIOError(f"{path}: not serializable: {ex}", name) from ex
        tmp: str | None = None
        try:
            self.ensure_ready()
            fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=f".{name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
            tmp = None
        except (OSError, UnicodeError) as ex:
            raise StoreIOError(f"{path}: {ex}", name) from ex
        finally:
            if tmp is not None:
                with contextlib.suppress(OSError):
                    os.remove(tmp)
        logger.debug("saved collection=%s records=%d path=%s", name, len(data), path)


class MemoryStore:
    """Process-local store; each instance owns its data."""

    def __init__(self, initial: dict[str, dict[str, Any]] | None = None, serialize_writes: bool = True) -> None:
        self._data: dict[str, dict[str, Any]] = copy.deepcopy(initial or {})
        self._locks = _CollectionLocks(serialize_writes)

    def ensure_ready(self) -> None:
        return

    def lock(self, name: str) -> contextlib.AbstractContextManager[None]:
        return self._locks.hold(_check_name(name))

    def load(self, name: str) -> dict[str, Any]:
        return copy.deepcopy(self._data.get(_check_name(name), {}))

    def save(self, name: str, data: dict[str, Any]) -> None:
        self._data[_check_name(name)] = copy.deepcopy(data)


def build_store(backend: str, data_dir: str, serialize_writes: bool = True) -> Store:
    if backend == "memory":
        return MemoryStore(serialize_writes=serialize_writes)
    if backend != "file":
        raise ValueError(f"unknown store backend: {backend!r}")
    return JsonFileStore(data_dir, serialize_writes=serialize_writes)


__all__ = [
    "JsonFileStore",
    "MemoryStore",
    "Store",
    "StoreError",
    "StoreIOError",
    "StoreParseError",
    "build_store",
]
