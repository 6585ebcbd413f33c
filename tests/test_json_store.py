from __future__ import annotations

import json
import os
import threading

import pytest

from storeadmin import json_store
from storeadmin.json_store import (
    JsonFileStore,
    MemoryStore,
    StoreIOError,
    StoreParseError,
    build_store,
)


def _tmp_files(directory) -> list[str]:
    return [n for n in os.listdir(directory) if n.endswith(".tmp")]


def test_missing_collection_loads_empty(tmp_path):
    store = JsonFileStore(str(tmp_path / "data"))
    assert store.load("products") == {}


def test_round_trip(tmp_path):
    store = JsonFileStore(str(tmp_path / "data"))
    data = {
        "p1": {"name": "Bead Å", "price": 9.99, "sizes": ["S", "M"], "inStock": False},
        "p2": {"name": "Charm", "price": 0, "meta": {"nested": [1, 2, {"x": None}]}},
    }
    store.save("products", data)
    assert store.load("products") == data


def test_save_creates_directory_and_pretty_prints(tmp_path):
    target = tmp_path / "nested" / "data"
    store = JsonFileStore(str(target))
    store.save("content", {"home": {"title": "Hi"}})
    text = (target / "content.json").read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert json.loads(text) == {"home": {"title": "Hi"}}


def test_save_leaves_no_temp_files(tmp_path):
    store = JsonFileStore(str(tmp_path))
    for i in range(3):
        store.save("products", {f"p{i}": {"name": "x", "price": i}})
    assert _tmp_files(tmp_path) == []
    assert store.load("products") == {"p2": {"name": "x", "price": 2}}


def test_corrupt_file_raises_parse_error(tmp_path):
    (tmp_path / "products.json").write_text("{not json", encoding="utf-8")
    store = JsonFileStore(str(tmp_path))
    with pytest.raises(StoreParseError):
        store.load("products")


def test_non_object_document_raises_parse_error(tmp_path):
    (tmp_path / "content.json").write_text("[1, 2, 3]", encoding="utf-8")
    store = JsonFileStore(str(tmp_path))
    with pytest.raises(StoreParseError):
        store.load("content")


def test_unreadable_path_raises_io_error(tmp_path):
    (tmp_path / "content.json").mkdir()
    store = JsonFileStore(str(tmp_path))
    with pytest.raises(StoreIOError):
        store.load("content")


def test_failed_replace_keeps_previous_file(tmp_path, monkeypatch):
    store = JsonFileStore(str(tmp_path))
    store.save("products", {"p1": {"name": "Old", "price": 1}})

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(json_store.os, "replace", boom)
    with pytest.raises(StoreIOError):
        store.save("products", {"p1": {"name": "New", "price": 2}})
    monkeypatch.undo()

    assert store.load("products") == {"p1": {"name": "Old", "price": 1}}
    assert _tmp_files(tmp_path) == []


def test_unserializable_mapping_raises_io_error(tmp_path):
    store = JsonFileStore(str(tmp_path))
    with pytest.raises(StoreIOError):
        store.save("products", {"p1": {"when": object()}})
    assert not (tmp_path / "products.json").exists()


def test_unencodable_text_raises_io_error_and_keeps_file(tmp_path):
    store = JsonFileStore(str(tmp_path))
    store.save("content", {"home": {"t": "ok"}})
    with pytest.raises(StoreIOError):
        store.save("content", {"home": {"t": "\ud800"}})
    assert store.load("content") == {"home": {"t": "ok"}}
    assert _tmp_files(tmp_path) == []


@pytest.mark.parametrize("name",["../etc", "a/b", "", "products.json"])
def test_invalid_collection_name_rejected(tmp_path, name):
    store = JsonFileStore(str(tmp_path))
    with pytest.raises(ValueError):
        store.load(name)


def test_memory_store_isolates_callers():
    store = MemoryStore()
    store.save("products", {"p1": {"name": "A", "price": 1}})
    loaded = store.load("products")
    loaded["p1"]["name"] = "mutated"
    loaded["p2"] = {}
    assert store.load("products") == {"p1": {"name": "A", "price": 1}}
    assert store.load("content") == {}


def test_lock_is_reentrant(tmp_path):
    store = JsonFileStore(str(tmp_path))
    with store.lock("products"):
        with store.lock("products"):
            store.save("products", {})
    assert store.load("products") == {}


def test_build_store_selects_backend(tmp_path):
    assert isinstance(build_store("memory", str(tmp_path)), MemoryStore)
    assert isinstance(build_store("file", str(tmp_path)), JsonFileStore)
    with pytest.raises(ValueError):
        build_store("postgres", str(tmp_path))


def test_locked_read_modify_write_keeps_every_update(tmp_path):
    store = JsonFileStore(str(tmp_path))
    store.save("products", {})

    def worker(n: int) -> None:
        for i in range(5):
            with store.lock("products"):
                data = store.load("products")
                data[f"w{n}-{i}"] = {"name": "x", "price": i}
                store.save("products", data)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.load("products")) == 30
