"""Tests for rescuebag.core.progress – key-value persistence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rescuebag.core.progress import (
    COMPLETED_ORDERS_KEY,
    ProgressStore,
    default_storage_path,
    read_completed_orders,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store(tmp_path: Path) -> ProgressStore:
    """ProgressStore backed by a temp file so tests don't touch ~/.rescuebag."""
    return ProgressStore(tmp_path / "storage.json")


# ---------------------------------------------------------------------------
# Storage location
# ---------------------------------------------------------------------------

class TestStoragePath:
    def test_default_under_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.delenv("RESCUEBAG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert default_storage_path() == tmp_path / ".rescuebag" / "storage.json"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("RESCUEBAG_HOME", str(tmp_path / "custom"))
        assert default_storage_path() == tmp_path / "custom" / "storage.json"


# ---------------------------------------------------------------------------
# ProgressStore – get / set
# ---------------------------------------------------------------------------

class TestGetSet:
    def test_missing_key(self, store: ProgressStore):
        assert store.get("nope") is None

    def test_set_then_get(self, store: ProgressStore):
        assert store.set("k", "v") is True
        assert store.get("k") == "v"

    def test_persists_to_disk(self, store: ProgressStore):
        store.set(COMPLETED_ORDERS_KEY, "7")
        data = json.loads(store.file_path.read_text(encoding="utf-8"))
        assert data == {COMPLETED_ORDERS_KEY: "7"}

    def test_round_trip_across_instances(self, tmp_path: Path):
        ProgressStore(tmp_path / "storage.json").set(COMPLETED_ORDERS_KEY, "7")
        reloaded = ProgressStore(tmp_path / "storage.json")
        assert read_completed_orders(reloaded) == 7

    def test_remove(self, store: ProgressStore):
        store.set("a", "1")
        store.remove("a")
        assert store.get("a") is None
        assert json.loads(store.file_path.read_text(encoding="utf-8")) == {}

    def test_reset(self, store: ProgressStore):
        store.set("a", "1")
        store.set("b", "2")
        store.reset()
        assert store.get("a") is None
        assert store.get("b") is None


# ---------------------------------------------------------------------------
# ProgressStore – failure handling
# ---------------------------------------------------------------------------

class TestFailures:
    def test_corrupt_json(self, tmp_path: Path):
        f = tmp_path / "storage.json"
        f.write_text("NOT VALID JSON", encoding="utf-8")
        assert ProgressStore(f).get(COMPLETED_ORDERS_KEY) is None

    def test_non_object_payload(self, tmp_path: Path):
        f = tmp_path / "storage.json"
        f.write_text("[1, 2, 3]", encoding="utf-8")
        assert ProgressStore(f).get("0") is None

    def test_save_failure_keeps_memory_value(self, store: ProgressStore, monkeypatch: pytest.MonkeyPatch):
        def boom(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_text", boom)
        assert store.set(COMPLETED_ORDERS_KEY, "3") is False
        assert store.get(COMPLETED_ORDERS_KEY) == "3"


# ---------------------------------------------------------------------------
# read_completed_orders
# ---------------------------------------------------------------------------

class TestReadCompletedOrders:
    def test_missing_is_zero(self, store: ProgressStore):
        assert read_completed_orders(store) == 0

    @pytest.mark.parametrize("raw,expected", [("12", 12), (" 4 ", 4), ("abc", 0), ("", 0), ("-3", 0), ("2.5", 0)])
    def test_parsing(self, store: ProgressStore, raw: str, expected: int):
        store.set(COMPLETED_ORDERS_KEY, raw)
        assert read_completed_orders(store) == expected
