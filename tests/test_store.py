"""
Tests for the controlled and local layout stores
"""

import json
import logging
from unittest.mock import MagicMock

import pytest

from floorplan.models import ItemKind, LayoutItem
from floorplan.persistence import SaveStatus
from floorplan.state import encode_layout
from floorplan.store import ExternalStore, LocalFallbackStore


class TestExternalStore:
    def test_reads_through_getter_and_upgrades_legacy(self):
        holder = {"items": [{"id": 2, "x": 1, "y": 1}]}
        store = ExternalStore(lambda: holder["items"], MagicMock())
        items = store.read()
        assert items[0].id == "table-2" and items[0].label == "2"
        holder["items"] = []
        assert store.read() == []

    def test_none_reads_empty(self):
        assert ExternalStore(lambda: None, MagicMock()).read() == []

    def test_write_goes_to_callback(self):
        on_change = MagicMock()
        store = ExternalStore(lambda: [], on_change)
        item = LayoutItem(id="w", kind=ItemKind.WALL)
        store.write((item,))
        on_change.assert_called_once_with([item])
        assert store.controlled


class TestLocalFallbackStore:
    def test_missing_file_uses_default_grid(self, tmp_path):
        store = LocalFallbackStore(tmp_path / "layout.json", [1, 2])
        assert [it.label for it in store.read()] == ["1", "2"]
        assert not store.controlled

    def test_corrupt_file_falls_back_and_logs(self, tmp_path, caplog):
        path = tmp_path / "layout.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="floorplan.store"):
            store = LocalFallbackStore(path, [1, 2, 3])
        assert [it.label for it in store.read()] == ["1", "2", "3"]
        assert "unusable" in caplog.text

    def test_bad_encoding_falls_back(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_bytes(b'[{"id":"\xff\xfe","kind":"wall","x":0,"y":0}]')
        assert [it.label for it in LocalFallbackStore(path, [1, 2]).read()] == ["1", "2"]

    def test_infinite_rotation_falls_back(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text('[{"id": "w", "kind": "wall", "x": 0, "y": 0, "rotation": Infinity}]',
                        encoding="utf-8")
        assert [it.label for it in LocalFallbackStore(path, [1]).read()] == ["1"]

    def test_wrong_shape_falls_back(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"tables": []}), encoding="utf-8")
        assert len(LocalFallbackStore(path, [1]).read()) == 1

    def test_legacy_file_upgraded(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text(json.dumps([{"id": 4, "x": 7, "y": 8}]), encoding="utf-8")
        item = LocalFallbackStore(path, [4]).read()[0]
        assert (item.id, item.label, item.x) == ("table-4", "4", 7.0)

    def test_write_persists_immediately(self, tmp_path):
        path = tmp_path / "layout.json"
        statuses = []
        store = LocalFallbackStore(path, [], on_status=statuses.append)
        wall = LayoutItem(id="w", kind=ItemKind.WALL, x=1.0, y=2.0, width=150.0, height=10.0)
        store.write([wall])
        assert json.loads(path.read_text(encoding="utf-8")) == encode_layout([wall])
        assert LocalFallbackStore(path, []).read() == [wall]
        assert statuses == [SaveStatus.SAVED]

    def test_read_returns_copy(self, tmp_path):
        store = LocalFallbackStore(tmp_path / "layout.json", [1])
        store.read().clear()
        assert len(store.read()) == 1

    def test_write_failure_reported_and_kept_in_memory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        statuses = []
        store = LocalFallbackStore(blocker / "layout.json", [], on_status=statuses.append)
        wall = LayoutItem(id="w", kind=ItemKind.WALL)
        store.write([wall])
        assert statuses == [SaveStatus.ERROR]
        assert store.read() == [wall]
