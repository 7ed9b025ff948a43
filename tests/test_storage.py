"""Tests for reading and writing the JSON store file."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fre.models import SortMethod
from fre.storage import (
    StoreReadError,
    StoreWriteError,
    dumps,
    loads,
    readStore,
    toRecord,
    writeStore,
)
from fre.store import FrecencyStore

from tests.conftest import HALF_LIFE, NOW, scenarioJson


class TestLoad:
    def test_threadsAggregateIntoItems(self):
        store = loads(json.dumps(scenarioJson(NOW)))
        assert store.reference_time == NOW
        assert store.half_life == HALF_LIFE
        for stats in store:
            assert stats.reference_time == NOW
            assert stats.half_life == HALF_LIFE

    def test_sortsByKey(self):
        store = loads(json.dumps(scenarioJson(NOW)))
        assert [s.item for s in store] == ["/", "/home", "/home/nonexistant_dir"]

    def test_fieldMapping(self):
        home = loads(json.dumps(scenarioJson(NOW))).find("/home")
        assert home.accumulator == 3.0
        assert home.last_accessed == -100.0
        assert home.num_accesses == 2

    def test_legacyPathSpelling(self):
        data = {
            "reference_time": NOW,
            "half_life": 10.0,
            "paths": [{"path": "/a", "frecency": 1.0, "last_accessed": 0.0, "num_accesses": 1}],
        }
        store = loads(json.dumps(data))
        assert store.find("/a") is not None
        assert '"item": "/a"' in dumps(store)

    def test_scenarioRanking(self):
        store = loads(json.dumps(scenarioJson(NOW)))
        ranked = [s.item for s in store.ranked(SortMethod.FRECENT, NOW)]
        assert ranked == ["/home", "/home/nonexistant_dir", "/"]


class TestDump:
    def test_noPerItemAnchor(self, scenario_store: FrecencyStore):
        data = json.loads(dumps(scenario_store))
        assert set(data) == {"reference_time", "half_life", "items"}
        for item in data["items"]:
            assert set(item) == {"item", "frecency", "last_accessed", "num_accesses"}

    def test_roundTrip(self, scenario_store: FrecencyStore):
        first = dumps(scenario_store)
        second = dumps(loads(first))
        assert json.loads(first) == json.loads(second)
        assert toRecord(loads(first)) == toRecord(scenario_store)

    def test_deleteMissingLeavesBytes(self, scenario_store: FrecencyStore):
        before = dumps(scenario_store)
        scenario_store.delete("/does/not/exist")
        scenario_store.purge(lambda key: True)
        scenario_store.truncate(3, SortMethod.FRECENT, NOW)
        assert dumps(scenario_store) == before


class TestFiles:
    def test_missingFileGivesEmptyStore(self, tmp_path: Path):
        store = readStore(tmp_path / "absent.json", half_life=42.0, now=NOW)
        assert len(store) == 0
        assert store.half_life == 42.0
        assert store.reference_time == NOW

    def test_writeThenRead(self, tmp_path: Path, scenario_store: FrecencyStore):
        path = tmp_path / "nested" / "dir" / "store.json"
        writeStore(scenario_store, path)
        assert path.is_file()
        store = readStore(path)
        assert [s.item for s in store] == ["/", "/home", "/home/x"]
        assert store.find("/home").getScore(NOW) == pytest.approx(3.0)

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "not json",
            '{"half_life": 1.0}',
            '{"reference_time": 1.0, "half_life": 0, "items": []}',
            '{"reference_time": 1.0, "half_life": -5.0, "items": []}',
            '{"reference_time": 1, "half_life": 1, "items": [{}]}',
        ],
    )
    def test_malformed(self, tmp_path: Path, content: str):
        path = tmp_path / "store.json"
        path.write_text(content)
        with pytest.raises(StoreReadError) as exc:
            readStore(path)
        assert exc.value.path == path
        assert "unable to read store file" in str(exc.value)
        assert str(path) in str(exc.value)

    def test_unwritable(self, tmp_path: Path, scenario_store: FrecencyStore):
        blocker = tmp_path / "file"
        blocker.write_text("")
        path = blocker / "store.json"
        with pytest.raises(StoreWriteError) as exc:
            writeStore(scenario_store, path)
        assert exc.value.path == path
        assert "unable to write store file" in str(exc.value)
