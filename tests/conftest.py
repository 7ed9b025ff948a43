"""Shared test fixtures."""

from __future__ import annotations

import json
import time
from pathlib import Path

import pytest

from fre.stats import ItemStats
from fre.store import FrecencyStore

NOW = 1_700_000_000.0
HALF_LIFE = 259200.0


def scenarioJson(reference_time: float) -> dict:
    """/home is most frecent, / most frequent, /home/nonexistant_dir most recent."""
    return {
        "reference_time": reference_time,
        "half_life": HALF_LIFE,
        "items": [
            {"item": "/home", "frecency": 3.0, "last_accessed": -100.0, "num_accesses": 2},
            {
                "item": "/home/nonexistant_dir",
                "frecency": 2.0,
                "last_accessed": 1.0,
                "num_accesses": 1,
            },
            {"item": "/", "frecency": 1.0, "last_accessed": 0.0, "num_accesses": 3},
        ],
    }


def _stats(item: str, accumulator: float, last_accessed: float, num_accesses: int) -> ItemStats:
    return ItemStats(
        item=item,
        half_life=HALF_LIFE,
        reference_time=NOW,
        accumulator=accumulator,
        last_accessed=last_accessed,
        num_accesses=num_accesses,
    )


@pytest.fixture
def now() -> float:
    return NOW


@pytest.fixture
def empty_store() -> FrecencyStore:
    return FrecencyStore(reference_time=NOW, half_life=1.0)


@pytest.fixture
def scenario_store() -> FrecencyStore:
    return FrecencyStore(
        reference_time=NOW,
        half_life=HALF_LIFE,
        items=[
            _stats("/home", 3.0, -100.0, 2),
            _stats("/home/x", 2.0, 1.0, 1),
            _stats("/", 1.0, 0.0, 3),
        ],
    )


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """Scenario store on disk, anchored at the real current time."""
    path = tmp_path / "store.json"
    path.write_text(json.dumps(scenarioJson(time.time()), indent=2))
    return path
