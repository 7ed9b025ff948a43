"""JSON store file <-> FrecencyStore."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from pydantic import ValidationError

from fre.models import ItemRecord, StoreRecord
from fre.stats import ItemStats
from fre.store import DEFAULT_HALF_LIFE, FrecencyStore

logger = logging.getLogger("fre")


class StoreError(Exception):
    """Base for store file failures. Carries the offending path."""

    action = "access"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"unable to {self.action} store file {path}: {reason}")


class StoreReadError(StoreError):
    action = "read"


class StoreWriteError(StoreError):
    action = "write"


# ── mapping ──────────────────────────────────────────────────


def toRecord(store: FrecencyStore) -> StoreRecord:
    return StoreRecord(
        reference_time=store.reference_time,
        half_life=store.half_life,
        items=[
            ItemRecord(
                item=s.item,
                frecency=s.accumulator,
                last_accessed=s.last_accessed,
                num_accesses=s.num_accesses,
            )
            for s in store.items
        ],
    )


def fromRecord(record: StoreRecord) -> FrecencyStore:
    """Build a store, threading the aggregate anchor and half-life into every item."""
    items = (
        ItemStats(
            item=r.item,
            half_life=record.half_life,
            reference_time=record.reference_time,
            accumulator=r.frecency,
            last_accessed=r.last_accessed,
            num_accesses=r.num_accesses,
        )
        for r in record.items
    )
    return FrecencyStore(
        reference_time=record.reference_time, half_life=record.half_life, items=items
    )


def dumps(store: FrecencyStore) -> str:
    return toRecord(store).model_dump_json(indent=2) + "\n"


def loads(data: str | bytes) -> FrecencyStore:
    """Parse store JSON. Raises pydantic.ValidationError on bad input."""
    return fromRecord(StoreRecord.model_validate_json(data))


# ── file I/O ─────────────────────────────────────────────────


def readStore(
    path: Path, half_life: float = DEFAULT_HALF_LIFE, now: float | None = None
) -> FrecencyStore:
    """Load the store at ``path``; a missing file gives a fresh empty store."""
    if not path.is_file():
        logger.debug("No store at %s, starting empty", path)
        return FrecencyStore(
            reference_time=time.time() if now is None else now, half_life=half_life
        )
    try:
        store = loads(path.read_bytes())
    except OSError as e:
        raise StoreReadError(path, e.strerror or str(e)) from e
    except ValidationError as e:
        raise StoreReadError(path, f"{e.error_count()} validation error(s)") from e
    logger.debug("Loaded %d items from %s", len(store), path)
    return store


def writeStore(store: FrecencyStore, path: Path) -> None:
    """Serialize ``store`` over ``path``, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dumps(store))
    except OSError as e:
        raise StoreWriteError(path, e.strerror or str(e)) from e
    logger.debug("Wrote %d items to %s", len(store), path)
