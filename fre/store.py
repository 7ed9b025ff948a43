"""Key-sorted collection of item statistics sharing one anchor and half-life."""

from __future__ import annotations

import bisect
import logging
import time
from collections.abc import Callable, Iterable, Iterator

from fre.models import SortMethod
from fre.stats import ItemStats

DEFAULT_HALF_LIFE = 60.0 * 60.0 * 24.0 * 3.0  # three days
DEFAULT_REBASE_HALF_LIVES = 5.0
logger = logging.getLogger("fre")


class FrecencyStore:
    """Items are kept sorted by key for O(log n) lookup.

    Score order is computed on demand by ``ranked``; storage order never
    changes to match it.
    """

    def __init__(
        self,
        reference_time: float | None = None,
        half_life: float = DEFAULT_HALF_LIFE,
        items: Iterable[ItemStats] = (),
    ) -> None:
        self.reference_time = time.time() if reference_time is None else reference_time
        self.half_life = half_life
        self.items: list[ItemStats] = _sortedUnique(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ItemStats]:
        return iter(self.items)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) is not None

    # ── lookup ───────────────────────────────────────────────

    def _locate(self, key: str) -> tuple[int, bool]:
        idx = bisect.bisect_left(self.items, key, key=lambda s: s.item)
        return idx, idx < len(self.items) and self.items[idx].item == key

    def find(self, key: str) -> ItemStats | None:
        """Return the stats for ``key`` or None."""
        idx, found = self._locate(key)
        return self.items[idx] if found else None

    def getOrCreate(self, key: str) -> ItemStats:
        """Return the stats for ``key``, inserting zeroed stats if missing."""
        idx, found = self._locate(key)
        if not found:
            self.items.insert(
                idx,
                ItemStats(item=key, half_life=self.half_life, reference_time=self.reference_time),
            )
        return self.items[idx]

    # ── mutation ─────────────────────────────────────────────

    def add(self, key: str, now: float | None = None) -> ItemStats:
        """Log a visit to ``key``."""
        stats = self.getOrCreate(key)
        stats.recordVisit(now)
        return stats

    def adjust(self, key: str, weight: float, now: float | None = None) -> ItemStats:
        """Change the score of ``key`` by ``weight`` (negative demotes)."""
        stats = self.getOrCreate(key)
        stats.adjust(weight, now)
        return stats

    def delete(self, key: str) -> bool:
        idx, found = self._locate(key)
        if found:
            del self.items[idx]
        return found

    def purge(self, exists: Callable[[str], bool]) -> list[str]:
        """Drop every item whose key fails ``exists``. Returns the dropped keys."""
        kept: list[ItemStats] = []
        removed: list[str] = []
        for stats in self.items:
            if exists(stats.item):
                kept.append(stats)
            else:
                removed.append(stats.item)
        self.items = kept
        if removed:
            logger.debug("Purged %d items", len(removed))
        return removed

    # ── ranking ──────────────────────────────────────────────

    def ranked(self, method: SortMethod, now: float | None = None) -> list[ItemStats]:
        """All items, best first. Ties have no guaranteed order."""
        if now is None:
            now = time.time()
        return sorted(self.items, key=lambda s: s.rankValue(method, now), reverse=True)

    def truncate(self, keep_num: int, method: SortMethod, now: float | None = None) -> None:
        """Keep only the top ``keep_num`` items by ``method``."""
        if keep_num >= len(self.items):
            return
        kept = self.ranked(method, now)[:keep_num]
        self.items = sorted(kept, key=lambda s: s.item)

    # ── reweighting ──────────────────────────────────────────

    def halfLivesPassed(self, now: float | None = None) -> float:
        """Number of half-lives elapsed since the reference time."""
        if now is None:
            now = time.time()
        return (now - self.reference_time) / self.half_life

    def rebaseAll(self, now: float | None = None) -> None:
        """Move the reference time to ``now``; scores are unchanged."""
        if now is None:
            now = time.time()
        self.reference_time = now
        for stats in self.items:
            stats.rebase(now)

    def rebaseIfStale(
        self, max_half_lives: float = DEFAULT_REBASE_HALF_LIVES, now: float | None = None
    ) -> bool:
        """Rebase once more than ``max_half_lives`` have passed. Returns True if it did."""
        if now is None:
            now = time.time()
        passed = self.halfLivesPassed(now)
        if passed <= max_half_lives:
            return False
        logger.debug("Rebasing store after %.1f half-lives", passed)
        self.rebaseAll(now)
        return True

    def setHalfLife(self, half_life: float, now: float | None = None) -> None:
        """Change the half-life, reweighting so current scores are preserved."""
        if now is None:
            now = time.time()
        # Item arithmetic is relative to each item's own anchor, so every
        # anchor has to match the store's before the swap.
        self.rebaseAll(now)
        self.half_life = half_life
        for stats in self.items:
            stats.setHalfLife(half_life, now)


def _sortedUnique(items: Iterable[ItemStats]) -> list[ItemStats]:
    """Sort by key; for duplicate keys the last one wins."""
    by_key: dict[str, ItemStats] = {}
    for stats in items:
        if stats.item in by_key:
            logger.warning("Duplicate item %r in store, keeping the last entry", stats.item)
        by_key[stats.item] = stats
    return sorted(by_key.values(), key=lambda s: s.item)
