"""Decay-weighted usage statistics for a single item.

The true score of an item at time ``t`` is::

    S(t) = sum(w_i * 2 ** (-(t - t_i) / H))

over every past visit ``i`` of weight ``w_i`` at time ``t_i``. Keeping every
visit around is not an option, so each item stores the same sum re-expressed
against a fixed anchor (``reference_time``)::

    accumulator = sum(w_i * 2 ** ((t_i - reference_time) / H))

and divides the anchor back out on read. Folding in a visit is then O(1).
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from fre.models import SortMethod


@dataclass
class ItemStats:
    item: str
    half_life: float
    reference_time: float
    accumulator: float = 0.0
    last_accessed: float = 0.0  # seconds after reference_time, may be negative
    num_accesses: int = 0

    # ── score arithmetic ─────────────────────────────────────

    def getScore(self, now: float | None = None) -> float:
        """Current decayed score at ``now``."""
        if now is None:
            now = time.time()
        # negative exponent: a stale anchor underflows to 0 instead of overflowing
        return self.accumulator * 2.0 ** (-(now - self.reference_time) / self.half_life)

    def setScore(self, value: float, now: float | None = None) -> None:
        """Rewrite the accumulator so that ``getScore(now) == value``."""
        if now is None:
            now = time.time()
        self.accumulator = value * 2.0 ** ((now - self.reference_time) / self.half_life)

    def updateScore(self, weight: float, now: float | None = None) -> None:
        if now is None:
            now = time.time()
        self.setScore(self.getScore(now) + weight, now)

    # ── visits ───────────────────────────────────────────────

    def recordVisit(self, now: float | None = None) -> None:
        """Log one visit at ``now``."""
        if now is None:
            now = time.time()
        self.updateScore(1.0, now)
        self.num_accesses += 1
        self.last_accessed = now - self.reference_time

    def adjust(self, weight: float, now: float | None = None) -> None:
        """Promote (or demote, for negative ``weight``) without touching recency.

        Scores and counts are allowed to go negative.
        """
        if now is None:
            now = time.time()
        self.updateScore(weight, now)
        self.num_accesses += round(weight)

    # ── reweighting ──────────────────────────────────────────

    def setHalfLife(self, half_life: float, now: float | None = None) -> None:
        """Change the decay rate; the score at ``now`` stays the same."""
        if now is None:
            now = time.time()
        score = self.getScore(now)
        self.half_life = half_life
        self.setScore(score, now)

    def rebase(self, now: float | None = None) -> None:
        """Move the anchor to ``now`` keeping score and last access intact."""
        if now is None:
            now = time.time()
        score = self.getScore(now)
        delta = self.reference_time - now
        self.reference_time = now
        self.last_accessed += delta
        self.setScore(score, now)

    # ── derived values ───────────────────────────────────────

    def lastAccess(self) -> float:
        """Epoch seconds of the most recent access."""
        return self.reference_time + self.last_accessed

    def secsSinceAccess(self, now: float | None = None) -> float:
        if now is None:
            now = time.time()
        return now - self.lastAccess()

    def rankValue(self, method: SortMethod, now: float | None = None) -> float:
        """Value ranked on (higher is better) for ``method``."""
        method = SortMethod(method)
        if method is SortMethod.FREQUENT:
            return self.num_accesses
        if method is SortMethod.RECENT:
            return self.lastAccess()
        return self.getScore(now)
