"""Line formatting for ranked listings."""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import TextIO

from fre.models import SortMethod
from fre.stats import ItemStats

# decimals shown with --stat when no override is given
DEFAULT_PRECISION = {
    SortMethod.RECENT: 3,
    SortMethod.FREQUENT: 0,
    SortMethod.FRECENT: 3,
}


def statValue(stats: ItemStats, method: SortMethod, now: float) -> float:
    """Score shown with --stat: hours since access, access count or frecency."""
    method = SortMethod(method)
    if method is SortMethod.RECENT:
        return stats.secsSinceAccess(now) / 60.0 / 60.0
    if method is SortMethod.FREQUENT:
        return float(stats.num_accesses)
    return stats.getScore(now)


def formatStat(
    stats: ItemStats,
    method: SortMethod,
    show_stats: bool,
    now: float | None = None,
    precision: int | None = None,
) -> str:
    if not show_stats:
        return f"{stats.item}\n"
    if now is None:
        now = time.time()
    method = SortMethod(method)
    digits = DEFAULT_PRECISION[method] if precision is None else precision
    return f"{statValue(stats, method, now):.{digits}f}\t{stats.item}\n"


def writeStats(
    out: TextIO,
    items: Iterable[ItemStats],
    method: SortMethod,
    show_stats: bool,
    now: float | None = None,
    precision: int | None = None,
) -> None:
    """Write one line per item to ``out``."""
    if now is None:
        now = time.time()
    for stats in items:
        out.write(formatStat(stats, method, show_stats, now, precision))
