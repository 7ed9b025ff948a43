"""fre command line: load the store, apply updates, print listings, save."""

from __future__ import annotations

import io
import logging
import os
import sys
import time
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from fre.config import loadConfig, storePath
from fre.models import SortMethod
from fre.storage import StoreError, readStore, writeStore
from fre.version import __version__
from fre.writer import writeStats

logger = logging.getLogger("fre")

_cli = typer.Typer(
    name="fre",
    help="Track the most frecent (frequent + recent) items, usually directories.",
    add_completion=False,
    rich_markup_mode="rich",
)

_err_console = Console(stderr=True)


def _fail(message: str) -> NoReturn:
    _err_console.print(f"[red]error:[/red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(1)


def _versionCallback(value: bool) -> None:
    if value:
        print(f"fre {__version__}")
        raise typer.Exit()


def _configureLogging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s | %(message)s",
    )


def normalizeItem(item: str) -> str:
    """Existing filesystem entries become absolute paths; other keys are kept verbatim."""
    if os.path.isabs(item) or not os.path.exists(item):
        return item
    return os.path.abspath(item)


def _checkArgs(
    item: str | None,
    updates: list[str],
    listings: list[str],
    limit: int | None,
    stat_digits: int | None,
    stat: bool,
    store: Path | None,
    store_name: str | None,
    halflife: float | None,
) -> None:
    if len(updates) > 1:
        raise typer.BadParameter(f"{' and '.join(updates)} cannot be used together")
    if updates and item is None:
        raise typer.BadParameter(f"{updates[0]} requires an ITEM")
    if updates and listings:
        raise typer.BadParameter(f"{updates[0]} cannot be used with {listings[0]}")
    if len(listings) > 1:
        raise typer.BadParameter("--sorted and --stat cannot be used together")
    if limit is not None and not listings:
        raise typer.BadParameter("--limit requires --sorted or --stat")
    if stat_digits is not None and not stat:
        raise typer.BadParameter("--stat_digits requires --stat")
    if store is not None and store_name is not None:
        raise typer.BadParameter("--store and --store_name cannot be used together")
    if halflife is not None and halflife <= 0:
        raise typer.BadParameter("--halflife must be positive")


@_cli.command()
def fre(
    item: str | None = typer.Argument(None, help="The item to update"),
    add: bool = typer.Option(False, "--add", "-a", help="Add a visit to ITEM"),
    increase: float | None = typer.Option(
        None, "--increase", "-i", metavar="WEIGHT", help="Increase the weight of ITEM by WEIGHT"
    ),
    decrease: float | None = typer.Option(
        None, "--decrease", "-d", metavar="WEIGHT", help="Decrease the weight of ITEM by WEIGHT"
    ),
    delete: bool = typer.Option(False, "--delete", "-D", help="Delete ITEM from the store"),
    sorted_: bool = typer.Option(
        False, "--sorted", help="Print the stored items from highest to lowest score"
    ),
    stat: bool = typer.Option(False, "--stat", help="Print the stored items with their scores"),
    limit: int | None = typer.Option(
        None, "--limit", min=0, help="Limit the number of results printed"
    ),
    stat_digits: int | None = typer.Option(
        None, "--stat_digits", min=0, help="Override the number of digits shown with --stat"
    ),
    sort_method: SortMethod | None = typer.Option(
        None, "--sort_method", "-s", help="The method to sort output by [default: frecent]"
    ),
    halflife: float | None = typer.Option(
        None, "--halflife", metavar="N", help="Change the half-life to N seconds"
    ),
    truncate: int | None = typer.Option(
        None, "--truncate", "-T", min=0, metavar="N", help="Keep only the top N items"
    ),
    purge: bool = typer.Option(
        False, "--purge", "-P", help="Remove items that no longer exist on disk"
    ),
    store: Path | None = typer.Option(None, "--store", help="Use a non-default store file"),
    store_name: str | None = typer.Option(
        None, "--store_name", help="Use a non-default filename in the default store directory"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_versionCallback,
        is_eager=True,
        help="Print the version and exit",
    ),
) -> None:
    """Track and rank items by frecency."""
    updates = [
        flag
        for flag, given in (
            ("--add", add),
            ("--increase", increase is not None),
            ("--decrease", decrease is not None),
            ("--delete", delete),
        )
        if given
    ]
    listings = [flag for flag, given in (("--sorted", sorted_), ("--stat", stat)) if given]
    _checkArgs(item, updates, listings, limit, stat_digits, stat, store, store_name, halflife)
    _configureLogging(verbose)

    try:
        cfg = loadConfig()
    except ValueError as e:
        # JSONDecodeError and ValidationError are both ValueErrors
        _fail(f"invalid config: {e}")
    method = sort_method or cfg.sort_method
    path = storePath(cfg, store, store_name)
    now = time.time()

    try:
        usage = readStore(path, half_life=cfg.half_life, now=now)
    except StoreError as e:
        _fail(str(e))

    usage.rebaseIfStale(cfg.rebase_half_lives, now)

    if halflife is not None:
        logger.debug("Changing half-life from %s to %s", usage.half_life, halflife)
        usage.setHalfLife(halflife, now)

    if item is not None and updates:
        key = normalizeItem(item)
        if add:
            usage.add(key, now)
        elif increase is not None:
            usage.adjust(key, increase, now)
        elif decrease is not None:
            usage.adjust(key, -decrease, now)
        elif delete:
            usage.delete(key)

    if purge:
        for removed in usage.purge(os.path.exists):
            logger.info("Purged %s", removed)

    if truncate is not None:
        usage.truncate(truncate, method, now)

    listing = ""
    if listings:
        ranked = usage.ranked(method, now)
        if limit is not None:
            ranked = ranked[:limit]
        buf = io.StringIO()
        digits = stat_digits if stat_digits is not None else cfg.stat_digits
        writeStats(buf, ranked, method, stat, now, digits)
        listing = buf.getvalue()

    try:
        writeStore(usage, path)
    except StoreError as e:
        _fail(str(e))

    sys.stdout.write(listing)


def main() -> None:
    _cli()


if __name__ == "__main__":
    main()
