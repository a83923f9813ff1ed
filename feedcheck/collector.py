"""Bounded collection of rows from a paginated feed.

The collector reads the rows a page source currently shows, keeps them in
presentation order, and asks for the next page until it has ``target`` items
or the source runs dry. It never holds more than ``target`` items and never
asks for another page once the target is met.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from feedcheck.age import parse_age
from feedcheck.models import Collection, Item, Row, StopReason


class PageSource(Protocol):
    """A stateful cursor over a paginated listing.

    Every call is a fresh read; the same rows are not expected back after
    advance_page(). Implementations raise PageSourceError when they cannot
    fetch or advance.
    """

    def get_current_rows(self) -> Sequence[Row]:
        """Rows currently shown, in presentation order."""
        ...

    def advance_page(self) -> bool:
        """Load the next page. False when there is none."""
        ...


def to_item(row: Row) -> Item:
    """Normalize a row's age label into an Item."""
    parsed = parse_age(row.raw_age)
    return Item(
        title=row.title,
        age_text=row.raw_age,
        rank=parsed.rank,
        recognized=parsed.recognized,
    )


def collect(
    source: PageSource,
    target: int,
    max_advances: Optional[int] = None,
) -> Collection:
    """Gather up to ``target`` items from ``source``.

    Args:
        source: Page source to read. Calls are strictly sequential.
        target: Number of items wanted. 0 returns without touching the source.
        max_advances: Upper bound on advance_page() calls. None means no bound.

    Returns:
        Collection with the items in source order and the reason collection
        stopped.

    Raises:
        ValueError: If target or max_advances is negative.
        PageSourceError: Propagated from the source.
    """
    if target < 0:
        raise ValueError(f"target must be >= 0, got {target}")
    if max_advances is not None and max_advances < 0:
        raise ValueError(f"max_advances must be >= 0, got {max_advances}")

    items: list[Item] = []
    advances = 0

    while len(items) < target:
        for row in source.get_current_rows():
            if len(items) >= target:
                break
            items.append(to_item(row))

        if len(items) >= target:
            break

        if max_advances is not None and advances >= max_advances:
            return Collection(
                items=tuple(items),
                target=target,
                pages_advanced=advances,
                stop_reason=StopReason.PAGE_LIMIT,
            )
        if not source.advance_page():
            return Collection(
                items=tuple(items),
                target=target,
                pages_advanced=advances,
                stop_reason=StopReason.EXHAUSTED,
            )
        advances += 1

    return Collection(items=tuple(items), target=target, pages_advanced=advances)
