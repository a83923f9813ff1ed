"""Newest-to-oldest ordering check over a collected sample."""

from __future__ import annotations

from typing import Sequence

from feedcheck.models import Item, Reason, Verdict


def validate(sample: Sequence[Item], strict: bool = False) -> Verdict:
    """Check that ranks never decrease from one item to the next.

    Equal neighbouring ranks are fine. Stops at the first index where an item
    is newer than the one before it.

    With ``strict`` set, an item whose age text was not recognized fails the
    check at its own index instead of sorting as the oldest possible entry.
    """
    for i, item in enumerate(sample):
        if strict and not item.recognized:
            return Verdict(
                ok=False,
                sample_size=len(sample),
                reason=Reason.UNRECOGNIZED_AGE,
                violation_index=i,
                detail=f"item {i} has unrecognized age text {item.age_text!r}",
            )
        if i == 0:
            continue
        prev = sample[i - 1]
        if item.rank < prev.rank:
            return Verdict(
                ok=False,
                sample_size=len(sample),
                reason=Reason.ORDERING_VIOLATION,
                violation_index=i,
                detail=(
                    f"item {i} ({item.age_text!r}) is newer than "
                    f"item {i - 1} ({prev.age_text!r})"
                ),
            )
    return Verdict(ok=True, sample_size=len(sample))
