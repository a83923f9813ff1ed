"""Collect-then-validate entry point.

``run`` is the only call a page-source owner needs: it returns a Verdict for
every outcome (ordered, out of order, too few rows, source failure) and never
raises for any of them. It does not print, log, or exit.
"""

from __future__ import annotations

from typing import Optional

from feedcheck.collector import PageSource, collect
from feedcheck.errors import PageSourceError
from feedcheck.models import Collection, Reason, StopReason, Verdict
from feedcheck.validator import validate


def run_collection(
    source: PageSource,
    target: int,
    max_advances: Optional[int] = None,
    strict: bool = False,
) -> tuple[Collection, Verdict]:
    """Run the check and also return what was collected.

    On a source error the returned Collection is empty.
    """
    try:
        collection = collect(source, target, max_advances=max_advances)
    except PageSourceError as e:
        verdict = Verdict(
            ok=False,
            sample_size=0,
            reason=Reason.SOURCE_ERROR,
            detail=str(e),
        )
        return Collection(items=(), target=target), verdict

    if not collection.reached:
        if collection.stop_reason == StopReason.PAGE_LIMIT:
            why = f"page limit of {max_advances} reached"
        else:
            why = "no more pages"
        verdict = Verdict(
            ok=False,
            sample_size=len(collection.items),
            reason=Reason.INSUFFICIENT_SAMPLE,
            detail=f"expected {target} items, found {len(collection.items)} ({why})",
        )
        return collection, verdict

    return collection, validate(collection.items, strict=strict)


def run(
    source: PageSource,
    target: int,
    max_advances: Optional[int] = None,
    strict: bool = False,
) -> Verdict:
    """Collect ``target`` items from ``source`` and check their ordering."""
    _, verdict = run_collection(source, target, max_advances=max_advances, strict=strict)
    return verdict
