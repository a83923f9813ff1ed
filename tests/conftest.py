"""Shared fixtures: in-memory page sources and an isolated results dir."""

from __future__ import annotations

import pytest

from feedcheck.errors import PageSourceError
from feedcheck.models import Row


class FakePageSource:
    """Serves pre-built pages of rows and records every call.

    ``pages`` is a list of row lists. advance_page() moves to the next one and
    returns False past the last page, unless ``endless`` is set, in which case
    it keeps generating pages that continue the minute count.
    """

    def __init__(self, pages, endless=False, fail_on=None):
        self.pages = [list(p) for p in pages]
        self.endless = endless
        self.fail_on = fail_on
        self.index = 0
        self.calls: list[str] = []

    def get_current_rows(self):
        self.calls.append("rows")
        if self.fail_on == "rows":
            raise PageSourceError("rows unavailable")
        if self.index >= len(self.pages):
            return []
        return list(self.pages[self.index])

    def advance_page(self):
        self.calls.append("advance")
        if self.fail_on == "advance":
            raise PageSourceError("next page unavailable")
        if self.index + 1 < len(self.pages):
            self.index += 1
            return True
        if self.endless:
            start = sum(len(p) for p in self.pages) + 1
            self.pages.append(minute_rows(range(start, start + 30)))
            self.index += 1
            return True
        return False

    @property
    def advances(self) -> int:
        return self.calls.count("advance")


def minute_rows(minutes) -> list[Row]:
    """Rows titled 'story N' aged 'N minutes ago'."""
    return [Row(title=f"story {m}", raw_age=f"{m} minutes ago") for m in minutes]


def age_rows(ages) -> list[Row]:
    """Rows with the given raw age labels."""
    return [Row(title=f"story {i}", raw_age=a) for i, a in enumerate(ages)]


@pytest.fixture
def results_dir(tmp_path, monkeypatch):
    """Point FEEDCHECK_RESULTS_DIR at a temp dir for the test."""
    root = tmp_path / "results"
    monkeypatch.setenv("FEEDCHECK_RESULTS_DIR", str(root))
    return root
