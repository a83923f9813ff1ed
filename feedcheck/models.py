"""Data models for the feedcheck ordering check.

Engine and Reason enums, Row, Item, Collection, Verdict, RunResult,
ScoreCard — the typed structures that flow through
collector → validator → pipeline → runner → report.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class Engine(str, Enum):
    """How a feed is fetched."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"
    HTTP = "http"


BROWSER_ENGINES = [Engine.CHROMIUM, Engine.FIREFOX, Engine.WEBKIT]


class Reason(str, Enum):
    """Why a Verdict came out the way it did."""

    ORDERED = "ordered"
    ORDERING_VIOLATION = "ordering-violation"
    UNRECOGNIZED_AGE = "unrecognized-age"
    INSUFFICIENT_SAMPLE = "insufficient-sample"
    SOURCE_ERROR = "source-error"


class StopReason(str, Enum):
    """Why the collector stopped asking for more rows."""

    TARGET_REACHED = "target-reached"
    EXHAUSTED = "exhausted"
    PAGE_LIMIT = "page-limit"


@dataclass(frozen=True)
class Row:
    """One listing row as a page source reports it."""

    title: str
    raw_age: str


@dataclass(frozen=True)
class Item:
    """A collected row with its age normalized to minutes."""

    title: str
    age_text: str
    rank: int
    recognized: bool = True

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "age_text": self.age_text,
            "rank": self.rank,
            "recognized": self.recognized,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Item:
        return cls(
            title=d.get("title", ""),
            age_text=d.get("age_text", ""),
            rank=d.get("rank", 0),
            recognized=d.get("recognized", True),
        )


@dataclass(frozen=True)
class Collection:
    """The sample gathered by one collect() call."""

    items: tuple[Item, ...]
    target: int
    pages_advanced: int = 0
    stop_reason: StopReason = StopReason.TARGET_REACHED

    @property
    def reached(self) -> bool:
        return len(self.items) >= self.target


@dataclass(frozen=True)
class Verdict:
    """Outcome of one ordering check."""

    ok: bool
    sample_size: int
    reason: Reason = Reason.ORDERED
    violation_index: Optional[int] = None
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "sample_size": self.sample_size,
            "reason": self.reason.value,
            "violation_index": self.violation_index,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Verdict:
        """Raises ValueError for a reason this version does not know."""
        return cls(
            ok=d.get("ok", False),
            sample_size=d.get("sample_size", 0),
            reason=Reason(d.get("reason", Reason.ORDERED.value)),
            violation_index=d.get("violation_index"),
            detail=d.get("detail", ""),
        )


@dataclass
class RunResult:
    """Complete result of a single feedcheck session."""

    feed: str
    engine: str
    timestamp: str
    target: int = 0
    wall_clock_s: float = 0.0
    url: str = ""

    verdict: Optional[Verdict] = None
    items: list[Item] = field(default_factory=list)
    pages_advanced: int = 0

    # Artifacts written next to metrics.json
    screenshots: list[str] = field(default_factory=list)
    html_report_path: str = ""

    # Free-text annotation added later with `feedcheck note`
    note: str = ""

    @property
    def status(self) -> str:
        if self.verdict is None:
            return "no-verdict"
        return "pass" if self.verdict.ok else "fail"

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        d = {
            "feed": self.feed,
            "engine": self.engine,
            "timestamp": self.timestamp,
            "target": self.target,
            "wall_clock_s": self.wall_clock_s,
            "url": self.url,
            "items": [item.to_dict() for item in self.items],
            "pages_advanced": self.pages_advanced,
            "screenshots": self.screenshots,
            "html_report_path": self.html_report_path,
            "note": self.note,
        }
        if self.verdict:
            d["verdict"] = self.verdict.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> RunResult:
        """Deserialize from a JSON dict (metrics.json)."""
        v_data = d.get("verdict")
        return cls(
            feed=d.get("feed", ""),
            engine=d.get("engine", ""),
            timestamp=d.get("timestamp", ""),
            target=d.get("target", 0),
            wall_clock_s=d.get("wall_clock_s", 0.0),
            url=d.get("url", ""),
            verdict=Verdict.from_dict(v_data) if v_data else None,
            items=[Item.from_dict(i) for i in d.get("items", [])],
            pages_advanced=d.get("pages_advanced", 0),
            screenshots=d.get("screenshots", []),
            html_report_path=d.get("html_report_path", ""),
            note=d.get("note", ""),
        )

    def save(self, result_dir: Path) -> None:
        """Write metrics.json to the result directory."""
        result_dir.mkdir(parents=True, exist_ok=True)
        (result_dir / "metrics.json").write_text(
            json.dumps(self.to_dict(), indent=2), encoding="utf-8"
        )

    @classmethod
    def load(cls, result_dir: Path) -> Optional[RunResult]:
        """Load metrics.json from a result directory."""
        p = result_dir / "metrics.json"
        if not p.exists():
            return None
        try:
            return cls.from_dict(json.loads(p.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, OSError, ValueError):
            return None


@dataclass
class ScoreCard:
    """Latest RunResult per engine for a single feed."""

    feed: str
    results: dict[str, RunResult] = field(default_factory=dict)
