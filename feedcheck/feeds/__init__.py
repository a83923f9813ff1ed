"""Feed discovery and loading for feedcheck.

Each feed is a subdirectory of feedcheck/feeds/ whose __init__.py defines:
    NAME, DESCRIPTION, URL       — identity and listing start page
    ROW_SELECTOR                 — one element per listed item
    TITLE_SELECTOR               — title link inside a row
    AGE_SELECTOR                 — age label inside the row's next sibling
    MORE_SELECTOR                — link that loads the next page
    TARGET                       — default sample size
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class FeedInfo:
    """Metadata about a discovered feed."""

    name: str
    description: str
    url: str
    row_selector: str
    title_selector: str
    age_selector: str
    more_selector: str
    target: int
    path: Path


def _feeds_root() -> Path:
    """Absolute path to the feeds/ directory."""
    return Path(__file__).parent


def list_feeds() -> list[FeedInfo]:
    """Discover all available feeds.

    Scans subdirectories of feedcheck/feeds/ for packages whose __init__.py
    defines a URL.
    """
    feeds = []
    for child in sorted(_feeds_root().iterdir()):
        if not child.is_dir() or not (child / "__init__.py").exists():
            continue
        info = load_feed(child.name)
        if info:
            feeds.append(info)
    return feeds


def load_feed(name: str) -> Optional[FeedInfo]:
    """Load a single feed by name.

    Args:
        name: Directory name under feedcheck/feeds/ (e.g., 'hacker_news').

    Returns:
        FeedInfo if the feed exists and defines a URL, None otherwise.
    """
    feed_dir = _feeds_root() / name
    if not name.isidentifier() or not (feed_dir / "__init__.py").exists():
        return None

    try:
        mod = importlib.import_module(f"feedcheck.feeds.{name}")
    except ImportError:
        return None

    url = getattr(mod, "URL", "")
    if not url:
        return None

    return FeedInfo(
        name=getattr(mod, "NAME", name),
        description=getattr(mod, "DESCRIPTION", ""),
        url=url,
        row_selector=getattr(mod, "ROW_SELECTOR", "tr.athing"),
        title_selector=getattr(mod, "TITLE_SELECTOR", ".titleline a"),
        age_selector=getattr(mod, "AGE_SELECTOR", ".age"),
        more_selector=getattr(mod, "MORE_SELECTOR", "a.morelink"),
        target=getattr(mod, "TARGET", 100),
        path=feed_dir,
    )
