"""feedcheck runner — orchestrates browser setup → collect → validate → save.

Data flow per session:
1. Create the result_dir for this run
2. Launch the engine (Playwright browser, or an httpx client)
3. Open the feed URL, screenshot the first page
4. Collect and validate through feedcheck.pipeline
5. Screenshot each loaded page and the final state
6. Close the browser, assemble RunResult, save as metrics.json
7. Write the HTML report next to it
"""

from __future__ import annotations

import random
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from rich.console import Console
from rich.markup import escape

from feedcheck.environment import (
    build_launch_options,
    http_delay_s,
    navigation_timeout_ms,
    results_root,
)
from feedcheck.feeds import FeedInfo, load_feed
from feedcheck.models import (
    BROWSER_ENGINES,
    Collection,
    Engine,
    Reason,
    RunResult,
    Verdict,
)
from feedcheck.pipeline import run_collection
from feedcheck.report import write_html_report
from feedcheck.sources import HttpPageSource, PlaywrightPageSource


def _ensure_result_dir(feed: str, engine: str, timestamp: str) -> Path:
    """Create and return results/<feed>/<engine>/<timestamp>/."""
    result_dir = results_root() / feed / engine / timestamp
    result_dir.mkdir(parents=True, exist_ok=True)
    return result_dir


def _source_failure(target: int, detail: str) -> tuple[Collection, Verdict]:
    """Verdict for a session that failed before the collector could start."""
    verdict = Verdict(ok=False, sample_size=0, reason=Reason.SOURCE_ERROR, detail=detail)
    return Collection(items=(), target=target), verdict


def _run_browser(
    feed: FeedInfo,
    engine: Engine,
    result_dir: Path,
    target: int,
    max_advances: Optional[int],
    strict: bool,
    headless: Optional[bool],
    slow_mo: Optional[int],
    screenshots: bool,
) -> tuple[Collection, Verdict, list[str]]:
    """Drive one Playwright session against the feed.

    Returns (collection, verdict, screenshot_paths).
    """
    shots: list[str] = []
    shot_dir = result_dir / "screenshots"

    def shoot(page, name: str) -> None:
        """Save a screenshot; a failed capture is skipped, not fatal."""
        if not screenshots:
            return
        shot_dir.mkdir(parents=True, exist_ok=True)
        path = shot_dir / f"{name}.png"
        try:
            page.screenshot(path=str(path))
        except PlaywrightError:
            return
        shots.append(str(path))

    options = build_launch_options(engine, headless=headless, slow_mo=slow_mo)
    with sync_playwright() as pw:
        try:
            browser = getattr(pw, engine.value).launch(**options)
        except PlaywrightError as e:
            collection, verdict = _source_failure(target, f"could not launch {engine.value}: {e}")
            return collection, verdict, shots

        try:
            context = browser.new_context()
            page = context.new_page()
            page.set_default_timeout(navigation_timeout_ms())
            try:
                page.goto(feed.url, wait_until="domcontentloaded")
                shoot(page, "page_load")
            except PlaywrightError as e:
                collection, verdict = _source_failure(target, f"could not open {feed.url}: {e}")
                return collection, verdict, shots

            source = PlaywrightPageSource(
                page, feed, on_advance=lambda n: shoot(page, f"page_{n:02d}"),
            )
            collection, verdict = run_collection(
                source, target, max_advances=max_advances, strict=strict,
            )
            shoot(page, "final_state")
            return collection, verdict, shots
        finally:
            browser.close()


def _run_http(
    feed: FeedInfo,
    target: int,
    max_advances: Optional[int],
    strict: bool,
) -> tuple[Collection, Verdict]:
    """Run the check with plain HTTP requests (no browser)."""
    with httpx.Client(timeout=navigation_timeout_ms() / 1000) as client:
        source = HttpPageSource(client, feed, delay_s=http_delay_s())
        return run_collection(source, target, max_advances=max_advances, strict=strict)


def run_feed(
    feed_name: str,
    engine: Engine,
    console: Console,
    target: Optional[int] = None,
    max_advances: Optional[int] = None,
    strict: bool = False,
    headless: Optional[bool] = None,
    slow_mo: Optional[int] = None,
    screenshots: bool = True,
    html: bool = True,
) -> RunResult:
    """Execute a single session for one feed and one engine.

    This is the main orchestration function. It owns the browser or HTTP
    client for the whole session and hands the core a page source.

    Args:
        feed_name: Name of the feed (e.g., 'hacker_news').
        engine: chromium, firefox, webkit, or http.
        console: Rich Console for status output.
        target: Sample size. Defaults to the feed's TARGET.
        max_advances: Bound on "More" clicks. None means unbounded.
        strict: Fail on unrecognized age labels instead of sorting them last.
        headless: Browser window off/on. Defaults to FEEDCHECK_HEADLESS.
        slow_mo: Playwright slow-motion delay in ms.
        screenshots: Capture PNGs of each loaded page (browser engines only).
        html: Write report.html next to metrics.json.

    Returns:
        RunResult with the verdict and collected items.
    """
    feed = load_feed(feed_name)
    if not feed:
        console.print(f"[red]Error:[/red] Unknown feed: {feed_name}")
        return RunResult(feed=feed_name, engine=engine.value, timestamp="")

    target = feed.target if target is None else target
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    console.print(f"\n[bold]Checking:[/bold] {feed.name} / {engine.value}")
    console.print(f"  URL: {feed.url}")
    console.print(f"  Target: {target} items")

    result_dir = _ensure_result_dir(feed.name, engine.value, timestamp)
    console.print(f"  Result dir: {result_dir}")

    start = time.monotonic()
    shots: list[str] = []
    if engine == Engine.HTTP:
        collection, verdict = _run_http(feed, target, max_advances, strict)
    else:
        collection, verdict, shots = _run_browser(
            feed, engine, result_dir, target, max_advances, strict,
            headless, slow_mo, screenshots,
        )
    elapsed = time.monotonic() - start

    colour = "green" if verdict.ok else "red"
    console.print(
        f"  Verdict: [{colour}]{verdict.reason.value}[/{colour}] "
        f"({verdict.sample_size}/{target} items, {elapsed:.1f}s)"
    )
    if verdict.detail:
        console.print(f"  [dim]{escape(verdict.detail)}[/dim]")

    result = RunResult(
        feed=feed.name,
        engine=engine.value,
        timestamp=timestamp,
        target=target,
        wall_clock_s=round(elapsed, 1),
        url=feed.url,
        verdict=verdict,
        items=list(collection.items),
        pages_advanced=collection.pages_advanced,
        screenshots=shots,
    )
    if html:
        result.html_report_path = str(write_html_report(result, result_dir))
    result.save(result_dir)

    console.print(f"  [bold]Done.[/bold] Metrics saved to {result_dir / 'metrics.json'}")
    return result


def run_all_engines(
    feed_name: str,
    console: Console,
    **kwargs,
) -> list[RunResult]:
    """Run a feed across every browser engine in randomized order.

    The live feed keeps moving between sessions, so shuffling keeps any one
    engine from always seeing the freshest (or stalest) listing.

    Returns list of RunResults in execution order (randomized).
    """
    engines = list(BROWSER_ENGINES)
    random.shuffle(engines)
    console.print(f"\n[bold]Engine order (randomized):[/bold] {', '.join(e.value for e in engines)}")

    results = []
    for engine in engines:
        results.append(run_feed(feed_name, engine, console, **kwargs))
    return results
