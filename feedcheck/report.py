"""feedcheck reporting — Rich tables, run history, notes, markdown and HTML.

Finds the latest result for each engine and shows them side by side, lists
every stored run, generates a persistent RESULTS.md history, and writes a
standalone report.html for a single run.
"""

from __future__ import annotations

import html
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from feedcheck.age import MAX_RANK
from feedcheck.environment import results_root
from feedcheck.models import Item, RunResult, ScoreCard

# Browsers first, then any extras alphabetically.
_ENGINE_DISPLAY_ORDER = ["chromium", "firefox", "webkit", "http"]


def _find_latest_result(feed: str, engine: str) -> RunResult | None:
    """Find the most recent result for a feed/engine combination.

    Results are stored as results/<feed>/<engine>/<timestamp>/metrics.json.
    The latest timestamp (lexicographic sort) wins.
    """
    engine_dir = results_root() / feed / engine
    if not engine_dir.is_dir():
        return None

    # Timestamps are ISO8601 and sort lexicographically
    for run_dir in sorted(engine_dir.iterdir(), reverse=True):
        result = RunResult.load(run_dir)
        if result:
            return result
    return None


def _discover_engines(feed: str) -> list[str]:
    """Engines that have results for a feed, in display order."""
    feed_dir = results_root() / feed
    if not feed_dir.is_dir():
        return []
    found = [d.name for d in feed_dir.iterdir() if d.is_dir()]
    canonical = [e for e in _ENGINE_DISPLAY_ORDER if e in found]
    extras = sorted(e for e in found if e not in _ENGINE_DISPLAY_ORDER)
    return canonical + extras


def load_scorecard(feed: str) -> ScoreCard:
    """Load the latest result for every engine of a feed."""
    card = ScoreCard(feed=feed)
    for engine in _discover_engines(feed):
        result = _find_latest_result(feed, engine)
        if result:
            card.results[engine] = result
    return card


def _fmt_rank(rank: int) -> str:
    """Minutes as text; the unrecognized sentinel shows as '?'."""
    if rank == MAX_RANK:
        return "?"
    return str(rank)


def _fmt_violation(r: RunResult) -> str:
    if not r.verdict or r.verdict.violation_index is None:
        return "--"
    return str(r.verdict.violation_index)


def _status_markup(r: RunResult) -> str:
    color = {"pass": "green", "fail": "red"}.get(r.status, "white")
    return f"[{color}]{r.status}[/{color}]"


def render_items(
    items: list[Item],
    console: Console,
    violation_index: Optional[int] = None,
) -> None:
    """Print the collected items, highlighting the first violation."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", min_width=30)
    table.add_column("Age")
    table.add_column("Minutes", justify="right")

    for i, item in enumerate(items):
        style = "bold red" if i == violation_index else None
        table.add_row(str(i + 1), escape(item.title), escape(item.age_text), _fmt_rank(item.rank), style=style)

    console.print(table)


def render_verdict(result: RunResult, console: Console) -> None:
    """Render a one-run summary table."""
    table = Table(title=f"feedcheck: {result.feed}", show_header=False)
    table.add_column("Metric", style="dim", min_width=16)
    table.add_column("Value", min_width=24)

    v = result.verdict
    table.add_row("Status", _status_markup(result))
    table.add_row("Reason", v.reason.value if v else "--")
    table.add_row("Engine", result.engine)
    table.add_row("Items", f"{v.sample_size if v else 0}/{result.target}")
    table.add_row("First violation", _fmt_violation(result))
    table.add_row("Pages advanced", str(result.pages_advanced))
    table.add_row("Wall clock", f"{result.wall_clock_s}s")
    if v and v.detail:
        table.add_row("Detail", escape(v.detail))
    if result.html_report_path:
        table.add_row("HTML report", result.html_report_path)
    if result.note:
        table.add_row("Note", escape(result.note))

    console.print()
    console.print(table)
    console.print()


def render_scorecard(card: ScoreCard, console: Console) -> None:
    """Render a Rich comparison table of the latest run per engine."""
    if not card.results:
        console.print(f"[yellow]No results found for feed: {card.feed}[/yellow]")
        return

    table = Table(title=f"feedcheck: {card.feed}", show_header=True, header_style="bold")
    table.add_column("Metric", style="dim", min_width=16)

    active = list(card.results.keys())
    for engine in active:
        table.add_column(engine, justify="right", min_width=12)

    def _row(label: str, getter) -> None:
        table.add_row(label, *(getter(card.results[e]) for e in active))

    _row("Status", _status_markup)
    _row("Reason", lambda r: r.verdict.reason.value if r.verdict else "--")
    _row("Items", lambda r: f"{r.verdict.sample_size if r.verdict else 0}/{r.target}")
    _row("First violation", _fmt_violation)
    _row("Pages advanced", lambda r: str(r.pages_advanced))
    _row("Wall clock", lambda r: f"{r.wall_clock_s}s" if r.wall_clock_s else "--")
    _row("Run time", lambda r: r.timestamp or "--")

    console.print()
    console.print(table)
    console.print()


def list_all_results(console: Console) -> None:
    """List all stored runs across all feeds and engines."""
    root = results_root()
    if not root.is_dir():
        console.print("[yellow]No results yet. Run a feed first.[/yellow]")
        return

    for feed_dir in sorted(root.iterdir()):
        if not feed_dir.is_dir():
            continue
        console.print(f"\n[bold]{feed_dir.name}[/bold]")
        for engine_dir in sorted(feed_dir.iterdir()):
            if not engine_dir.is_dir():
                continue
            for run_dir in sorted(engine_dir.iterdir(), reverse=True):
                result = RunResult.load(run_dir)
                if result:
                    reason = result.verdict.reason.value if result.verdict else "?"
                    console.print(
                        f"  {engine_dir.name:10s} {run_dir.name}  "
                        f"{result.status:6s} {reason:20s} {result.wall_clock_s:>6.1f}s"
                    )


# ---------------------------------------------------------------------------
# Notes system
# ---------------------------------------------------------------------------

def find_runs(timestamp: str, feed: Optional[str] = None, engine: Optional[str] = None) -> list[Path]:
    """Find stored run directories for a timestamp.

    Runs live at results/<feed>/<engine>/<timestamp>/. A timestamp alone can
    match one run per feed/engine pair, so ``feed`` and ``engine`` narrow it.
    Directories without a readable metrics.json are skipped.
    """
    root = results_root()
    if not root.is_dir():
        return []
    matches: list[Path] = []
    for feed_dir in sorted(root.iterdir()):
        if not feed_dir.is_dir() or (feed and feed_dir.name != feed):
            continue
        for engine_dir in sorted(feed_dir.iterdir()):
            if not engine_dir.is_dir() or (engine and engine_dir.name != engine):
                continue
            run_dir = engine_dir / timestamp
            if RunResult.load(run_dir):
                matches.append(run_dir)
    return matches


def save_note(run_dir: Path, text: str) -> RunResult:
    """Store a note in a run's metrics.json, replacing any earlier note."""
    result = RunResult.load(run_dir)
    if result is None:
        raise FileNotFoundError(f"no readable run in {run_dir}")
    result.note = text
    result.save(run_dir)
    return result


# ---------------------------------------------------------------------------
# History loading
# ---------------------------------------------------------------------------

def _load_all_runs(feed: str) -> list[RunResult]:
    """Load every run for a feed across all engines, sorted by timestamp."""
    root = results_root() / feed
    if not root.is_dir():
        return []
    runs: list[RunResult] = []
    for engine_dir in root.iterdir():
        if not engine_dir.is_dir():
            continue
        for run_dir in sorted(engine_dir.iterdir()):
            result = RunResult.load(run_dir)
            if result:
                runs.append(result)
    runs.sort(key=lambda r: r.timestamp)
    return runs


# ---------------------------------------------------------------------------
# Markdown report generation
# ---------------------------------------------------------------------------

def _report_path() -> Path:
    """Path to the generated RESULTS.md."""
    return results_root().parent / "RESULTS.md"


def generate_report() -> Path:
    """Generate RESULTS.md with the full run history per feed.

    Returns the path to the generated file.
    """
    root = results_root()
    feeds = sorted(d.name for d in root.iterdir() if d.is_dir()) if root.is_dir() else []

    lines: list[str] = []
    lines.append("# feedcheck Results")
    lines.append("")
    lines.append(f"*Generated {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}*")
    lines.append("")

    if not feeds:
        lines.append("No results yet.")
        out = _report_path()
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return out

    for feed in feeds:
        lines.append(f"## {feed}")
        lines.append("")

        runs = _load_all_runs(feed)
        if not runs:
            lines.append("No runs recorded.")
            lines.append("")
            continue

        lines.append("| # | Timestamp | Engine | Status | Reason | Items | Violation | Pages | Wall Clock | Notes |")
        lines.append("|---|-----------|--------|--------|--------|-------|-----------|-------|------------|-------|")

        for i, r in enumerate(runs, 1):
            v = r.verdict
            reason = v.reason.value if v else "--"
            items = f"{v.sample_size if v else 0}/{r.target}"
            note = r.note.replace("|", "\\|")
            lines.append(
                f"| {i} | `{r.timestamp}` | {r.engine} | **{r.status}** | {reason} | {items} "
                f"| {_fmt_violation(r)} | {r.pages_advanced} | {r.wall_clock_s}s | {note} |"
            )

        lines.append("")

    out = _report_path()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return out


# ---------------------------------------------------------------------------
# HTML report for a single run
# ---------------------------------------------------------------------------

_HTML_STYLE = """\
body { font-family: Arial, sans-serif; background: #0f172a; color: #e5e7eb; padding: 40px; }
h1 { color: #38bdf8; }
.status { font-size: 20px; margin-bottom: 20px; padding: 12px; border-radius: 8px; }
.pass { background: #14532d; }
.fail { background: #7f1d1d; }
ol { padding-left: 2em; }
li { background: #1e293b; margin-bottom: 8px; padding: 10px; border-radius: 8px; }
li.violation { border-left: 4px solid #f87171; }
li em { color: #94a3b8; }
.shots img { width: 240px; margin-right: 12px; border-radius: 8px; }"""


def write_html_report(result: RunResult, result_dir: Path) -> Path:
    """Write report.html for one run and return its path."""
    v = result.verdict
    css_class = "pass" if result.status == "pass" else "fail"
    if v and v.ok:
        status = f"PASS: the first {v.sample_size} items are sorted newest to oldest"
    elif v:
        status = f"FAIL ({v.reason.value}): {v.detail}"
    else:
        status = "No verdict"
    violation = v.violation_index if v else None

    lines: list[str] = []
    lines.append("<!DOCTYPE html>")
    lines.append('<html lang="en">')
    lines.append("<head>")
    lines.append('  <meta charset="UTF-8"/>')
    lines.append(f"  <title>feedcheck: {html.escape(result.feed)}</title>")
    lines.append(f"  <style>\n{_HTML_STYLE}\n  </style>")
    lines.append("</head>")
    lines.append("<body>")
    lines.append(f"  <h1>feedcheck: {html.escape(result.feed)}</h1>")
    lines.append(f'  <div class="status {css_class}">{html.escape(status)}</div>')
    lines.append(
        f"  <p><strong>Run:</strong> {html.escape(result.timestamp)} "
        f"&middot; <strong>Engine:</strong> {html.escape(result.engine)} "
        f"&middot; <strong>Wall clock:</strong> {result.wall_clock_s}s "
        f"&middot; <strong>Pages advanced:</strong> {result.pages_advanced}</p>"
    )
    if result.url:
        lines.append(f'  <p><a href="{html.escape(result.url)}">{html.escape(result.url)}</a></p>')

    if result.screenshots:
        lines.append('  <h2>Screenshots</h2>')
        lines.append('  <div class="shots">')
        for shot in result.screenshots:
            rel = Path(shot)
            if rel.is_relative_to(result_dir):
                rel = rel.relative_to(result_dir)
            lines.append(f'    <img src="{html.escape(rel.as_posix())}" alt="{html.escape(rel.stem)}"/>')
        lines.append("  </div>")

    lines.append(f"  <h2>Collected items ({len(result.items)})</h2>")
    lines.append("  <ol>")
    for i, item in enumerate(result.items):
        cls = ' class="violation"' if i == violation else ""
        lines.append(
            f"    <li{cls}>{html.escape(item.title)}<br/><em>{html.escape(item.age_text)}</em></li>"
        )
    lines.append("  </ol>")
    lines.append("</body>")
    lines.append("</html>")

    result_dir.mkdir(parents=True, exist_ok=True)
    out = result_dir / "report.html"
    out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return out
