"""CLI for the feedcheck ordering check.

Usage:
    python -m feedcheck list                              # Show available feeds
    python -m feedcheck run hacker_news                   # Default engine
    python -m feedcheck run hacker_news --engine webkit   # Single engine
    python -m feedcheck run hacker_news --all             # All browser engines
    python -m feedcheck show hacker_news                  # Latest verdict per engine
    python -m feedcheck results                           # List all stored runs
    python -m feedcheck report                            # Generate RESULTS.md history
    python -m feedcheck note <timestamp> <text> [--feed F] [--engine E]  # Annotate a run
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from feedcheck.environment import default_engine
from feedcheck.feeds import list_feeds, load_feed
from feedcheck.models import Engine
from feedcheck.report import (
    find_runs,
    generate_report,
    list_all_results,
    load_scorecard,
    render_items,
    render_scorecard,
    render_verdict,
    save_note,
)
from feedcheck.runner import run_all_engines, run_feed

app = typer.Typer(
    name="feedcheck",
    help="Check that a live paginated feed is sorted newest to oldest",
    no_args_is_help=True,
)
console = Console(stderr=True)

_ENGINE_CHOICES = ", ".join(e.value for e in Engine)


@app.command("list")
def cmd_list() -> None:
    """Show available feeds."""
    feeds = list_feeds()
    if not feeds:
        console.print("[yellow]No feeds found.[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Available Feeds", show_header=True, header_style="bold")
    table.add_column("Name", style="green", min_width=12)
    table.add_column("Description", min_width=30)
    table.add_column("URL")
    table.add_column("Target", justify="right")

    for f in feeds:
        table.add_row(f.name, f.description, f.url, str(f.target))

    console.print()
    console.print(table)
    console.print()


@app.command("run")
def cmd_run(
    feed: str = typer.Argument(help="Feed name (e.g., 'hacker_news')"),
    engine: Optional[str] = typer.Option(None, "--engine", "-e", help=f"Engine: {_ENGINE_CHOICES}"),
    all_engines: bool = typer.Option(False, "--all", "-a", help="Run every browser engine"),
    target: Optional[int] = typer.Option(None, "--target", "-n", min=0, help="Items to collect (default: feed's TARGET)"),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", min=0, help="Maximum 'More' clicks before giving up"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unrecognized age labels instead of sorting them last"),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
    slow_mo: Optional[int] = typer.Option(None, "--slow-mo", min=0, help="Delay between browser actions in ms"),
    screenshots: bool = typer.Option(True, "--screenshots/--no-screenshots", help="Capture a PNG per loaded page"),
    html: bool = typer.Option(True, "--html/--no-html", help="Write report.html for the run"),
    show_items: bool = typer.Option(False, "--show-items", help="Print every collected item"),
) -> None:
    """Collect a feed's first items and check they run newest to oldest."""
    if not load_feed(feed):
        console.print(f"[red]Unknown feed: {feed}[/red]. See `feedcheck list`.")
        raise typer.Exit(1)
    if all_engines and engine:
        console.print("[red]--engine and --all cannot be combined[/red]")
        raise typer.Exit(1)

    options = dict(
        target=target,
        max_advances=max_pages,
        strict=strict,
        headless=False if headed else None,
        slow_mo=slow_mo,
        screenshots=screenshots,
        html=html,
    )

    if all_engines:
        results = run_all_engines(feed, console, **options)
        console.print("\n[bold]--- Latest by Engine ---[/bold]")
        render_scorecard(load_scorecard(feed), console)
    else:
        try:
            e = Engine(engine) if engine else default_engine()
        except ValueError:
            console.print(f"[red]Invalid engine: {engine}[/red]. Choose: {_ENGINE_CHOICES}")
            raise typer.Exit(1)
        results = [run_feed(feed, e, console, **options)]

    for result in results:
        if show_items:
            v = result.verdict
            render_items(result.items, console, violation_index=v.violation_index if v else None)
        render_verdict(result, console)

    if not all(r.verdict and r.verdict.ok for r in results):
        raise typer.Exit(1)


@app.command("show")
def cmd_show(
    feed: str = typer.Argument(help="Feed name (e.g., 'hacker_news')"),
) -> None:
    """Show the latest verdict for each engine of a feed."""
    render_scorecard(load_scorecard(feed), console)


@app.command("results")
def cmd_results() -> None:
    """List all stored runs."""
    list_all_results(console)


@app.command("report")
def cmd_report() -> None:
    """Generate RESULTS.md with the full run history and notes."""
    path = generate_report()
    console.print(f"Report written to {path}")


@app.command("note")
def cmd_note(
    timestamp: str = typer.Argument(help="Run timestamp (e.g., '20261018T024533Z')"),
    text: str = typer.Argument(help="Note text to attach to the run"),
    feed: Optional[str] = typer.Option(None, "--feed", "-f", help="Feed the run belongs to"),
    engine: Optional[str] = typer.Option(None, "--engine", "-e", help="Engine the run used"),
) -> None:
    """Annotate a stored run with a note (appears in report)."""
    matches = find_runs(timestamp, feed=feed, engine=engine)
    if not matches:
        console.print(f"[red]No stored run matches {timestamp}[/red]. See `feedcheck results`.")
        raise typer.Exit(1)
    if len(matches) > 1:
        console.print(f"[red]{len(matches)} runs match {timestamp}[/red]; narrow it with --feed/--engine:")
        for run_dir in matches:
            console.print(f"  {run_dir.parent.parent.name}/{run_dir.parent.name}")
        raise typer.Exit(1)

    result = save_note(matches[0], text)
    console.print(f"Note saved for {result.feed}/{result.engine}/{timestamp}")


if __name__ == "__main__":
    app()
