"""Tests for the HTTP and Playwright page sources.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so HttpPageSource makes
  no real network calls.
- Playwright is not launched; PlaywrightPageSource is driven with
  ``MagicMock`` stand-ins for the page and its element handles.
"""

from __future__ import annotations

import html
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
import respx
from playwright.sync_api import Error as PlaywrightError

from feedcheck.errors import PageSourceError
from feedcheck.feeds import FeedInfo
from feedcheck.models import Reason, Row
from feedcheck.pipeline import run
from feedcheck.sources import HttpPageSource, PlaywrightPageSource

_FEED = FeedInfo(
    name="hacker_news",
    description="",
    url="https://news.ycombinator.com/newest",
    row_selector="tr.athing",
    title_selector=".titleline a",
    age_selector=".age",
    more_selector="a.morelink",
    target=100,
    path=Path("."),
)


def _hn_page(stories, more_href=None) -> str:
    """Minimal Hacker News listing markup: story row + subtext row per story."""
    rows = []
    for i, (title, age) in enumerate(stories):
        rows.append(
            f'<tr class="athing submission" id="{i}"><td class="title">'
            f'<span class="titleline"><a href="https://example.com/{i}">{title}</a>'
            f' <span class="sitebit">(example.com)</span></span></td></tr>'
        )
        rows.append(
            f'<tr><td class="subtext"><span class="subline">'
            f'<span class="age" title="2026-10-18T00:00:00"><a href="item?id={i}">{age}</a></span>'
            f"</span></td></tr>"
        )
        rows.append('<tr class="spacer"></tr>')
    more = f'<tr><td class="title"><a href="{html.escape(more_href)}" class="morelink" rel="next">More</a></td></tr>' if more_href else ""
    return f"<html><body><table>{''.join(rows)}{more}</table></body></html>"


# ---------------------------------------------------------------------------
# HttpPageSource
# ---------------------------------------------------------------------------

@respx.mock
def test_http_source_reads_rows():
    respx.get(_FEED.url).mock(
        return_value=httpx.Response(200, text=_hn_page([("First", "1 minute ago"), ("Second", "2 hours ago")]))
    )
    with httpx.Client() as client:
        rows = HttpPageSource(client, _FEED).get_current_rows()
    assert rows == [Row("First", "1 minute ago"), Row("Second", "2 hours ago")]


@respx.mock
def test_http_source_follows_more_link():
    # Before the bare URL route, which would also match
    second = respx.get("https://news.ycombinator.com/newest?next=123&n=31").mock(
        return_value=httpx.Response(200, text=_hn_page([("Second", "3 minutes ago")]))
    )
    respx.get(_FEED.url).mock(
        return_value=httpx.Response(200, text=_hn_page([("First", "1 minute ago")], "newest?next=123&n=31"))
    )
    with httpx.Client() as client:
        source = HttpPageSource(client, _FEED)
        assert source.advance_page() is True
        rows = source.get_current_rows()
        assert source.advance_page() is False
    assert second.called
    assert rows == [Row("Second", "3 minutes ago")]
    assert source.pages_loaded == 2


@respx.mock
def test_http_source_wraps_status_errors():
    respx.get(_FEED.url).mock(return_value=httpx.Response(503))
    with httpx.Client() as client:
        source = HttpPageSource(client, _FEED)
        with pytest.raises(PageSourceError):
            source.get_current_rows()


@respx.mock
def test_http_source_wraps_transport_errors():
    respx.get(_FEED.url).mock(side_effect=httpx.ConnectError("refused"))
    with httpx.Client() as client:
        with pytest.raises(PageSourceError):
            HttpPageSource(client, _FEED).advance_page()


@respx.mock
def test_http_source_missing_age_gives_empty_label():
    page = (
        '<html><body><table><tr class="athing"><td><span class="titleline">'
        '<a href="x">Lonely</a></span></td></tr></table></body></html>'
    )
    respx.get(_FEED.url).mock(return_value=httpx.Response(200, text=page))
    with httpx.Client() as client:
        rows = HttpPageSource(client, _FEED).get_current_rows()
    assert rows == [Row("Lonely", "")]


# ---------------------------------------------------------------------------
# PlaywrightPageSource
# ---------------------------------------------------------------------------

def _row_handle(title, age):
    handle = MagicMock()
    title_el = MagicMock()
    title_el.inner_text.return_value = title
    handle.query_selector.return_value = title_el
    handle.evaluate.return_value = age
    return handle


def test_playwright_source_reads_rows():
    page = MagicMock()
    page.query_selector_all.return_value = [
        _row_handle("First", "1 minute ago"),
        _row_handle(" Second ", "5 minutes ago\n"),
    ]
    rows = PlaywrightPageSource(page, _FEED).get_current_rows()
    page.query_selector_all.assert_called_once_with("tr.athing")
    assert rows == [Row("First", "1 minute ago"), Row("Second", "5 minutes ago")]


def test_playwright_source_advance_clicks_more_and_calls_back():
    page = MagicMock()
    seen = []
    source = PlaywrightPageSource(page, _FEED, on_advance=seen.append)
    assert source.advance_page() is True
    page.query_selector.assert_called_once_with("a.morelink")
    page.query_selector.return_value.click.assert_called_once()
    page.wait_for_load_state.assert_called_once_with("domcontentloaded")
    assert seen == [2]


def test_playwright_source_without_more_link_is_exhausted():
    page = MagicMock()
    page.query_selector.return_value = None
    assert PlaywrightPageSource(page, _FEED).advance_page() is False
    page.wait_for_load_state.assert_not_called()


def test_playwright_errors_become_page_source_errors():
    page = MagicMock()
    page.query_selector_all.side_effect = PlaywrightError("Target closed")
    with pytest.raises(PageSourceError):
        PlaywrightPageSource(page, _FEED).get_current_rows()


def test_playwright_advance_callback_error_becomes_page_source_error():
    page = MagicMock()

    def fail_screenshot(n):
        raise PlaywrightError("Target page, context or browser has been closed")

    source = PlaywrightPageSource(page, _FEED, on_advance=fail_screenshot)
    with pytest.raises(PageSourceError, match="page 2"):
        source.advance_page()


def test_playwright_advance_callback_error_yields_source_error_verdict():
    page = MagicMock()
    page.query_selector_all.return_value = [_row_handle("First", "1 minute ago")]

    def fail_screenshot(n):
        raise PlaywrightError("Target page, context or browser has been closed")

    verdict = run(PlaywrightPageSource(page, _FEED, on_advance=fail_screenshot), 5)
    assert verdict.ok is False
    assert verdict.reason == Reason.SOURCE_ERROR
    assert verdict.sample_size == 1
