"""Page sources: the browser- and HTTP-backed cursors the collector reads.

Both read the same feed markup: a row element per item, the title inside it,
and the age label inside the row's next sibling (Hacker News puts the
"N minutes ago" text in a separate subtext row). Neither source opens or
closes its browser page or HTTP client; the session runner owns those.
"""

from __future__ import annotations

import time
from typing import Callable, Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from feedcheck.errors import PageSourceError
from feedcheck.feeds import FeedInfo
from feedcheck.models import Row

# Runs in the page: age label text from the row's next sibling, or "".
_AGE_JS = """(row, selector) => {
    const sibling = row.nextElementSibling;
    const age = sibling ? sibling.querySelector(selector) : null;
    return age ? age.innerText : "";
}"""

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; feedcheck/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


class PlaywrightPageSource:
    """Reads a feed through a live Playwright page.

    ``on_advance`` is called with the page number after each successful
    advance (the session runner uses it for screenshots).
    """

    def __init__(
        self,
        page: Page,
        feed: FeedInfo,
        on_advance: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._page = page
        self._feed = feed
        self._on_advance = on_advance
        self.pages_loaded = 1

    def get_current_rows(self) -> list[Row]:
        try:
            rows = []
            for el in self._page.query_selector_all(self._feed.row_selector):
                title_el = el.query_selector(self._feed.title_selector)
                title = title_el.inner_text().strip() if title_el else ""
                raw_age = el.evaluate(_AGE_JS, self._feed.age_selector) or ""
                rows.append(Row(title=title, raw_age=raw_age.strip()))
            return rows
        except PlaywrightError as e:
            raise PageSourceError(f"could not read rows from {self._page.url}: {e}") from e

    def advance_page(self) -> bool:
        try:
            more = self._page.query_selector(self._feed.more_selector)
            if more is None:
                return False
            more.click()
            self._page.wait_for_load_state("domcontentloaded")
        except PlaywrightError as e:
            raise PageSourceError(f"could not load the next page: {e}") from e

        self.pages_loaded += 1
        if self._on_advance:
            try:
                self._on_advance(self.pages_loaded)
            except PlaywrightError as e:
                raise PageSourceError(f"page {self.pages_loaded} callback failed: {e}") from e
        return True


class HttpPageSource:
    """Reads a server-rendered feed with plain HTTP requests.

    The first page is fetched lazily on the first call. ``delay_s`` is slept
    before every request after the first to stay under the site's rate limit.
    """

    def __init__(
        self,
        client: httpx.Client,
        feed: FeedInfo,
        url: Optional[str] = None,
        delay_s: float = 0.0,
    ) -> None:
        self._client = client
        self._feed = feed
        self.url = url or feed.url
        self._delay_s = delay_s
        self._soup: Optional[BeautifulSoup] = None
        self.pages_loaded = 0

    def _load(self, url: str) -> BeautifulSoup:
        if self.pages_loaded and self._delay_s:
            time.sleep(self._delay_s)
        try:
            response = self._client.get(url, headers=_DEFAULT_HEADERS, follow_redirects=True)
            response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            raise PageSourceError(f"could not fetch {url}: {e}") from e
        self.pages_loaded += 1
        return BeautifulSoup(response.text, "html.parser")

    def _current(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = self._load(self.url)
        return self._soup

    def get_current_rows(self) -> list[Row]:
        soup = self._current()
        rows = []
        for el in soup.select(self._feed.row_selector):
            title_el = el.select_one(self._feed.title_selector)
            sibling = el.find_next_sibling()
            age_el = sibling.select_one(self._feed.age_selector) if sibling else None
            rows.append(
                Row(
                    title=title_el.get_text(strip=True) if title_el else "",
                    raw_age=age_el.get_text(" ", strip=True) if age_el else "",
                )
            )
        return rows

    def advance_page(self) -> bool:
        link = self._current().select_one(self._feed.more_selector)
        href = link.get("href") if link else None
        if not href:
            return False
        self.url = urljoin(self.url, href)
        self._soup = self._load(self.url)
        return True
