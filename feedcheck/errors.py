"""Exception types raised by feedcheck."""

from __future__ import annotations


class FeedCheckError(Exception):
    """Base class for feedcheck errors."""


class PageSourceError(FeedCheckError):
    """A page source could not read the current rows or load the next page."""
