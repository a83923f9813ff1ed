"""Tests for feed discovery."""

from feedcheck.feeds import list_feeds, load_feed


def test_hacker_news_feed():
    feed = load_feed("hacker_news")
    assert feed is not None
    assert feed.url == "https://news.ycombinator.com/newest"
    assert feed.row_selector == "tr.athing"
    assert feed.more_selector == "a.morelink"
    assert feed.target == 100


def test_list_feeds_includes_builtins():
    names = [f.name for f in list_feeds()]
    assert "hacker_news" in names
    assert "show_hn" in names


def test_unknown_feed():
    assert load_feed("nope") is None


def test_feed_name_must_be_identifier():
    assert load_feed("../feeds") is None
