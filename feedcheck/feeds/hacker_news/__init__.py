"""Hacker News /newest — the reference feed.

Stories are listed newest first, 30 per page, with a "More" link at the
bottom. Each story row (tr.athing) is followed by a subtext row holding the
"N minutes ago" label.
"""

NAME = "hacker_news"
DESCRIPTION = "Hacker News newest stories, newest to oldest"
URL = "https://news.ycombinator.com/newest"
ROW_SELECTOR = "tr.athing"
TITLE_SELECTOR = ".titleline a"
AGE_SELECTOR = ".age"
MORE_SELECTOR = "a.morelink"
TARGET = 100
