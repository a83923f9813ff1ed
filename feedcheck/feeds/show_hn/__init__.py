"""Show HN, newest first. Same markup as /newest."""

NAME = "show_hn"
DESCRIPTION = "Newest Show HN posts, newest to oldest"
URL = "https://news.ycombinator.com/shownew"
ROW_SELECTOR = "tr.athing"
TITLE_SELECTOR = ".titleline a"
AGE_SELECTOR = ".age"
MORE_SELECTOR = "a.morelink"
TARGET = 60
