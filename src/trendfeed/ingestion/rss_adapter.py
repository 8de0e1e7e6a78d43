"""RSS/Atom feed source adapters."""

from __future__ import annotations

import logging
import re
from html import unescape

import feedparser

from trendfeed.errors import AdapterError
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item, make_item_id

logger = logging.getLogger(__name__)

_HTML_TAG_RE = re.compile(r"<[^>]+>")


def strip_html(text: str) -> str:
    """Remove HTML tags and unescape entities."""
    return unescape(_HTML_TAG_RE.sub("", text)).strip()


class RSSAdapter(SourceAdapter):
    """Adapter for a platform whose trending list is a single RSS or Atom feed.

    News wires carry no popularity counter, so ``hot_score`` stays 0 and the
    publication date is used as the popularity description.
    """

    def __init__(
        self,
        platform_id: str,
        platform_name: str,
        feed_url: str,
        max_items: int = 30,
        http_timeout: float = 15.0,
    ) -> None:
        super().__init__(http_timeout)
        self._id = platform_id
        self._name = platform_name
        self._feed_url = feed_url
        self._max_items = max_items

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    def fetch(self) -> list[Item]:
        resp = self._get(self._feed_url)
        feed = feedparser.parse(resp.text)

        if feed.bozo and not feed.entries:
            raise AdapterError(
                "PARSE_ERROR",
                f"{self._name} feed could not be parsed: {feed.get('bozo_exception', 'unknown')}",
            )

        items: list[Item] = []
        for entry in feed.entries:
            if len(items) >= self._max_items:
                break
            title = strip_html(entry.get("title", ""))
            if not title:
                logger.debug("Skipping %s entry without title", self._id)
                continue
            items.append(self._to_item(entry, title, rank=len(items) + 1))

        logger.info("Fetched %d items from %s", len(items), self._name)
        return items

    def _to_item(self, entry: dict, title: str, rank: int) -> Item:
        return Item(
            id=make_item_id(self._id, rank),
            title=title,
            url=entry.get("link", ""),
            source_id=self._id,
            source_name=self._name,
            rank=rank,
            hot_description=entry.get("published") or entry.get("updated") or "",
        )


_POINTS_RE = re.compile(r"Points:\s*(\d+)")
_COMMENTS_RE = re.compile(r"Comments:\s*(\d+)")
_HN_ID_RE = re.compile(r"id=(\d+)")
_HN_HOT_THRESHOLD = 100


class HackerNewsAdapter(RSSAdapter):
    """Hacker News front page via hnrss.org, with points parsed from the description."""

    FEED_URL = "https://hnrss.org/frontpage"

    def __init__(self, max_items: int = 30, http_timeout: float = 15.0) -> None:
        super().__init__("hacker_news", "Hacker News", self.FEED_URL, max_items, http_timeout)

    def _to_item(self, entry: dict, title: str, rank: int) -> Item:
        description = strip_html(entry.get("summary", "") or entry.get("description", ""))
        points = _first_int(_POINTS_RE, description)
        comments = _first_int(_COMMENTS_RE, description)
        match = _HN_ID_RE.search(entry.get("id", "") or entry.get("comments", "") or "")
        local_id = match.group(1) if match else rank

        return Item(
            id=make_item_id(self.id, local_id),
            title=title,
            url=entry.get("link", ""),
            source_id=self.id,
            source_name=self.name,
            rank=rank,
            hot_score=points,
            hot_description=f"{points} points, {comments} comments" if points > 0 else "N/A",
            tag="hot" if points > _HN_HOT_THRESHOLD else "new",
        )


def _first_int(pattern: re.Pattern[str], text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0
