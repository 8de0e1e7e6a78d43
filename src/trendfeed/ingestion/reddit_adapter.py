"""Reddit source adapter: hot posts from a subreddit listing."""

from __future__ import annotations

import logging

from trendfeed.errors import AdapterError
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item, make_item_id

logger = logging.getLogger(__name__)

_REDDIT_HOT_URL = "https://www.reddit.com/r/{}/hot.json"
_USER_AGENT = "trendfeed/0.1 (trending aggregation)"


class RedditAdapter(SourceAdapter):
    """Adapter for the hot listing of a subreddit (``all`` by default)."""

    def __init__(self, subreddit: str = "all", limit: int = 25, http_timeout: float = 15.0) -> None:
        super().__init__(http_timeout)
        self._subreddit = subreddit
        self._limit = limit

    @property
    def id(self) -> str:
        return "reddit"

    @property
    def name(self) -> str:
        return "Reddit"

    def fetch(self) -> list[Item]:
        data = self._get_json(
            _REDDIT_HOT_URL.format(self._subreddit),
            headers={"User-Agent": _USER_AGENT},
            params={"limit": self._limit},
        )
        listing = data.get("data")
        if not isinstance(listing, dict):
            raise AdapterError("PARSE_ERROR", "Reddit response has no listing data")

        items: list[Item] = []
        for wrapper in listing.get("children", []):
            post = wrapper.get("data", {}) if isinstance(wrapper, dict) else {}
            if post.get("stickied"):
                continue
            title = (post.get("title") or "").strip()
            if not title:
                continue

            score = max(int(post.get("score") or 0), 0)
            comments = int(post.get("num_comments") or 0)
            rank = len(items) + 1
            items.append(
                Item(
                    id=make_item_id(self.id, post.get("id") or rank),
                    title=title,
                    url=f"https://www.reddit.com{post.get('permalink', '')}",
                    source_id=self.id,
                    source_name=self.name,
                    rank=rank,
                    hot_score=score,
                    hot_description=f"{score} upvotes, {comments} comments",
                    tag=post.get("subreddit_name_prefixed"),
                )
            )

        logger.info("Fetched %d items from Reddit r/%s", len(items), self._subreddit)
        return items
