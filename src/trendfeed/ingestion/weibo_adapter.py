"""Weibo hot search adapter."""

from __future__ import annotations

import logging
from urllib.parse import quote

from trendfeed.errors import AdapterError
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item, format_hot_score, make_item_id

logger = logging.getLogger(__name__)

_API_URL = "https://weibo.com/ajax/side/hotSearch"
_SEARCH_URL = "https://s.weibo.com/weibo?q={}"


class WeiboAdapter(SourceAdapter):
    """Adapter for the Weibo realtime hot search board."""

    @property
    def id(self) -> str:
        return "weibo"

    @property
    def name(self) -> str:
        return "微博"

    def fetch(self) -> list[Item]:
        data = self._get_json(_API_URL, headers={"Referer": "https://weibo.com/"})
        board = data.get("data")
        if not isinstance(board, dict):
            raise AdapterError("PARSE_ERROR", "Weibo response has no data object")

        items: list[Item] = []
        for i, entry in enumerate(board.get("realtime") or []):
            word = (entry.get("word") or "").strip()
            title = (entry.get("note") or word).strip()
            if not title:
                continue
            raw_hot = max(int(entry.get("raw_hot") or entry.get("num") or 0), 0)
            items.append(
                Item(
                    id=make_item_id(self.id, i),
                    title=title,
                    url=_SEARCH_URL.format(quote(word or title)),
                    source_id=self.id,
                    source_name=self.name,
                    rank=len(items) + 1,
                    hot_score=raw_hot,
                    hot_description=format_hot_score(raw_hot),
                    tag=entry.get("label_name") or None,
                )
            )

        logger.info("Fetched %d items from Weibo", len(items))
        return items
