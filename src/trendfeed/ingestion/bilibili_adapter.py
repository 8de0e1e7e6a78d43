"""Bilibili popular videos adapter."""

from __future__ import annotations

import logging

from trendfeed.errors import AdapterError
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item, format_hot_score, make_item_id

logger = logging.getLogger(__name__)

_API_URL = "https://api.bilibili.com/x/web-interface/popular"
_VIDEO_URL = "https://www.bilibili.com/video/{}"


class BilibiliAdapter(SourceAdapter):
    """Adapter for the Bilibili popular list, ranked by the API's own order."""

    def __init__(self, page_size: int = 50, http_timeout: float = 15.0) -> None:
        super().__init__(http_timeout)
        self._page_size = page_size

    @property
    def id(self) -> str:
        return "bilibili"

    @property
    def name(self) -> str:
        return "B站"

    def fetch(self) -> list[Item]:
        data = self._get_json(
            _API_URL,
            headers={"Referer": "https://www.bilibili.com/"},
            params={"ps": self._page_size, "pn": 1},
        )
        code = data.get("code")
        if code != 0:
            raise AdapterError(
                "API_ERROR", f"Bilibili API returned code {code}: {data.get('message', '')}"
            )

        payload = data.get("data") or {}
        items: list[Item] = []
        for entry in payload.get("list") or []:
            bvid = entry.get("bvid") or ""
            title = (entry.get("title") or "").strip()
            if not bvid or not title:
                continue
            views = max(int((entry.get("stat") or {}).get("view") or 0), 0)
            items.append(
                Item(
                    id=make_item_id(self.id, bvid),
                    title=title,
                    url=_VIDEO_URL.format(bvid),
                    source_id=self.id,
                    source_name=self.name,
                    rank=len(items) + 1,
                    hot_score=views,
                    hot_description=f"{format_hot_score(views)}播放",
                )
            )

        logger.info("Fetched %d items from Bilibili", len(items))
        return items
