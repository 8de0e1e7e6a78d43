"""Zhihu hot list adapter."""

from __future__ import annotations

import logging
import re

from trendfeed.errors import AdapterError
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item, make_item_id

logger = logging.getLogger(__name__)

_API_URL = "https://api.zhihu.com/topstory/hot-lists/total?limit=50"
_QUESTION_URL = "https://www.zhihu.com/question/{}"
_MOBILE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_2_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.0.1 Mobile/15E148 Safari/604.1"
)
_HOT_TEXT_RE = re.compile(r"([\d.]+)\s*(万|亿)?")
_QUESTION_ID_RE = re.compile(r"/questions?/(\d+)")


def parse_hot_text(text: str) -> int:
    """Parse strings like ``"1234 万热度"`` into an integer score."""
    match = _HOT_TEXT_RE.search(text or "")
    if not match:
        return 0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0
    unit = match.group(2)
    if unit == "万":
        value *= 10_000
    elif unit == "亿":
        value *= 100_000_000
    return int(value)


class ZhihuAdapter(SourceAdapter):
    """Adapter for the Zhihu total hot list."""

    @property
    def id(self) -> str:
        return "zhihu"

    @property
    def name(self) -> str:
        return "知乎"

    def fetch(self) -> list[Item]:
        data = self._get_json(_API_URL, headers={"User-Agent": _MOBILE_UA})
        entries = data.get("data")
        if not isinstance(entries, list):
            raise AdapterError("PARSE_ERROR", "Zhihu response has no data list")

        items: list[Item] = []
        for entry in entries:
            target = entry.get("target") if isinstance(entry, dict) else None
            if not isinstance(target, dict):
                continue
            title = (target.get("title") or "").strip()
            if not title:
                continue

            target_id = str(target.get("id", ""))
            match = _QUESTION_ID_RE.search(target.get("url") or "")
            question_id = match.group(1) if match else target_id
            detail = entry.get("detail_text") or ""

            items.append(
                Item(
                    id=make_item_id(self.id, target_id or len(items) + 1),
                    title=title,
                    url=_QUESTION_URL.format(question_id),
                    source_id=self.id,
                    source_name=self.name,
                    rank=len(items) + 1,
                    hot_score=parse_hot_text(detail),
                    hot_description=detail,
                )
            )

        logger.info("Fetched %d items from Zhihu", len(items))
        return items
