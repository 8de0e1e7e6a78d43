"""Free-text search scoring over crawled items."""

from __future__ import annotations

import logging

from trendfeed.ingestion.items import Item
from trendfeed.ranking.segment import Segmenter, jieba_segment

logger = logging.getLogger(__name__)

FULL_MATCH_SCORE = 100
TOKEN_MATCH_SCORE = 10
DEFAULT_SEARCH_LIMIT = 20


def _usable(token: str) -> bool:
    # Single punctuation marks and symbols carry no signal.
    return len(token) > 1 or token[0].isalnum()


def query_tokens(keyword: str, segmenter: Segmenter | None = jieba_segment) -> list[str]:
    """Distinct lowercase tokens of ``keyword``, in order of first appearance.

    Falls back to the whole keyword when the segmenter is missing, fails, or
    yields nothing usable.
    """
    raw: list[str] = []
    if segmenter is not None:
        try:
            raw = segmenter(keyword)
        except Exception:
            logger.warning("Segmenter failed for %r; matching whole query", keyword, exc_info=True)
            raw = []

    tokens: list[str] = []
    seen: set[str] = set()
    for token in raw or []:
        token = token.strip().lower()
        if not token or not _usable(token) or token in seen:
            continue
        seen.add(token)
        tokens.append(token)

    return tokens or [keyword]


def score_title(title: str, keyword: str, tokens: list[str]) -> int:
    """+100 when the whole keyword occurs in the title, +10 per distinct token that does."""
    title_lower = title.lower()
    score = FULL_MATCH_SCORE if keyword in title_lower else 0
    score += TOKEN_MATCH_SCORE * sum(1 for token in tokens if token in title_lower)
    return score


def rank_by_search(
    items: list[Item],
    query: str | None,
    limit: int = DEFAULT_SEARCH_LIMIT,
    segmenter: Segmenter | None = jieba_segment,
) -> list[Item]:
    """Items matching ``query``, best first, at most ``limit`` of them.

    Non-matching items are dropped; equal scores keep their input order.
    """
    if query is None or not query.strip():
        return []
    keyword = query.strip().lower()
    tokens = query_tokens(keyword, segmenter)
    logger.debug("Search tokens: %r -> %r", keyword, tokens)

    scored: list[tuple[int, Item]] = []
    for item in items:
        if not item.title:
            continue
        score = score_title(item.title, keyword, tokens)
        if score > 0:
            scored.append((score, item))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    effective_limit = limit if limit > 0 else DEFAULT_SEARCH_LIMIT
    return [item for _, item in scored[:effective_limit]]
