"""Category relevance scoring."""

from __future__ import annotations

from trendfeed.ingestion.items import Item
from trendfeed.overrides import CategoryInfo

KEYWORD_SCORE = 10
PLATFORM_WEIGHT_FACTOR = 3
RECOMMENDED_MIN_WEIGHT = 2
RECOMMENDED_FALLBACK_COUNT = 3


def recommended_platforms(category: CategoryInfo) -> list[str]:
    """Platforms worth crawling for a category: weight >= 2, else the first three configured."""
    strong = [pid for pid, w in category.platform_weights.items() if w >= RECOMMENDED_MIN_WEIGHT]
    if strong:
        return strong
    return list(category.platform_weights)[:RECOMMENDED_FALLBACK_COUNT]


def category_score(item: Item, category: CategoryInfo) -> int:
    title_lower = item.title.lower()
    score = sum(KEYWORD_SCORE for keyword in category.keywords if keyword.lower() in title_lower)
    return score + PLATFORM_WEIGHT_FACTOR * category.weight(item.source_id)


def score_for_category(items: list[Item], category: CategoryInfo, limit: int) -> list[Item]:
    """Items relevant to ``category``, best first, at most ``limit``."""
    if limit <= 0:
        return []
    scored = [(category_score(item, category), item) for item in items if item.title]
    scored = [pair for pair in scored if pair[0] > 0]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored[:limit]]
