"""Trending keyword detection across headlines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from trendfeed.ingestion.items import Item

_CJK_RE = re.compile(r"[一-龥]{2,6}")
_LATIN_RE = re.compile(r"[a-zA-Z]{2,}")

STOP_WORDS = frozenset({
    "什么", "怎么", "如何", "为什么", "哪里", "谁是", "什么样",
    "可以", "能够", "应该", "需要", "可能", "一定",
    "这个", "那个", "这些", "那些", "这里", "那里",
    "突发", "速看", "最新", "热搜", "刚刚", "重磅",
    "怎样", "为何", "何时", "哪些", "哪个",
})

MIN_OCCURRENCES = 2
MAX_RELATED_TITLES = 3
DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class TrendingTopic:
    keyword: str
    count: int
    platforms: list[str]
    trend: str
    trend_description: str
    related_titles: list[str]


@dataclass
class _KeywordStats:
    count: int = 0
    platforms: list[str] = field(default_factory=list)
    titles: list[str] = field(default_factory=list)


def extract_keywords(title: str | None) -> list[str]:
    """CJK runs of 2-6 characters (minus stop words) and uppercased Latin words."""
    if not title:
        return []
    keywords = [w for w in _CJK_RE.findall(title) if w not in STOP_WORDS]
    keywords.extend(w.upper() for w in _LATIN_RE.findall(title))
    return keywords


def classify_trend(count: int) -> tuple[str, str]:
    if count >= 5:
        return "up", "Rising across several platforms"
    if count >= 3:
        return "stable", "Steady attention"
    return "down", "Modest attention"


def find_trending_topics(items: list[Item], top_n: int = DEFAULT_TOP_N) -> list[TrendingTopic]:
    """Keywords seen at least twice, most frequent first."""
    stats: dict[str, _KeywordStats] = {}
    for item in items:
        for keyword in extract_keywords(item.title):
            entry = stats.setdefault(keyword, _KeywordStats())
            entry.count += 1
            source = item.source_name or item.source_id
            if source not in entry.platforms:
                entry.platforms.append(source)
            entry.titles.append(item.title)

    candidates = [
        (keyword, s) for keyword, s in stats.items()
        if s.count >= MIN_OCCURRENCES and len(keyword) >= 2
    ]
    candidates.sort(key=lambda pair: pair[1].count, reverse=True)

    limit = top_n if top_n > 0 else DEFAULT_TOP_N
    topics: list[TrendingTopic] = []
    for keyword, s in candidates[:limit]:
        trend, description = classify_trend(s.count)
        topics.append(
            TrendingTopic(
                keyword=keyword,
                count=s.count,
                platforms=list(s.platforms),
                trend=trend,
                trend_description=description,
                related_titles=s.titles[:MAX_RELATED_TITLES],
            )
        )
    return topics
