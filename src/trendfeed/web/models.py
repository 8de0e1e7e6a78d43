"""Pydantic v2 response models for the trendfeed web API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from trendfeed.crawl.outcome import AggregatedResult, CrawlOutcome
from trendfeed.ingestion.items import Item, format_hot_score


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class ItemOut(BaseModel):
    id: str
    title: str
    url: str
    source_id: str
    source_name: str
    rank: int
    hot_score: int
    hot_display: str
    hot_description: str
    tag: str | None
    fetched_at: datetime

    @classmethod
    def from_item(cls, item: Item) -> ItemOut:
        return cls(
            id=item.id,
            title=item.title,
            url=item.url,
            source_id=item.source_id,
            source_name=item.source_name,
            rank=item.rank,
            hot_score=item.hot_score,
            hot_display=format_hot_score(item.hot_score),
            hot_description=item.hot_description,
            tag=item.tag,
            fetched_at=item.fetched_at,
        )


class OutcomeOut(BaseModel):
    source_id: str
    source_name: str
    status: str
    item_count: int
    error_code: str | None
    error_message: str | None
    latency_ms: int

    @classmethod
    def from_outcome(cls, outcome: CrawlOutcome) -> OutcomeOut:
        return cls(
            source_id=outcome.source_id,
            source_name=outcome.source_name,
            status=outcome.status.value,
            item_count=len(outcome.items),
            error_code=outcome.error_code,
            error_message=outcome.error_message,
            latency_ms=outcome.latency_ms,
        )


def _outcomes(outcomes: list[CrawlOutcome]) -> list[OutcomeOut]:
    return [OutcomeOut.from_outcome(o) for o in outcomes]


# ---------------------------------------------------------------------------
# Hot / search
# ---------------------------------------------------------------------------
class ItemListResponse(BaseModel):
    status: str
    count: int
    items: list[ItemOut]
    failures: dict[str, str]
    outcomes: list[OutcomeOut]

    @classmethod
    def from_result(cls, result: AggregatedResult) -> ItemListResponse:
        return cls(
            status=result.status,
            count=len(result.items),
            items=[ItemOut.from_item(i) for i in result.items],
            failures=dict(result.failures),
            outcomes=_outcomes(result.outcomes),
        )


class SearchResponse(ItemListResponse):
    query: str


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------
class ClusterOut(BaseModel):
    title: str
    url: str
    sources: list[str]
    source_count: int
    item_count: int
    total_hot_score: int


class SummaryResponse(BaseModel):
    status: str
    total_analyzed: int
    headlines: list[ClusterOut]
    platform_distribution: dict[str, int]
    failures: dict[str, str]
    outcomes: list[OutcomeOut]


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class CategoryNewsResponse(BaseModel):
    status: str
    mode: str
    category_id: str | None
    category_name: str | None
    count: int
    items: list[ItemOut]
    distribution: dict[str, int]
    weights: dict[str, int]
    failures: dict[str, str]
    outcomes: list[OutcomeOut]


# ---------------------------------------------------------------------------
# Trending
# ---------------------------------------------------------------------------
class TopicOut(BaseModel):
    keyword: str
    count: int
    platforms: list[str]
    trend: str
    trend_description: str
    related_titles: list[str]


class TrendingResponse(BaseModel):
    status: str
    topics: list[TopicOut]
    failures: dict[str, str]


# ---------------------------------------------------------------------------
# Platforms
# ---------------------------------------------------------------------------
class PlatformOut(BaseModel):
    id: str
    name: str
    description: str
    enabled: bool
    priority: int
    has_adapter: bool
    aliases: list[str]
    categories: list[str]


class PlatformListResponse(BaseModel):
    count: int
    platforms: list[PlatformOut]
