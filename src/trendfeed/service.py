"""Aggregation service: target resolution plus the hot, search, summary and category views."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from trendfeed.config import Config
from trendfeed.crawl.consistency import check_registry_consistency
from trendfeed.crawl.orchestrator import CrawlOrchestrator
from trendfeed.crawl.outcome import AggregatedResult, CrawlOutcome
from trendfeed.errors import UnknownCategoryError
from trendfeed.ingestion.items import Item
from trendfeed.ingestion.registry import SourceRegistry
from trendfeed.overrides import CategoryInfo, OverrideProvider, Preferences
from trendfeed.platforms import PlatformRegistry
from trendfeed.ranking.allocation import allocate_by_category_weights
from trendfeed.ranking.categories import recommended_platforms, score_for_category
from trendfeed.ranking.cluster import NewsCluster, cluster_and_rank
from trendfeed.ranking.search import rank_by_search
from trendfeed.ranking.segment import Segmenter, jieba_segment
from trendfeed.ranking.trending import TrendingTopic, find_trending_topics

logger = logging.getLogger(__name__)

MAX_CATEGORY_LIMIT = 100
STRONG_CATEGORY_WEIGHT = 3


@dataclass(frozen=True)
class SummaryView:
    clusters: list[NewsCluster]
    total_analyzed: int
    platform_distribution: dict[str, int]
    result: AggregatedResult


@dataclass(frozen=True)
class CategoryView:
    mode: str
    items: list[Item]
    distribution: dict[str, int]
    failures: dict[str, str]
    outcomes: list[CrawlOutcome]
    category_id: str | None = None
    category_name: str | None = None
    weights: dict[str, int] = field(default_factory=dict)

    @property
    def status(self) -> str:
        return AggregatedResult(self.items, self.failures, self.outcomes).status


@dataclass(frozen=True)
class TrendingView:
    topics: list[TrendingTopic]
    result: AggregatedResult


@dataclass(frozen=True)
class PlatformInfo:
    id: str
    name: str
    description: str
    enabled: bool
    priority: int
    has_adapter: bool
    aliases: list[str]
    categories: list[str]


class AggregationService:
    """Entry point for callers: resolves targets, crawls, and shapes the result."""

    def __init__(
        self,
        platforms: PlatformRegistry,
        sources: SourceRegistry,
        orchestrator: CrawlOrchestrator,
        categories: dict[str, CategoryInfo] | None = None,
        preferences: Preferences | None = None,
        config: Config | None = None,
        segmenter: Segmenter | None = jieba_segment,
    ) -> None:
        self._platforms = platforms
        self._sources = sources
        self._orchestrator = orchestrator
        self._categories = categories or {}
        self._preferences = preferences or Preferences()
        self._config = config or Config()
        self._segmenter = segmenter
        self._shutdown = threading.Event()
        self.missing_adapters = check_registry_consistency(
            platforms, sources, strict=self._config.strict_registry
        )

    @property
    def platforms(self) -> PlatformRegistry:
        return self._platforms

    @property
    def sources(self) -> SourceRegistry:
        return self._sources

    def shutdown(self) -> None:
        """Cancel in-flight crawls and refuse new ones; crawling views raise CrawlCancelled."""
        if not self._shutdown.is_set():
            logger.info("Cancelling in-flight crawls")
        self._shutdown.set()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutdown.is_set()

    def reload(self, provider: OverrideProvider) -> None:
        """Re-read override files and swap in the new platform/category/preference tables."""
        provider.reload()
        self._platforms.reload(provider.platforms)
        self._categories = provider.categories
        self._preferences = provider.preferences
        self.missing_adapters = check_registry_consistency(
            self._platforms, self._sources, strict=self._config.strict_registry
        )

    # ------------------------------------------------------------------
    # Target resolution
    # ------------------------------------------------------------------

    def resolve_targets(self, requested: Iterable[str] | None = None) -> list[str]:
        """Canonical, enabled, executable ids in priority order.

        With no names requested, use the registry's default set; if none of
        those has an adapter, use every enabled id that has one.
        """
        requested = [name for name in requested or [] if name and name.strip()]
        if not requested:
            targets = [pid for pid in self._platforms.default_ids() if pid in self._sources]
            if not targets:
                targets = [
                    pid
                    for pid in self._platforms.sort_by_priority(self._sources.ids())
                    if self._platforms.is_enabled(pid)
                ]
            return self._platforms.sort_by_priority(targets)

        resolved: list[str] = []
        for name in requested:
            platform_id = self._platforms.resolve(name)
            if platform_id is None or platform_id not in self._sources:
                logger.warning("Unknown or unsupported platform: %s", name)
                continue
            if not self._platforms.is_enabled(platform_id):
                logger.warning("Platform is disabled: %s", platform_id)
                continue
            resolved.append(platform_id)
        return self._platforms.sort_by_priority(resolved)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def _crawl(self, ids: list[str]) -> AggregatedResult:
        return self._orchestrator.crawl(ids, cancel_event=self._shutdown)

    def hot_news(self, platforms: Iterable[str] | None = None, limit: int = 0) -> AggregatedResult:
        """Merged trending lists, truncated to ``limit`` (default 50, capped at 200)."""
        effective = self._bounded(limit, self._config.default_hot_limit, self._config.max_hot_limit)
        result = self._crawl(self.resolve_targets(platforms))
        return result.with_items(result.items[:effective])

    def search(
        self, query: str | None, platforms: Iterable[str] | None = None, limit: int = 0
    ) -> AggregatedResult:
        """Items matching ``query``. A blank query returns an empty result without crawling."""
        if query is None or not query.strip():
            return AggregatedResult()
        effective = limit if limit > 0 else self._config.default_search_limit
        result = self._crawl(self.resolve_targets(platforms))
        matched = rank_by_search(result.items, query, effective, segmenter=self._segmenter)
        logger.info("Search %r matched %d of %d items", query, len(matched), len(result.items))
        return result.with_items(matched)

    def summary(self, top_n: int = 0) -> SummaryView:
        """Cross-platform headlines: near-duplicates merged, ranked by coverage."""
        effective = self._bounded(
            top_n, self._config.default_summary_top_n, self._config.max_summary_top_n
        )
        result = self._crawl(self.resolve_targets(None))
        clusters = cluster_and_rank(result.items, effective)
        distribution = dict(Counter(item.source_id for item in result.items))
        return SummaryView(
            clusters=clusters,
            total_analyzed=len(result.items),
            platform_distribution=distribution,
            result=result,
        )

    def news_by_category(self, category_id: str | None = None, limit: int = 0) -> CategoryView:
        """One category's news, or a preference-weighted mix when no category is given."""
        effective = self._bounded(limit, self._preferences.default_limit, MAX_CATEGORY_LIMIT)
        if category_id:
            category = self._categories.get(category_id)
            if category is None:
                raise UnknownCategoryError(category_id, sorted(self._categories))
            result = self._crawl(self.resolve_targets(recommended_platforms(category)))
            items = score_for_category(result.items, category, effective)
            return CategoryView(
                mode="single_category",
                items=items,
                distribution={category.name: len(items)},
                failures=dict(result.failures),
                outcomes=list(result.outcomes),
                category_id=category.id,
                category_name=category.name,
            )
        return self._mixed_by_preference(effective)

    def _mixed_by_preference(self, limit: int) -> CategoryView:
        weights = dict(self._preferences.category_weights)
        allocation = allocate_by_category_weights(weights, limit)
        selected = [
            (self._categories[cid], count)
            for cid, count in allocation.items()
            if count > 0 and cid in self._categories
        ]

        wanted: list[str] = []
        for category, _ in selected:
            wanted.extend(recommended_platforms(category))
        result = self._crawl(self.resolve_targets(wanted)) if wanted else AggregatedResult()

        items: list[Item] = []
        seen: set[str] = set()
        distribution: dict[str, int] = {}
        for category, count in selected:
            candidates = [item for item in result.items if item.id not in seen]
            picked = score_for_category(candidates, category, count)
            seen.update(item.id for item in picked)
            items.extend(picked)
            if picked:
                distribution[category.name] = len(picked)

        return CategoryView(
            mode="mixed_by_preference",
            items=items,
            distribution=distribution,
            failures=dict(result.failures),
            outcomes=list(result.outcomes),
            weights=weights,
        )

    def trending_topics(self, top_n: int = 0) -> TrendingView:
        result = self._crawl(self.resolve_targets(None))
        return TrendingView(topics=find_trending_topics(result.items, top_n), result=result)

    def platform_list(self, include_disabled: bool = False) -> list[PlatformInfo]:
        """Platforms by priority, each with the categories it is strong in."""
        ids = self._platforms.all_ids() if include_disabled else self._platforms.ordered_enabled_ids()
        infos: list[PlatformInfo] = []
        for platform_id in self._platforms.sort_by_priority(ids):
            descriptor = self._platforms.get(platform_id)
            if descriptor is None:
                continue
            strong_in = [
                c.name
                for c in self._categories.values()
                if c.weight(platform_id) >= STRONG_CATEGORY_WEIGHT
            ]
            infos.append(
                PlatformInfo(
                    id=descriptor.id,
                    name=descriptor.name,
                    description=descriptor.description,
                    enabled=descriptor.enabled,
                    priority=descriptor.priority,
                    has_adapter=descriptor.id in self._sources,
                    aliases=sorted(descriptor.aliases),
                    categories=strong_in,
                )
            )
        return infos

    @staticmethod
    def _bounded(value: int, default: int, maximum: int) -> int:
        effective = value if value > 0 else default
        return min(effective, maximum)
