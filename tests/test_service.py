"""Tests for trendfeed.service: target resolution and the aggregated views."""

from __future__ import annotations

import json
import threading
import time

import pytest

from trendfeed.config import Config
from trendfeed.crawl.orchestrator import CrawlOrchestrator
from trendfeed.errors import (
    AdapterError,
    CrawlCancelled,
    RegistryConsistencyError,
    UnknownCategoryError,
)
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item
from trendfeed.ingestion.registry import SourceRegistry
from trendfeed.overrides import (
    CategoryInfo,
    OverrideProvider,
    PlatformOverrides,
    Preferences,
    PriorityInfo,
)
from trendfeed.platforms import BuiltinPlatform, PlatformRegistry
from trendfeed.service import AggregationService

_BUILTINS = (
    BuiltinPlatform("news", "News", "https://news.example", ("n",)),
    BuiltinPlatform("forum", "Forum", "https://forum.example", ("f", "board")),
    BuiltinPlatform("video", "Video", "https://video.example", ("v",)),
    BuiltinPlatform("blog", "Blog", "https://blog.example"),
)


class _FakeAdapter(SourceAdapter):
    def __init__(self, platform_id, titles=(), error=None):
        super().__init__()
        self._id = platform_id
        self._titles = list(titles)
        self._error = error
        self.calls = 0

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._id.title()

    def fetch(self):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return [
            Item(
                id=f"{self._id}_{n}",
                title=title,
                url=f"https://{self._id}.example/{n}",
                source_id=self._id,
                source_name=self._id.title(),
                rank=n,
                hot_score=100 - n,
            )
            for n, title in enumerate(self._titles, start=1)
        ]


def _overrides(count=0):
    return PlatformOverrides(
        default_platform_count=count,
        platforms={
            "news": PriorityInfo("news", True, 90),
            "forum": PriorityInfo("forum", True, 70),
            "video": PriorityInfo("video", True, 80),
            "blog": PriorityInfo("blog", False, 99),
        },
    )


_CATEGORIES = {
    "tech": CategoryInfo(
        id="tech",
        name="Tech",
        keywords=("python", "chip"),
        platform_weights={"forum": 5, "news": 3},
    ),
    "fun": CategoryInfo(
        id="fun",
        name="Fun",
        keywords=("cat", "movie"),
        platform_weights={"video": 5},
    ),
}


def _service(adapters, count=0, config=None, categories=None, preferences=None):
    platforms = PlatformRegistry(_overrides(count), builtins=_BUILTINS)
    sources = SourceRegistry(adapters)
    orchestrator = CrawlOrchestrator(platforms, sources, timeout_seconds=5.0)
    return AggregationService(
        platforms,
        sources,
        orchestrator,
        categories=categories if categories is not None else _CATEGORIES,
        preferences=preferences or Preferences(category_weights={"tech": 3, "fun": 1}),
        config=config or Config(),
        segmenter=lambda text: text.split(),
    )


@pytest.fixture
def adapters():
    return {
        "news": _FakeAdapter("news", ["Python 4 released", "Chip exports rise", "Election day"]),
        "forum": _FakeAdapter("forum", ["Python 4 released!", "Ask: best cat food"]),
        "video": _FakeAdapter("video", ["Funny cat movie", "Chip teardown"]),
    }


class TestResolveTargets:
    def test_default_set_in_priority_order(self, adapters):
        service = _service(adapters.values())
        assert service.resolve_targets() == ["news", "video", "forum"]

    def test_default_set_truncated_by_count(self, adapters):
        service = _service(adapters.values(), count=2)
        assert service.resolve_targets([]) == ["news", "video"]

    def test_default_falls_back_when_defaults_have_no_adapter(self):
        # default set is just "news", which has no adapter here
        service = _service([_FakeAdapter("forum"), _FakeAdapter("blog")], count=1)
        assert service.resolve_targets(None) == ["forum"]

    def test_aliases_resolved_and_sorted(self, adapters):
        service = _service(adapters.values())
        assert service.resolve_targets(["board", "N", " v "]) == ["news", "video", "forum"]

    def test_unknown_disabled_and_unsupported_dropped(self, adapters):
        service = _service(adapters.values())
        assert service.resolve_targets(["nope", "blog", "forum"]) == ["forum"]

    def test_nothing_resolvable_yields_empty(self, adapters):
        service = _service(adapters.values())
        assert service.resolve_targets(["nope"]) == []

    def test_duplicates_collapsed(self, adapters):
        service = _service(adapters.values())
        assert service.resolve_targets(["f", "forum", "board"]) == ["forum"]


class TestHotAndSearch:
    def test_hot_news_merges_in_priority_order(self, adapters):
        result = _service(adapters.values()).hot_news()
        assert [i.source_id for i in result.items][:3] == ["news", "news", "news"]
        assert result.items[3].source_id == "video"
        assert result.status == "ok"

    def test_hot_news_limit(self, adapters):
        result = _service(adapters.values()).hot_news(limit=2)
        assert len(result.items) == 2
        assert len(result.outcomes) == 3

    def test_hot_news_limit_capped(self, adapters):
        config = Config(max_hot_limit=4)
        result = _service(adapters.values(), config=config).hot_news(limit=100)
        assert len(result.items) == 4

    def test_partial_failure_reported(self, adapters):
        adapters["video"] = _FakeAdapter("video", error=AdapterError("HTTP_STATUS", "503"))
        result = _service(adapters.values()).hot_news()
        assert result.status == "partial"
        assert result.failures == {"video": "HTTP_STATUS: 503"}
        assert {i.source_id for i in result.items} == {"news", "forum"}

    def test_unresolvable_platforms_give_empty_result(self, adapters):
        result = _service(adapters.values()).hot_news(["nope"])
        assert result.items == []
        assert result.outcomes == []
        assert all(a.calls == 0 for a in adapters.values())

    def test_search_ranks_matches(self, adapters):
        result = _service(adapters.values()).search("python 4", platforms=["news", "forum"])
        assert [i.id for i in result.items] == ["news_1", "forum_1"]

    def test_blank_search_does_not_crawl(self, adapters):
        result = _service(adapters.values()).search("   ")
        assert result.items == []
        assert all(a.calls == 0 for a in adapters.values())


class TestSummaryAndTrending:
    def test_summary_clusters_duplicates(self, adapters):
        view = _service(adapters.values()).summary(top_n=3)

        assert view.total_analyzed == 7
        assert view.platform_distribution == {"news": 3, "video": 2, "forum": 2}
        top = view.clusters[0]
        assert top.representative_title == "Python 4 released"
        assert top.source_names == ["News", "Forum"]
        assert len(view.clusters) == 3

    def test_trending_topics(self, adapters):
        view = _service(adapters.values()).trending_topics()
        keywords = [t.keyword for t in view.topics]
        assert "PYTHON" in keywords
        assert "CHIP" in keywords


class TestCategories:
    def test_single_category(self, adapters):
        view = _service(adapters.values()).news_by_category("tech", limit=3)

        assert view.mode == "single_category"
        assert view.category_name == "Tech"
        assert len(view.items) == 3
        assert {i.source_id for i in view.items} <= {"forum", "news"}
        assert adapters["video"].calls == 0

    def test_unknown_category_raises(self, adapters):
        with pytest.raises(UnknownCategoryError) as exc_info:
            _service(adapters.values()).news_by_category("sports")
        assert exc_info.value.available == ["fun", "tech"]

    def test_mixed_by_preference(self, adapters):
        view = _service(adapters.values()).news_by_category(None, limit=4)

        assert view.mode == "mixed_by_preference"
        assert view.weights == {"tech": 3, "fun": 1}
        assert view.distribution == {"Tech": 3, "Fun": 1}
        assert len(view.items) == 4
        assert len({i.id for i in view.items}) == 4

    def test_mixed_carries_failures(self, adapters):
        adapters["video"] = _FakeAdapter("video", error=RuntimeError("boom"))
        view = _service(adapters.values()).news_by_category(None, limit=4)
        assert "video" in view.failures
        assert view.status == "partial"


class TestPlatformListAndConsistency:
    def test_platform_list(self, adapters):
        infos = _service(adapters.values()).platform_list()
        assert [p.id for p in infos] == ["news", "video", "forum"]
        forum = infos[2]
        assert forum.categories == ["Tech"]
        assert forum.aliases == ["board", "f", "forum"]
        assert forum.has_adapter

    def test_platform_list_include_disabled(self, adapters):
        infos = _service(adapters.values()).platform_list(include_disabled=True)
        assert infos[0].id == "blog"
        assert infos[0].enabled is False
        assert infos[0].has_adapter is False

    def test_missing_adapters_reported(self):
        service = _service([_FakeAdapter("news")])
        assert service.missing_adapters == ["forum", "video"]

    def test_strict_registry_fails_construction(self):
        with pytest.raises(RegistryConsistencyError):
            _service([_FakeAdapter("news")], config=Config(strict_registry=True))


class TestReload:
    def test_reload_applies_new_overrides(self, tmp_path, adapters):
        platforms_path = tmp_path / "platforms.json"
        platforms_path.write_text(
            json.dumps({"platforms": {"forum": {"priority": 100}}}), encoding="utf-8"
        )
        config = Config(
            platforms_config_path=str(platforms_path),
            categories_config_path=str(tmp_path / "categories.json"),
            preferences_config_path=str(tmp_path / "preferences.json"),
        )
        service = _service(adapters.values(), config=config)
        provider = OverrideProvider(config)

        service.reload(provider)

        assert service.resolve_targets()[0] == "forum"
        assert "ai" in {c.id for c in provider.categories.values()}


class _BlockingAdapter(_FakeAdapter):
    def __init__(self, platform_id, release):
        super().__init__(platform_id, ["never returned"])
        self._release = release

    def fetch(self):
        self._release.wait(timeout=10)
        return super().fetch()


class TestShutdown:
    def test_views_refuse_to_crawl_after_shutdown(self, adapters):
        service = _service(adapters.values())
        service.shutdown()

        assert service.is_shutting_down
        with pytest.raises(CrawlCancelled):
            service.hot_news()
        with pytest.raises(CrawlCancelled):
            service.news_by_category(None, limit=4)
        assert [p.id for p in service.platform_list()] == ["news", "video", "forum"]

    def test_shutdown_interrupts_in_flight_crawl(self):
        release = threading.Event()
        service = _service([_BlockingAdapter("news", release)])
        threading.Timer(0.2, service.shutdown).start()

        started = time.monotonic()
        try:
            with pytest.raises(CrawlCancelled):
                service.hot_news()
        finally:
            release.set()

        # well short of the 5s crawl timeout
        assert time.monotonic() - started < 2.0
