"""Integration tests for the trendfeed web API endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from trendfeed.config import Config
from trendfeed.crawl.orchestrator import CrawlOrchestrator
from trendfeed.errors import AdapterError
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item
from trendfeed.ingestion.registry import SourceRegistry
from trendfeed.overrides import CategoryInfo, PlatformOverrides, Preferences, PriorityInfo
from trendfeed.platforms import BuiltinPlatform, PlatformRegistry
from trendfeed.service import AggregationService
from trendfeed.web.app import create_app

_BUILTINS = (
    BuiltinPlatform("wire", "Wire", "https://wire.example", ("w",)),
    BuiltinPlatform("board", "Board", "https://board.example", ("b",)),
    BuiltinPlatform("tube", "Tube", "https://tube.example"),
)


class _StaticAdapter(SourceAdapter):
    def __init__(self, platform_id, titles=(), error=None):
        super().__init__()
        self._id = platform_id
        self._titles = titles
        self._error = error

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._id.title()

    def fetch(self):
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
                hot_score=12_000 * n,
            )
            for n, title in enumerate(self._titles, start=1)
        ]


def _build_service(adapters, enabled_tube=True):
    overrides = PlatformOverrides(
        platforms={
            "wire": PriorityInfo("wire", True, 90, "Newswire"),
            "board": PriorityInfo("board", True, 80, "Message board"),
            "tube": PriorityInfo("tube", enabled_tube, 70, "Videos"),
        }
    )
    platforms = PlatformRegistry(overrides, builtins=_BUILTINS)
    sources = SourceRegistry(adapters)
    return AggregationService(
        platforms,
        sources,
        CrawlOrchestrator(platforms, sources, timeout_seconds=5.0),
        categories={
            "science": CategoryInfo(
                id="science",
                name="Science",
                keywords=("space", "rocket"),
                platform_weights={"wire": 4, "board": 3},
            )
        },
        preferences=Preferences(category_weights={"science": 5}, default_limit=5),
        config=Config(),
        segmenter=lambda text: text.split(),
    )


@pytest.fixture
def client():
    service = _build_service(
        [
            _StaticAdapter("wire", ["Rocket launch succeeds", "Markets calm"]),
            _StaticAdapter("board", ["Rocket launch succeeds!", "Space station photos"]),
            _StaticAdapter("tube", error=AdapterError("HTTP_STATUS", "Tube returned HTTP 502")),
        ]
    )
    return TestClient(create_app(service))


class TestHealth:
    def test_healthy(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["enabled_platforms"] == 3
        assert data["registered_adapters"] == 3
        assert data["missing_adapters"] == []

    def test_degraded_when_adapter_missing(self):
        service = _build_service([_StaticAdapter("wire", ["a"])])
        resp = TestClient(create_app(service)).get("/health")
        data = resp.json()
        assert data["status"] == "degraded"
        assert data["missing_adapters"] == ["board", "tube"]


class TestHot:
    def test_partial_success_payload(self, client):
        resp = client.get("/api/v1/hot")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "partial"
        assert data["count"] == 4
        assert [i["source_id"] for i in data["items"]] == ["wire", "wire", "board", "board"]
        assert data["failures"] == {"tube": "HTTP_STATUS: Tube returned HTTP 502"}
        statuses = {o["source_id"]: o["status"] for o in data["outcomes"]}
        assert statuses == {"wire": "success", "board": "success", "tube": "failed"}

    def test_item_fields(self, client):
        item = client.get("/api/v1/hot", params={"platforms": "w"}).json()["items"][0]
        assert item["id"] == "wire_1"
        assert item["hot_display"] == "1.2万"
        assert item["rank"] == 1

    def test_limit_and_platform_filter(self, client):
        data = client.get("/api/v1/hot", params={"platforms": "b,w", "limit": 3}).json()
        assert data["count"] == 3
        assert [o["source_id"] for o in data["outcomes"]] == ["wire", "board"]

    def test_repeated_platform_params(self, client):
        resp = client.get("/api/v1/hot?platforms=tube&platforms=b")
        data = resp.json()
        assert [o["source_id"] for o in data["outcomes"]] == ["board", "tube"]
        assert data["status"] == "partial"

    def test_negative_limit_rejected(self, client):
        assert client.get("/api/v1/hot", params={"limit": -1}).status_code == 422


class TestSearch:
    def test_search(self, client):
        data = client.get("/api/v1/search", params={"q": "rocket launch"}).json()
        assert data["query"] == "rocket launch"
        assert [i["id"] for i in data["items"]] == ["wire_1", "board_1"]

    def test_blank_query(self, client):
        data = client.get("/api/v1/search", params={"q": " "}).json()
        assert data["count"] == 0
        assert data["outcomes"] == []


class TestSummary:
    def test_summary_merges_duplicates(self, client):
        data = client.get("/api/v1/summary", params={"top_n": 2}).json()
        assert data["total_analyzed"] == 4
        assert len(data["headlines"]) == 2
        top = data["headlines"][0]
        assert top["title"] == "Rocket launch succeeds"
        assert top["sources"] == ["Wire", "Board"]
        assert top["source_count"] == 2
        assert data["platform_distribution"] == {"wire": 2, "board": 2}
        assert "tube" in data["failures"]


class TestCategories:
    def test_single_category(self, client):
        data = client.get("/api/v1/categories/news", params={"category": "science"}).json()
        assert data["mode"] == "single_category"
        assert data["category_name"] == "Science"
        assert data["count"] >= 2

    def test_unknown_category_404(self, client):
        resp = client.get("/api/v1/categories/news", params={"category": "cooking"})
        assert resp.status_code == 404
        assert resp.json()["detail"]["available"] == ["science"]

    def test_mixed(self, client):
        data = client.get("/api/v1/categories/news").json()
        assert data["mode"] == "mixed_by_preference"
        assert data["weights"] == {"science": 5}
        assert data["count"] == 4


class TestTrendingAndPlatforms:
    def test_trending(self, client):
        data = client.get("/api/v1/trending").json()
        keywords = [t["keyword"] for t in data["topics"]]
        assert "ROCKET" in keywords

    def test_platforms(self, client):
        data = client.get("/api/v1/platforms").json()
        assert data["count"] == 3
        assert [p["id"] for p in data["platforms"]] == ["wire", "board", "tube"]
        assert data["platforms"][0]["categories"] == ["Science"]
        assert data["platforms"][0]["description"] == "Newswire"

    def test_platforms_hide_disabled(self):
        service = _build_service([_StaticAdapter("wire")], enabled_tube=False)
        client = TestClient(create_app(service))
        assert [p["id"] for p in client.get("/api/v1/platforms").json()["platforms"]] == [
            "wire",
            "board",
        ]
        all_data = client.get("/api/v1/platforms", params={"include_disabled": "true"}).json()
        assert all_data["count"] == 3


class TestShutdown:
    def test_crawling_endpoint_returns_503_after_shutdown(self, client):
        client.app.state.service.shutdown()

        resp = client.get("/api/v1/hot")
        assert resp.status_code == 503
        assert resp.json()["error_type"] == "cancelled"
        assert client.get("/api/v1/platforms").status_code == 200
