"""API route handlers for the trendfeed web API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from trendfeed.errors import UnknownCategoryError
from trendfeed.service import AggregationService
from trendfeed.web.models import (
    CategoryNewsResponse,
    ClusterOut,
    ItemListResponse,
    ItemOut,
    OutcomeOut,
    PlatformListResponse,
    PlatformOut,
    SearchResponse,
    SummaryResponse,
    TopicOut,
    TrendingResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()
health_router = APIRouter()


def _service(request: Request) -> AggregationService:
    return request.app.state.service


def _platform_args(platforms: list[str] | None) -> list[str] | None:
    """Accept both repeated `platforms=` params and comma-separated values."""
    if not platforms:
        return None
    return [p.strip() for value in platforms for p in value.split(",") if p.strip()]


@health_router.get("/health")
def health(request: Request) -> JSONResponse:
    """Report whether every enabled platform has an adapter."""
    service = _service(request)
    missing = service.missing_adapters
    enabled = service.platforms.ordered_enabled_ids()
    body = {
        "status": "healthy" if not missing else "degraded",
        "enabled_platforms": len(enabled),
        "registered_adapters": len(service.sources),
        "missing_adapters": missing,
    }
    return JSONResponse(body)


@router.get("/hot", response_model=ItemListResponse)
def hot(
    request: Request,
    platforms: list[str] | None = Query(None),
    limit: int = Query(0, ge=0),
) -> ItemListResponse:
    result = _service(request).hot_news(_platform_args(platforms), limit)
    return ItemListResponse.from_result(result)


@router.get("/search", response_model=SearchResponse)
def search(
    request: Request,
    q: str = "",
    platforms: list[str] | None = Query(None),
    limit: int = Query(0, ge=0),
) -> SearchResponse:
    result = _service(request).search(q, _platform_args(platforms), limit)
    base = ItemListResponse.from_result(result)
    return SearchResponse(query=q, **base.model_dump())


@router.get("/summary", response_model=SummaryResponse)
def summary(request: Request, top_n: int = Query(0, ge=0)) -> SummaryResponse:
    view = _service(request).summary(top_n)
    return SummaryResponse(
        status=view.result.status,
        total_analyzed=view.total_analyzed,
        headlines=[
            ClusterOut(
                title=c.representative_title,
                url=c.representative_url,
                sources=list(c.source_names),
                source_count=c.source_count,
                item_count=c.item_count,
                total_hot_score=c.total_hot_score,
            )
            for c in view.clusters
        ],
        platform_distribution=view.platform_distribution,
        failures=dict(view.result.failures),
        outcomes=[OutcomeOut.from_outcome(o) for o in view.result.outcomes],
    )


@router.get("/categories/news", response_model=CategoryNewsResponse)
def category_news(
    request: Request,
    category: str | None = None,
    limit: int = Query(0, ge=0),
) -> CategoryNewsResponse:
    try:
        view = _service(request).news_by_category(category, limit)
    except UnknownCategoryError as exc:
        logger.info("Unknown category requested: %s", category)
        raise HTTPException(
            status_code=404,
            detail={"error": str(exc), "available": exc.available},
        ) from exc
    return CategoryNewsResponse(
        status=view.status,
        mode=view.mode,
        category_id=view.category_id,
        category_name=view.category_name,
        count=len(view.items),
        items=[ItemOut.from_item(i) for i in view.items],
        distribution=view.distribution,
        weights=view.weights,
        failures=view.failures,
        outcomes=[OutcomeOut.from_outcome(o) for o in view.outcomes],
    )


@router.get("/trending", response_model=TrendingResponse)
def trending(request: Request, top_n: int = Query(0, ge=0)) -> TrendingResponse:
    view = _service(request).trending_topics(top_n)
    return TrendingResponse(
        status=view.result.status,
        topics=[
            TopicOut(
                keyword=t.keyword,
                count=t.count,
                platforms=list(t.platforms),
                trend=t.trend,
                trend_description=t.trend_description,
                related_titles=list(t.related_titles),
            )
            for t in view.topics
        ],
        failures=dict(view.result.failures),
    )


@router.get("/platforms", response_model=PlatformListResponse)
def platform_list(request: Request, include_disabled: bool = False) -> PlatformListResponse:
    infos = _service(request).platform_list(include_disabled)
    return PlatformListResponse(
        count=len(infos),
        platforms=[
            PlatformOut(
                id=p.id,
                name=p.name,
                description=p.description,
                enabled=p.enabled,
                priority=p.priority,
                has_adapter=p.has_adapter,
                aliases=list(p.aliases),
                categories=list(p.categories),
            )
            for p in infos
        ],
    )
