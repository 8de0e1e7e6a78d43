"""Crawl orchestration: concurrent fan-out and the registry consistency check."""

from trendfeed.crawl.consistency import check_registry_consistency
from trendfeed.crawl.orchestrator import CrawlOrchestrator
from trendfeed.crawl.outcome import AggregatedResult, CrawlOutcome, CrawlStatus

__all__ = [
    "AggregatedResult",
    "CrawlOrchestrator",
    "CrawlOutcome",
    "CrawlStatus",
    "check_registry_consistency",
]
