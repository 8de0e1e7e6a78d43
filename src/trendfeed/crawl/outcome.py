"""Per-source crawl outcomes and the merged aggregation result."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from trendfeed.ingestion.items import Item


class CrawlStatus(str, enum.Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class CrawlOutcome:
    """Result of one source in one crawl run.

    EMPTY is a successful call that produced nothing; only FAILED and TIMEOUT
    count as failures.
    """

    source_id: str
    source_name: str
    status: CrawlStatus
    items: tuple[Item, ...] = ()
    error_code: str | None = None
    error_message: str | None = None
    latency_ms: int = 0

    @property
    def is_failure(self) -> bool:
        return self.status in (CrawlStatus.FAILED, CrawlStatus.TIMEOUT)

    @property
    def failure_summary(self) -> str:
        return f"{self.error_code}: {self.error_message}"


@dataclass(frozen=True)
class AggregatedResult:
    """Merged output of a crawl: items in dispatch order plus a failure ledger."""

    items: list[Item] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    outcomes: list[CrawlOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: list[CrawlOutcome]) -> AggregatedResult:
        items: list[Item] = []
        failures: dict[str, str] = {}
        for outcome in outcomes:
            if outcome.is_failure:
                failures[outcome.source_id] = outcome.failure_summary
            else:
                items.extend(outcome.items)
        return cls(items=items, failures=failures, outcomes=list(outcomes))

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    @property
    def is_partial_success(self) -> bool:
        return bool(self.failures) and bool(self.items)

    @property
    def is_total_failure(self) -> bool:
        """No items although at least one source was attempted.

        Use ``status`` to tell a quiet run (``empty``) from one where no
        source could be reached (``unavailable``).
        """
        return not self.items and bool(self.outcomes)

    @property
    def status(self) -> str:
        """``ok``, ``partial``, ``empty`` (reachable but nothing to show) or ``unavailable``."""
        if self.items:
            return "partial" if self.failures else "ok"
        if self.outcomes and all(o.is_failure for o in self.outcomes):
            return "unavailable"
        return "empty"

    def with_items(self, items: list[Item]) -> AggregatedResult:
        """Same failure ledger and outcomes, different item view (after ranking)."""
        return AggregatedResult(items=list(items), failures=self.failures, outcomes=self.outcomes)
