"""Concurrent fan-out crawl with per-source isolation.

Every dispatched source runs in its own worker thread. Results are collected
in dispatch order against a single deadline (dispatch time + timeout), so a
slow or crashing source can neither block nor poison the others, and a whole
``crawl()`` returns within roughly ``timeout`` however many sources hang.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass

from trendfeed.crawl.outcome import AggregatedResult, CrawlOutcome, CrawlStatus
from trendfeed.errors import AdapterError, CrawlCancelled
from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.items import Item
from trendfeed.ingestion.registry import SourceRegistry
from trendfeed.platforms import PlatformRegistry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 45.0
_CANCEL_POLL_SECONDS = 0.1


@dataclass(frozen=True)
class _FetchResult:
    items: list[Item] | None
    error: Exception | None
    latency_ms: int


def _run_fetch(adapter: SourceAdapter) -> _FetchResult:
    """Worker body. Captures adapter errors instead of raising them."""
    started = time.monotonic()
    try:
        items = adapter.fetch()
    except Exception as exc:
        return _FetchResult(None, exc, _elapsed_ms(started))
    return _FetchResult(list(items) if items is not None else [], None, _elapsed_ms(started))


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, AdapterError):
        return exc.code
    return type(exc).__name__


def _error_message(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


class CrawlOrchestrator:
    """Dispatches one fetch per source and merges the outcomes.

    Per-source errors and timeouts are recorded in the result, never raised.
    The only exception ``crawl()`` propagates is a caller-side cancellation
    (``CrawlCancelled`` via ``cancel_event``, or an interrupt while waiting).
    """

    def __init__(
        self,
        platforms: PlatformRegistry,
        sources: SourceRegistry,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._platforms = platforms
        self._sources = sources
        self._timeout = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def crawl(
        self,
        ordered_ids: Iterable[str],
        cancel_event: threading.Event | None = None,
    ) -> AggregatedResult:
        """Fetch every id that has an adapter; ids without one are skipped silently."""
        dispatch: list[tuple[str, SourceAdapter]] = []
        seen: set[str] = set()
        for platform_id in ordered_ids:
            if platform_id in seen:
                continue
            seen.add(platform_id)
            adapter = self._sources.get(platform_id)
            if adapter is None:
                logger.debug("No adapter for '%s'; not dispatched", platform_id)
                continue
            dispatch.append((platform_id, adapter))

        if not dispatch:
            return AggregatedResult()

        logger.info(
            "Crawling %d sources: %s", len(dispatch), ", ".join(pid for pid, _ in dispatch)
        )

        # Every fetch starts at dispatch time; none may queue behind a hung source
        executor = ThreadPoolExecutor(max_workers=len(dispatch), thread_name_prefix="crawl")

        started = time.monotonic()
        deadline = started + self._timeout
        futures = [
            (platform_id, executor.submit(_run_fetch, adapter))
            for platform_id, adapter in dispatch
        ]

        outcomes: list[CrawlOutcome] = []
        try:
            for platform_id, future in futures:
                outcomes.append(
                    self._collect(platform_id, future, started, deadline, cancel_event)
                )
        except BaseException:
            for _, future in futures:
                future.cancel()
            raise
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        result = AggregatedResult.from_outcomes(outcomes)
        logger.info(
            "Crawl finished in %dms: %d items, %d failures",
            _elapsed_ms(started),
            len(result.items),
            len(result.failures),
        )
        return result

    def _collect(
        self,
        platform_id: str,
        future: Future,
        started: float,
        deadline: float,
        cancel_event: threading.Event | None,
    ) -> CrawlOutcome:
        """Wait for one unit until the shared deadline and classify it."""
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise CrawlCancelled("Crawl cancelled by caller")
            if future.done():
                return self._classify(platform_id, future.result())

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                future.cancel()
                return self._timeout_outcome(platform_id, _elapsed_ms(started))

            wait_for = remaining
            if cancel_event is not None:
                wait_for = min(remaining, _CANCEL_POLL_SECONDS)
            try:
                return self._classify(platform_id, future.result(timeout=wait_for))
            except FuturesTimeoutError:
                continue

    def _classify(self, platform_id: str, result: _FetchResult) -> CrawlOutcome:
        name = self._platforms.name(platform_id)
        if result.error is not None:
            outcome = CrawlOutcome(
                source_id=platform_id,
                source_name=name,
                status=CrawlStatus.FAILED,
                error_code=_error_code(result.error),
                error_message=_error_message(result.error),
                latency_ms=result.latency_ms,
            )
            logger.warning(
                "[%s] fetch failed after %dms: %s",
                platform_id,
                result.latency_ms,
                outcome.failure_summary,
            )
            return outcome

        items = result.items or []
        status = CrawlStatus.SUCCESS if items else CrawlStatus.EMPTY
        if status is CrawlStatus.EMPTY:
            logger.info("[%s] fetch returned no items (%dms)", platform_id, result.latency_ms)
        else:
            logger.info(
                "[%s] fetched %d items (%dms)", platform_id, len(items), result.latency_ms
            )
        return CrawlOutcome(
            source_id=platform_id,
            source_name=name,
            status=status,
            items=tuple(items),
            latency_ms=result.latency_ms,
        )

    def _timeout_outcome(self, platform_id: str, latency_ms: int) -> CrawlOutcome:
        logger.warning("[%s] no response within %ss; abandoned", platform_id, self._timeout)
        return CrawlOutcome(
            source_id=platform_id,
            source_name=self._platforms.name(platform_id),
            status=CrawlStatus.TIMEOUT,
            error_code="TIMEOUT",
            error_message=f"no response within {self._timeout:g}s",
            latency_ms=latency_ms,
        )
