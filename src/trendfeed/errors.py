"""Exception types shared across the aggregation engine."""

from __future__ import annotations


class TrendfeedError(Exception):
    """Base class for all trendfeed errors."""


class AdapterError(TrendfeedError):
    """A source adapter could not produce items.

    ``code`` is a short machine-readable category (e.g. ``HTTP_ERROR``) that
    ends up as the crawl outcome's error code.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class RegistryConsistencyError(TrendfeedError):
    """Enabled platforms have no registered adapter (strict mode only)."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            f"Enabled platforms without a registered adapter: {', '.join(missing)}"
        )
        self.missing = missing


class CrawlCancelled(TrendfeedError):
    """The caller cancelled an in-progress crawl."""


class UnknownCategoryError(TrendfeedError):
    """A requested category is not configured."""

    def __init__(self, category: str, available: list[str]) -> None:
        super().__init__(f"Unknown category: {category}")
        self.category = category
        self.available = available
