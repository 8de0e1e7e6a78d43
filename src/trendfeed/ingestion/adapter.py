"""Source adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from trendfeed.errors import AdapterError
from trendfeed.ingestion.items import Item

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    Every adapter knows how to fetch and parse the trending list of one
    platform. The rest of the system is source-agnostic: it only sees ``id``,
    ``name`` and ``fetch()``.

    ``fetch()`` raises on any unrecoverable condition rather than returning
    an empty list, so that the orchestrator can tell a failing source from a
    quiet one.
    """

    def __init__(self, http_timeout: float = 15.0) -> None:
        self._http_timeout = http_timeout

    @property
    @abstractmethod
    def id(self) -> str:
        """Canonical platform id."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable platform name."""

    @abstractmethod
    def fetch(self) -> list[Item]:
        """Fetch the current trending list."""

    def _get(self, url: str, headers: dict[str, str] | None = None, **kwargs) -> httpx.Response:
        """GET ``url`` with browser-like headers, raising AdapterError on failure."""
        merged = {"User-Agent": USER_AGENT}
        if headers:
            merged.update(headers)
        try:
            resp = httpx.get(
                url,
                headers=merged,
                timeout=self._http_timeout,
                follow_redirects=True,
                **kwargs,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise AdapterError(
                "HTTP_STATUS", f"{self.name} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise AdapterError("HTTP_ERROR", f"{self.name} request failed: {exc}") from exc
        return resp

    def _get_json(self, url: str, headers: dict[str, str] | None = None, **kwargs) -> dict:
        resp = self._get(url, headers=headers, **kwargs)
        try:
            data = resp.json()
        except ValueError as exc:
            raise AdapterError("PARSE_ERROR", f"{self.name} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise AdapterError("PARSE_ERROR", f"{self.name} returned unexpected JSON shape")
        return data
