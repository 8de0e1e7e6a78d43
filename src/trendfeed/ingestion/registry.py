"""Source registry: maps canonical platform ids to adapter instances."""

from __future__ import annotations

from collections.abc import Iterable

from trendfeed.ingestion.adapter import SourceAdapter


class SourceRegistry:
    """The set of adapters the orchestrator can actually execute.

    Populated once at startup and read-only afterwards, so lookups are safe
    from any number of concurrent crawls.
    """

    def __init__(self, adapters: Iterable[SourceAdapter] = ()) -> None:
        self._adapters: dict[str, SourceAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: SourceAdapter) -> None:
        """Register an adapter under its id. Raises ValueError on duplicates."""
        if adapter.id in self._adapters:
            raise ValueError(f"Adapter already registered for '{adapter.id}'")
        self._adapters[adapter.id] = adapter

    def get(self, platform_id: str) -> SourceAdapter | None:
        """Look up an adapter by canonical id. Returns None if not found."""
        return self._adapters.get(platform_id)

    def ids(self) -> frozenset[str]:
        return frozenset(self._adapters)

    def adapters(self) -> list[SourceAdapter]:
        return list(self._adapters.values())

    def __contains__(self, platform_id: object) -> bool:
        return platform_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
