"""Item produced by source adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Item:
    """A single trending entry from one source.

    ``id`` is prefixed by the source id so it is unique across sources.
    ``rank`` is 1-based and local to the source. ``hot_score`` is 0 when the
    source exposes no numeric popularity signal.
    """

    id: str
    title: str
    url: str
    source_id: str
    source_name: str
    rank: int
    hot_score: int = 0
    hot_description: str = ""
    tag: str | None = None
    fetched_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.hot_score < 0:
            raise ValueError(f"hot_score must be non-negative, got {self.hot_score}")


def make_item_id(source_id: str, local_id: object) -> str:
    """Build a globally unique item id from a source id and source-local id."""
    return f"{source_id}_{local_id}"


def format_hot_score(score: int) -> str:
    """Render a popularity count compactly (亿 = 1e8, 万 = 1e4)."""
    if score >= 100_000_000:
        return f"{score / 100_000_000:.1f}亿"
    if score >= 10_000:
        return f"{score / 10_000:.1f}万"
    return str(score)
