"""Near-duplicate headline clustering across sources.

Greedy single pass: each item joins the first existing cluster whose
representative title is similar enough, else starts a new cluster. The cost
is O(n·k) for n items and k clusters.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field

from trendfeed.ingestion.items import Item

SIMILARITY_THRESHOLD = 0.6
DEFAULT_SUMMARY_SIZE = 10


def title_char_set(title: str) -> frozenset[str]:
    """Lowercase letters and digits of ``title`` (any script), as a set."""
    text = unicodedata.normalize("NFC", title).lower()
    return frozenset(ch for ch in text if ch.isalnum())


def jaccard_similarity(title1: str, title2: str) -> float:
    """Jaccard similarity of the two titles' character sets, in [0, 1].

    Returns 0.0 when either title has no letters or digits, including when
    both have none: two punctuation-only titles have equal (empty) sets yet
    score 0.0, the one case where identical sets do not score 1.0.
    """
    s1 = title_char_set(title1)
    s2 = title_char_set(title2)
    if not s1 or not s2:
        return 0.0
    return len(s1 & s2) / len(s1 | s2)


@dataclass
class NewsCluster:
    """Items judged to be the same story. Representative fields come from the first item."""

    representative_title: str
    representative_url: str
    source_names: list[str] = field(default_factory=list)
    total_hot_score: int = 0
    item_count: int = 0

    @property
    def source_count(self) -> int:
        return len(self.source_names)

    def add(self, item: Item) -> None:
        source = item.source_name or item.source_id
        if source not in self.source_names:
            self.source_names.append(source)
        self.total_hot_score += item.hot_score
        self.item_count += 1


def cluster_items(items: list[Item], threshold: float = SIMILARITY_THRESHOLD) -> list[NewsCluster]:
    """Group items into clusters in input order.

    Blank titles are skipped. Titles with no letters or digits are kept but
    never join a cluster, not even one led by an identical title; each
    becomes a singleton.
    """
    clusters: list[NewsCluster] = []
    for item in items:
        if not item.title or not item.title.strip():
            continue
        match = next(
            (
                c
                for c in clusters
                if jaccard_similarity(item.title, c.representative_title) > threshold
            ),
            None,
        )
        if match is None:
            match = NewsCluster(representative_title=item.title, representative_url=item.url)
            clusters.append(match)
        match.add(item)
    return clusters


def cluster_and_rank(items: list[Item], limit: int = DEFAULT_SUMMARY_SIZE) -> list[NewsCluster]:
    """Clusters ordered by source coverage, then total hot score; at most ``limit``."""
    clusters = cluster_items(items)
    clusters.sort(key=lambda c: (c.source_count, c.total_hot_score), reverse=True)
    effective_limit = limit if limit > 0 else DEFAULT_SUMMARY_SIZE
    return clusters[:effective_limit]
