"""Ranking and deduplication views over crawled items."""

from trendfeed.ranking.allocation import allocate_by_category_weights
from trendfeed.ranking.cluster import NewsCluster, cluster_and_rank
from trendfeed.ranking.search import rank_by_search

__all__ = [
    "NewsCluster",
    "allocate_by_category_weights",
    "cluster_and_rank",
    "rank_by_search",
]
