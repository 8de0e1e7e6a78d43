"""Ingestion: source adapters and the registry that holds them."""

from __future__ import annotations

from trendfeed.ingestion.adapter import SourceAdapter
from trendfeed.ingestion.bilibili_adapter import BilibiliAdapter
from trendfeed.ingestion.reddit_adapter import RedditAdapter
from trendfeed.ingestion.registry import SourceRegistry
from trendfeed.ingestion.rss_adapter import HackerNewsAdapter, RSSAdapter
from trendfeed.ingestion.weibo_adapter import WeiboAdapter
from trendfeed.ingestion.zhihu_adapter import ZhihuAdapter

_FEEDS = (
    ("bbc", "BBC", "https://feeds.bbci.co.uk/news/rss.xml"),
    ("guardian", "The Guardian", "https://www.theguardian.com/world/rss"),
    ("techcrunch", "TechCrunch", "https://techcrunch.com/feed/"),
    ("google_news", "Google News", "https://news.google.com/rss?hl=en-US&gl=US&ceid=US:en"),
)


def build_default_adapters(http_timeout: float = 15.0) -> list[SourceAdapter]:
    """Instantiate every shipped adapter."""
    adapters: list[SourceAdapter] = [
        ZhihuAdapter(http_timeout=http_timeout),
        WeiboAdapter(http_timeout=http_timeout),
        BilibiliAdapter(http_timeout=http_timeout),
        RedditAdapter(http_timeout=http_timeout),
        HackerNewsAdapter(http_timeout=http_timeout),
    ]
    for platform_id, name, url in _FEEDS:
        adapters.append(RSSAdapter(platform_id, name, url, http_timeout=http_timeout))
    return adapters


def build_source_registry(http_timeout: float = 15.0) -> SourceRegistry:
    return SourceRegistry(build_default_adapters(http_timeout))
