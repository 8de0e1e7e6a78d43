"""Platform, category, and preference overrides loaded from JSON files."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from trendfeed.config import Config

logger = logging.getLogger(__name__)

_DEFAULT_PRIORITY = 50
_MIN_WEIGHT = 0
_MAX_WEIGHT = 5


@dataclass(frozen=True)
class PriorityInfo:
    """Enablement and priority override for one platform."""

    id: str
    enabled: bool = True
    priority: int = _DEFAULT_PRIORITY
    description: str = ""


@dataclass(frozen=True)
class PlatformOverrides:
    """Contents of the platform override file."""

    default_platform_count: int = 0
    platforms: dict[str, PriorityInfo] = field(default_factory=dict)

    def get(self, platform_id: str) -> PriorityInfo | None:
        return self.platforms.get(platform_id)


@dataclass(frozen=True)
class CategoryInfo:
    """An interest category: matching keywords and per-platform weights (0-5)."""

    id: str
    name: str
    keywords: tuple[str, ...] = ()
    platform_weights: dict[str, int] = field(default_factory=dict)

    def weight(self, platform_id: str) -> int:
        return self.platform_weights.get(platform_id, 0)


@dataclass(frozen=True)
class Preferences:
    """User interest weights per category and the default result size."""

    category_weights: dict[str, int] = field(default_factory=dict)
    default_limit: int = 30


def clamp_weight(value: object) -> int:
    """Coerce a config value to an int weight in [0, 5]. Non-numbers become 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(_MIN_WEIGHT, min(_MAX_WEIGHT, int(value)))


def _read_json(path: str | Path) -> dict | None:
    """Read a JSON object from disk. Returns None if the file does not exist."""
    p = Path(path)
    if not p.is_file():
        return None
    try:
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed JSON in {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at the top level of {p}")
    return data


def parse_platform_overrides(data: dict) -> PlatformOverrides:
    """Build PlatformOverrides from a parsed JSON document."""
    count = data.get("default_platform_count", 0)
    if isinstance(count, bool) or not isinstance(count, int):
        count = 0

    platforms: dict[str, PriorityInfo] = {}
    for platform_id, entry in (data.get("platforms") or {}).items():
        entry = entry if isinstance(entry, dict) else {}
        enabled = entry.get("enabled", True)
        priority = entry.get("priority", _DEFAULT_PRIORITY)
        description = entry.get("description", platform_id)
        platforms[platform_id] = PriorityInfo(
            id=platform_id,
            enabled=enabled if isinstance(enabled, bool) else True,
            priority=priority if isinstance(priority, int) and not isinstance(priority, bool)
            else _DEFAULT_PRIORITY,
            description=description if isinstance(description, str) else platform_id,
        )
    return PlatformOverrides(default_platform_count=count, platforms=platforms)


def load_platform_overrides(path: str | Path) -> PlatformOverrides:
    """Load platform enablement/priority overrides.

    A missing file yields empty overrides: every platform enabled at
    priority 0.
    """
    data = _read_json(path)
    if data is None:
        logger.warning("Platform override file %s not found; using built-in defaults", path)
        return PlatformOverrides()
    overrides = parse_platform_overrides(data)
    logger.info(
        "Loaded %d platform overrides (default_platform_count=%s)",
        len(overrides.platforms),
        overrides.default_platform_count or "all",
    )
    return overrides


_DEFAULT_CATEGORIES = (
    CategoryInfo(
        id="ai",
        name="AI",
        keywords=("ai", "人工智能", "大模型", "llm", "openai", "gpt"),
        platform_weights={"hacker_news": 5, "techcrunch": 4, "zhihu": 3},
    ),
    CategoryInfo(
        id="world",
        name="World",
        keywords=("war", "election", "president", "国际", "外交"),
        platform_weights={"bbc": 5, "guardian": 5, "google_news": 4, "reddit": 3},
    ),
    CategoryInfo(
        id="tech",
        name="Tech",
        keywords=("科技", "互联网", "ai", "人工智能", "startup", "software"),
        platform_weights={"techcrunch": 5, "hacker_news": 5, "zhihu": 4, "bilibili": 3},
    ),
    CategoryInfo(
        id="finance",
        name="Finance",
        keywords=("股票", "基金", "经济", "金融", "market", "stocks"),
        platform_weights={"google_news": 4, "reddit": 2, "weibo": 2},
    ),
    CategoryInfo(
        id="entertainment",
        name="Entertainment",
        keywords=("明星", "电影", "综艺", "film", "music"),
        platform_weights={"weibo": 5, "bilibili": 4},
    ),
    CategoryInfo(
        id="sports",
        name="Sports",
        keywords=("足球", "篮球", "nba", "世界杯", "football", "olympics"),
        platform_weights={"weibo": 4, "bbc": 3, "reddit": 2},
    ),
    CategoryInfo(
        id="society",
        name="Society",
        keywords=("社会", "教育", "医疗", "警方", "民生"),
        platform_weights={"weibo": 4, "zhihu": 4},
    ),
)


def parse_categories(data: dict) -> dict[str, CategoryInfo]:
    categories: dict[str, CategoryInfo] = {}
    for category_id, entry in (data.get("categories") or {}).items():
        entry = entry if isinstance(entry, dict) else {}
        keywords = tuple(str(k).lower() for k in entry.get("keywords") or [])
        weights = {
            str(pid): clamp_weight(w) for pid, w in (entry.get("platforms") or {}).items()
        }
        categories[category_id] = CategoryInfo(
            id=category_id,
            name=str(entry.get("name", category_id)),
            keywords=keywords,
            platform_weights=weights,
        )
    return categories


def load_categories(path: str | Path) -> dict[str, CategoryInfo]:
    """Load category definitions, falling back to built-in defaults."""
    data = _read_json(path)
    if data is None:
        logger.warning("Category file %s not found; using built-in defaults", path)
        return {c.id: c for c in _DEFAULT_CATEGORIES}
    categories = parse_categories(data)
    logger.info("Loaded %d categories", len(categories))
    return categories


_DEFAULT_WEIGHTS = {
    "ai": 5,
    "tech": 4,
    "finance": 3,
    "entertainment": 2,
    "sports": 1,
    "world": 3,
    "society": 2,
}


def parse_preferences(data: dict) -> Preferences:
    weights = {str(k): clamp_weight(v) for k, v in (data.get("category_weights") or {}).items()}
    default_limit = data.get("default_limit", 30)
    if isinstance(default_limit, bool) or not isinstance(default_limit, int):
        default_limit = 30
    return Preferences(category_weights=weights, default_limit=default_limit)


def load_preferences(path: str | Path) -> Preferences:
    """Load category preference weights, falling back to built-in defaults."""
    data = _read_json(path)
    if data is None:
        logger.warning("Preferences file %s not found; using built-in defaults", path)
        return Preferences(category_weights=dict(_DEFAULT_WEIGHTS))
    prefs = parse_preferences(data)
    logger.info("Loaded %d category preference weights", len(prefs.category_weights))
    return prefs


class OverrideProvider:
    """Reads the three override files and hands out the current snapshot.

    ``reload()`` re-reads every file and replaces all three tables under a
    lock; readers always get a consistent set.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._lock = threading.Lock()
        self._platforms = PlatformOverrides()
        self._categories: dict[str, CategoryInfo] = {}
        self._preferences = Preferences()
        self.reload()

    def reload(self) -> None:
        platforms = load_platform_overrides(self._config.platforms_config_path)
        categories = load_categories(self._config.categories_config_path)
        preferences = load_preferences(self._config.preferences_config_path)
        with self._lock:
            self._platforms = platforms
            self._categories = categories
            self._preferences = preferences

    @property
    def platforms(self) -> PlatformOverrides:
        with self._lock:
            return self._platforms

    @property
    def categories(self) -> dict[str, CategoryInfo]:
        with self._lock:
            return self._categories

    @property
    def preferences(self) -> Preferences:
        with self._lock:
            return self._preferences
