"""Platform registry: canonical metadata, alias resolution and priority ordering."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from trendfeed.overrides import PlatformOverrides

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformDescriptor:
    """Canonical metadata for one platform. ``aliases`` always contains ``id``."""

    id: str
    name: str
    url: str
    aliases: frozenset[str]
    enabled: bool
    priority: int
    description: str


@dataclass(frozen=True)
class BuiltinPlatform:
    """Static registration entry, before overrides are applied."""

    id: str
    name: str
    url: str
    aliases: tuple[str, ...] = ()


BUILTIN_PLATFORMS = (
    BuiltinPlatform("zhihu", "知乎", "https://www.zhihu.com/hot", ("zh", "Zhihu")),
    BuiltinPlatform("weibo", "微博", "https://weibo.com/ajax/side/hotSearch", ("wb", "Weibo")),
    BuiltinPlatform(
        "bilibili", "B站", "https://www.bilibili.com/v/popular/all", ("bili", "Bilibili", "b站")
    ),
    BuiltinPlatform("google_news", "Google News", "https://news.google.com/", ("google", "googlenews")),
    BuiltinPlatform("reddit", "Reddit", "https://www.reddit.com/r/all/", ("rd",)),
    BuiltinPlatform("bbc", "BBC", "https://www.bbc.com/news", ("bbc_news",)),
    BuiltinPlatform("guardian", "The Guardian", "https://www.theguardian.com/", ("theguardian",)),
    BuiltinPlatform("techcrunch", "TechCrunch", "https://techcrunch.com/", ("tc",)),
    BuiltinPlatform("hacker_news", "Hacker News", "https://news.ycombinator.com/", ("hn", "hackernews")),
)


def _normalize_alias(alias: str) -> str:
    return alias.strip().lower()


@dataclass(frozen=True)
class _Snapshot:
    descriptors: dict[str, PlatformDescriptor]
    alias_to_id: dict[str, str]
    default_platform_count: int


def _build_snapshot(
    builtins: Iterable[BuiltinPlatform], overrides: PlatformOverrides
) -> _Snapshot:
    descriptors: dict[str, PlatformDescriptor] = {}
    alias_to_id: dict[str, str] = {}

    for entry in builtins:
        info = overrides.get(entry.id)
        aliases = {_normalize_alias(a) for a in entry.aliases if a and a.strip()}
        aliases.add(entry.id)
        descriptor = PlatformDescriptor(
            id=entry.id,
            name=entry.name,
            url=entry.url,
            aliases=frozenset(aliases),
            enabled=info.enabled if info is not None else True,
            priority=info.priority if info is not None else 0,
            description=info.description if info is not None else entry.id,
        )
        if entry.id in descriptors:
            raise ValueError(f"Platform '{entry.id}' registered twice")
        for alias in descriptor.aliases:
            owner = alias_to_id.get(alias)
            if owner is not None and owner != entry.id:
                raise ValueError(
                    f"Alias '{alias}' maps to both '{owner}' and '{entry.id}'"
                )
            alias_to_id[alias] = entry.id
        descriptors[entry.id] = descriptor

    unknown = sorted(set(overrides.platforms) - set(descriptors))
    if unknown:
        logger.warning("Overrides reference unknown platforms: %s", ", ".join(unknown))

    return _Snapshot(descriptors, alias_to_id, overrides.default_platform_count)


def _ordered_enabled(snapshot: _Snapshot) -> list[str]:
    enabled = [d for d in snapshot.descriptors.values() if d.enabled]
    enabled.sort(key=lambda d: (-d.priority, d.id))
    return [d.id for d in enabled]


class PlatformRegistry:
    """Read-mostly table of platform descriptors.

    Unknown ids never raise: they are treated as enabled with priority 0, so a
    mismatch between this table and the adapter registry degrades instead of
    crashing. ``reload()`` swaps in a freshly built snapshot in one
    assignment; concurrent readers see either the old or the new table.
    """

    def __init__(
        self,
        overrides: PlatformOverrides | None = None,
        builtins: Iterable[BuiltinPlatform] = BUILTIN_PLATFORMS,
    ) -> None:
        self._builtins = tuple(builtins)
        self._snapshot = _build_snapshot(self._builtins, overrides or PlatformOverrides())

    def reload(self, overrides: PlatformOverrides) -> None:
        """Rebuild descriptors with new overrides and replace the table atomically."""
        self._snapshot = _build_snapshot(self._builtins, overrides)
        logger.info("Platform registry reloaded (%d platforms)", len(self._snapshot.descriptors))

    def get(self, platform_id: str | None) -> PlatformDescriptor | None:
        if platform_id is None:
            return None
        return self._snapshot.descriptors.get(platform_id)

    def resolve(self, alias_or_id: str | None) -> str | None:
        """Map an alias or id (any case, surrounding spaces allowed) to a canonical id."""
        if alias_or_id is None:
            return None
        return self._snapshot.alias_to_id.get(_normalize_alias(alias_or_id))

    def name(self, platform_id: str) -> str:
        descriptor = self.get(platform_id)
        return descriptor.name if descriptor is not None else platform_id

    def is_enabled(self, platform_id: str) -> bool:
        descriptor = self.get(platform_id)
        return descriptor.enabled if descriptor is not None else True

    def priority(self, platform_id: str) -> int:
        descriptor = self.get(platform_id)
        return descriptor.priority if descriptor is not None else 0

    def all_ids(self) -> list[str]:
        return list(self._snapshot.descriptors)

    def descriptors(self) -> list[PlatformDescriptor]:
        return list(self._snapshot.descriptors.values())

    def ordered_enabled_ids(self) -> list[str]:
        """Enabled ids by priority descending, ties broken by id ascending."""
        return _ordered_enabled(self._snapshot)

    def default_ids(self) -> list[str]:
        """The first ``default_platform_count`` enabled ids (all of them when unset)."""
        snapshot = self._snapshot
        ordered = _ordered_enabled(snapshot)
        count = snapshot.default_platform_count
        if 0 < count < len(ordered):
            return ordered[:count]
        return ordered

    def sort_by_priority(self, platform_ids: Iterable[str]) -> list[str]:
        """De-duplicate ``platform_ids`` and order them like ``ordered_enabled_ids``."""
        return sorted(set(platform_ids), key=lambda pid: (-self.priority(pid), pid))
