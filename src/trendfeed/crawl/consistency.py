"""Startup check that every enabled platform has an adapter."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from trendfeed.errors import RegistryConsistencyError
from trendfeed.ingestion.registry import SourceRegistry
from trendfeed.platforms import PlatformRegistry

logger = logging.getLogger(__name__)


def find_missing_registrations(
    enabled_ids: Iterable[str], registered_ids: Iterable[str]
) -> list[str]:
    """Return enabled ids with no registered adapter, sorted."""
    registered = set(registered_ids)
    return sorted({pid for pid in enabled_ids if pid not in registered})


def enforce_registry_consistency(missing: list[str], strict: bool) -> None:
    """Raise in strict mode; otherwise log and let those platforms drop out of crawls."""
    if not missing:
        return
    if strict:
        raise RegistryConsistencyError(missing)
    logger.warning(
        "Enabled platforms without a registered adapter will be skipped: %s",
        ", ".join(missing),
    )


def check_registry_consistency(
    platforms: PlatformRegistry, sources: SourceRegistry, strict: bool = False
) -> list[str]:
    """Run the full check and return the sorted list of missing ids."""
    missing = find_missing_registrations(platforms.ordered_enabled_ids(), sources.ids())
    enforce_registry_consistency(missing, strict)
    return missing
