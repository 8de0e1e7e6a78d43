"""Application entry point: wires registries, orchestrator and service, then serves the API."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn

from trendfeed.config import Config, load_config
from trendfeed.crawl.orchestrator import CrawlOrchestrator
from trendfeed.ingestion import build_source_registry
from trendfeed.overrides import OverrideProvider
from trendfeed.platforms import PlatformRegistry
from trendfeed.service import AggregationService
from trendfeed.web.app import create_app

logger = logging.getLogger("trendfeed")


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps(
                {
                    "time": "%(asctime)s",
                    "level": "%(levelname)s",
                    "logger": "%(name)s",
                    "message": "%(message)s",
                }
            )
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # jieba prints its dictionary-loading chatter at DEBUG/INFO
    logging.getLogger("jieba").setLevel(logging.WARNING)


def build_service(config: Config) -> AggregationService:
    """Assemble the object graph for one process."""
    provider = OverrideProvider(config)
    platforms = PlatformRegistry(provider.platforms)
    sources = build_source_registry(http_timeout=config.http_timeout_seconds)
    orchestrator = CrawlOrchestrator(
        platforms,
        sources,
        timeout_seconds=config.crawl_timeout_seconds,
    )
    return AggregationService(
        platforms,
        sources,
        orchestrator,
        categories=provider.categories,
        preferences=provider.preferences,
        config=config,
    )


def make_lifespan(service: AggregationService):
    """App lifespan that cancels in-flight crawls once the server stops."""

    @asynccontextmanager
    async def lifespan(app):
        logger.info("Serving %d sources", len(service.sources))
        yield
        logger.info("Trendfeed shutting down")
        service.shutdown()

    return lifespan


def main() -> None:
    """Load config, set up logging, and start the web server."""
    config = load_config()
    _setup_logging(config.log_level, config.log_format)

    logger.info(
        "Trendfeed starting (env=%s, timeout=%ss, strict_registry=%s)",
        config.app_env,
        config.crawl_timeout_seconds,
        config.strict_registry,
    )

    service = build_service(config)
    if service.missing_adapters:
        logger.warning("Running degraded; no adapter for: %s", ", ".join(service.missing_adapters))

    app = create_app(service, lifespan=make_lifespan(service))

    uvicorn.run(app, host=config.web_host, port=config.web_port)


if __name__ == "__main__":
    main()
