"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # Optional: Override files
    platforms_config_path: str = "./config/platforms.json"
    categories_config_path: str = "./config/categories.json"
    preferences_config_path: str = "./config/preferences.json"

    # Optional: Crawling
    crawl_timeout_seconds: float = 45.0
    http_timeout_seconds: float = 15.0
    strict_registry: bool = False

    # Optional: Views
    default_hot_limit: int = 50
    max_hot_limit: int = 200
    default_search_limit: int = 20
    default_summary_top_n: int = 10
    max_summary_top_n: int = 30

    # Optional: Web
    web_host: str = "0.0.0.0"
    web_port: int = 8080

    # Optional: Application
    log_level: str = "INFO"
    log_format: str = "json"
    app_env: str = "production"


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from None


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from None


def _get_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def load_config(env_path: str | Path | None = None) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development). Every variable is
    optional; malformed numeric values raise ValueError naming the variable.
    """
    load_dotenv(dotenv_path=env_path)

    timeout = _get_float("CRAWL_TIMEOUT_SECONDS", 45.0)
    if timeout <= 0:
        raise ValueError("CRAWL_TIMEOUT_SECONDS must be positive")

    return Config(
        # Optional: Override files
        platforms_config_path=os.environ.get("PLATFORMS_CONFIG_PATH", "./config/platforms.json"),
        categories_config_path=os.environ.get("CATEGORIES_CONFIG_PATH", "./config/categories.json"),
        preferences_config_path=os.environ.get("PREFERENCES_CONFIG_PATH", "./config/preferences.json"),
        # Optional: Crawling
        crawl_timeout_seconds=timeout,
        http_timeout_seconds=_get_float("HTTP_TIMEOUT_SECONDS", 15.0),
        strict_registry=_get_bool("STRICT_REGISTRY", False),
        # Optional: Views
        default_hot_limit=_get_int("DEFAULT_HOT_LIMIT", 50),
        max_hot_limit=_get_int("MAX_HOT_LIMIT", 200),
        default_search_limit=_get_int("DEFAULT_SEARCH_LIMIT", 20),
        default_summary_top_n=_get_int("DEFAULT_SUMMARY_TOP_N", 10),
        max_summary_top_n=_get_int("MAX_SUMMARY_TOP_N", 30),
        # Optional: Web
        web_host=os.environ.get("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 8080),
        # Optional: Application
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
        app_env=os.environ.get("APP_ENV", "production"),
    )
