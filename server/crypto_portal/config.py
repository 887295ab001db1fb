"""
Crypto Portal Configuration

Centralized configuration for the portal service.
All environment variables MUST be read here. No os.getenv() calls allowed elsewhere.

Settings are built once at startup by load_settings() and handed to the
provider client and web layer explicitly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _require_env(name: str, description: str) -> str:
    """Get a required environment variable or raise ConfigurationError."""
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(
            f"Missing required environment variable: {name}\n"
            f"Description: {description}\n"
            f"Please set this in your .env file or environment."
        )
    return value


def _optional_env(name: str, default: str = "") -> str:
    """Get an optional environment variable with a default."""
    return os.environ.get(name, default)


def _optional_env_int(name: str, default: int) -> int:
    """Get an optional integer environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {name}: {value}")


def _optional_env_float(name: str, default: float) -> float:
    """Get an optional float environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid float value for {name}: {value}")


@dataclass(frozen=True)
class NewsDataConfig:
    """newsdata.io news provider configuration."""
    api_key: str = field(repr=False)
    base_url: str = "https://newsdata.io/api/1"
    category: str = "business"
    language: str = "en"


@dataclass(frozen=True)
class CoinMarketCapConfig:
    """CoinMarketCap market-data provider configuration."""
    api_key: str = field(repr=False)
    base_url: str = "https://pro-api.coinmarketcap.com/v1"
    listing_limit: int = 12

    def __post_init__(self) -> None:
        if self.listing_limit <= 0:
            raise ConfigurationError(
                f"listing_limit must be positive, got {self.listing_limit}"
            )


@dataclass(frozen=True)
class UpstreamConfig:
    """Outbound HTTP behaviour shared by both providers."""
    timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )


@dataclass(frozen=True)
class HttpServerConfig:
    """HTTP listener configuration."""
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class PagesConfig:
    """Where page templates and static assets live on disk."""
    static_dir: str = "./static"
    template_dir: str = "./static"


@dataclass(frozen=True)
class Settings:
    """Root configuration container."""
    newsdata: NewsDataConfig
    coinmarketcap: CoinMarketCapConfig
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    http_server: HttpServerConfig = field(default_factory=HttpServerConfig)
    pages: PagesConfig = field(default_factory=PagesConfig)


def load_settings() -> Settings:
    """
    Load all settings from environment variables.

    Both provider credentials are required. A missing key fails here, at
    startup, instead of surfacing later as a rejected upstream request.

    Raises:
        ConfigurationError: If a credential is missing or a value is invalid
    """
    newsdata = NewsDataConfig(
        api_key=_require_env("NEWSDATA_API_KEY", "newsdata.io API key for the news pages"),
        base_url=_optional_env("NEWSDATA_BASE_URL", "https://newsdata.io/api/1"),
    )

    coinmarketcap = CoinMarketCapConfig(
        api_key=_require_env("CMC_API_KEY", "CoinMarketCap API key for the info and prices pages"),
        base_url=_optional_env("CMC_BASE_URL", "https://pro-api.coinmarketcap.com/v1"),
        listing_limit=_optional_env_int("CMC_LISTING_LIMIT", 12),
    )

    upstream = UpstreamConfig(
        timeout_seconds=_optional_env_float("UPSTREAM_TIMEOUT_SECONDS", 10.0),
    )

    http_server = HttpServerConfig(
        host=_optional_env("PORTAL_HOST", "127.0.0.1"),
        port=_optional_env_int("PORTAL_PORT", 8080),
    )

    static_dir = _optional_env("PORTAL_STATIC_DIR", "./static")
    pages = PagesConfig(
        static_dir=static_dir,
        template_dir=_optional_env("PORTAL_TEMPLATE_DIR", static_dir),
    )

    return Settings(
        newsdata=newsdata,
        coinmarketcap=coinmarketcap,
        upstream=upstream,
        http_server=http_server,
        pages=pages,
    )
