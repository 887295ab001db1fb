"""
Shared fixtures for the portal tests.

No test touches the network: providers are AsyncMocks or an in-process
aiohttp fake upstream.
"""
import pytest

from crypto_portal.config import (
    CoinMarketCapConfig,
    NewsDataConfig,
    PagesConfig,
    Settings,
    UpstreamConfig,
)
from crypto_portal.rendering import PageKey

NEWS_KEY = "news-secret-key"
CMC_KEY = "cmc-secret-key"


@pytest.fixture
def template_dir(tmp_path):
    """A directory holding one minimal template per page."""
    for key in PageKey:
        (tmp_path / key.filename).write_text(
            f"<html><body>{key.placeholder}</body></html>", encoding="utf-8"
        )
    return tmp_path


@pytest.fixture
def settings(template_dir) -> Settings:
    return Settings(
        newsdata=NewsDataConfig(api_key=NEWS_KEY),
        coinmarketcap=CoinMarketCapConfig(api_key=CMC_KEY),
        upstream=UpstreamConfig(timeout_seconds=2.0),
        pages=PagesConfig(static_dir=str(template_dir), template_dir=str(template_dir)),
    )
