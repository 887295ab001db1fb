"""
Provider Module

HTTP client and response normalizers for newsdata.io and CoinMarketCap.
"""
from crypto_portal.providers.client import MARKET_PROVIDER, NEWS_PROVIDER, ProviderClient
from crypto_portal.providers.interface import ProviderAPI
from crypto_portal.providers.normalizer import (
    normalize_coin_info,
    normalize_news,
    normalize_quotes,
)

__all__ = [
    "MARKET_PROVIDER",
    "NEWS_PROVIDER",
    "ProviderAPI",
    "ProviderClient",
    "normalize_coin_info",
    "normalize_news",
    "normalize_quotes",
]
