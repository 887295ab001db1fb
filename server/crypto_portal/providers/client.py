"""
Provider HTTP Client

Outbound GET requests to the newsdata.io news API and the CoinMarketCap
market-data API. Returns raw response bytes; decoding is left to the
normalizer.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from crypto_portal.config import CoinMarketCapConfig, NewsDataConfig, Settings, UpstreamConfig
from crypto_portal.core.types import UpstreamUnavailable

logger = logging.getLogger(__name__)

NEWS_PROVIDER = "newsdata"
MARKET_PROVIDER = "coinmarketcap"

# CoinMarketCap authenticates via this header; newsdata.io via the apikey query param.
CMC_API_KEY_HEADER = "X-CMC_PRO_API_KEY"


def _normalize_symbol(symbol: Optional[str]) -> str:
    """Uppercase and trim a ticker symbol. Returns "" when absent."""
    return symbol.strip().upper() if symbol else ""


class ProviderClient:
    """
    HTTP client for both upstream providers.

    One aiohttp session is shared for the life of the process. Each call
    is independent, bounded by the configured timeout and never retried.
    """

    def __init__(
        self,
        newsdata: NewsDataConfig,
        coinmarketcap: CoinMarketCapConfig,
        upstream: Optional[UpstreamConfig] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            newsdata: News provider endpoint and credential
            coinmarketcap: Market-data provider endpoint and credential
            upstream: Timeout policy for every outbound call
        """
        self._newsdata = newsdata
        self._coinmarketcap = coinmarketcap
        self._upstream = upstream or UpstreamConfig()
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderClient":
        return cls(settings.newsdata, settings.coinmarketcap, settings.upstream)

    async def __aenter__(self) -> "ProviderClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Open the shared HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._upstream.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)

    async def close(self) -> None:
        """Close the shared HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    # ── Request builders ──────────────────────────────────────────────────

    def news_request(self, symbol: Optional[str]) -> tuple[str, dict[str, str]]:
        """Build the newsdata.io URL and query params, filtered by symbol when given."""
        params = {
            "apikey": self._newsdata.api_key,
            "category": self._newsdata.category,
            "language": self._newsdata.language,
        }
        symbol = _normalize_symbol(symbol)
        if symbol:
            params["q"] = symbol
        return f"{self._newsdata.base_url}/news", params

    def coin_info_request(self, symbol: str) -> tuple[str, dict[str, str]]:
        """Build the CoinMarketCap info URL and query params."""
        symbol = _normalize_symbol(symbol)
        if not symbol:
            raise ValueError("symbol must be non-empty for coin info lookups")
        return f"{self._coinmarketcap.base_url}/cryptocurrency/info", {"symbol": symbol}

    def quotes_request(self, symbol: Optional[str]) -> tuple[str, dict[str, str]]:
        """Build a single-symbol quote request, or a top-N listing request without a symbol."""
        symbol = _normalize_symbol(symbol)
        if symbol:
            return (
                f"{self._coinmarketcap.base_url}/cryptocurrency/quotes/latest",
                {"symbol": symbol},
            )
        return (
            f"{self._coinmarketcap.base_url}/cryptocurrency/listings/latest",
            {"limit": str(self._coinmarketcap.listing_limit)},
        )

    # ── Fetch operations ──────────────────────────────────────────────────

    async def fetch_news(self, symbol: Optional[str] = None) -> bytes:
        """
        Fetch the latest news, optionally filtered by ticker symbol.

        Raises:
            UpstreamUnavailable: On network failure, timeout or non-2xx status
        """
        url, params = self.news_request(symbol)
        return await self._get(NEWS_PROVIDER, url, params=params)

    async def fetch_coin_info(self, symbol: str) -> bytes:
        """
        Fetch descriptive metadata for one coin.

        Raises:
            UpstreamUnavailable: On network failure, timeout or non-2xx status
        """
        url, params = self.coin_info_request(symbol)
        return await self._get(MARKET_PROVIDER, url, params=params, headers=self._market_headers())

    async def fetch_quotes(self, symbol: Optional[str] = None) -> bytes:
        """
        Fetch the USD quote for one symbol, or the top-N listing without one.

        Raises:
            UpstreamUnavailable: On network failure, timeout or non-2xx status
        """
        url, params = self.quotes_request(symbol)
        return await self._get(MARKET_PROVIDER, url, params=params, headers=self._market_headers())

    def _market_headers(self) -> dict[str, str]:
        return {CMC_API_KEY_HEADER: self._coinmarketcap.api_key, "Accept": "application/json"}

    async def _get(
        self,
        provider: str,
        url: str,
        *,
        params: dict[str, str],
        headers: Optional[dict[str, str]] = None,
    ) -> bytes:
        if self._session is None or self._session.closed:
            raise RuntimeError("ProviderClient not started: call start() or use 'async with'")

        try:
            async with self._session.get(url, params=params, headers=headers) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning(
                        f"{provider} returned HTTP {resp.status}",
                        extra={"provider": provider, "status": resp.status},
                    )
                    raise UpstreamUnavailable(
                        "Provider returned an error status",
                        provider=provider,
                        status=resp.status,
                    )
                return await resp.read()

        except asyncio.TimeoutError as e:
            logger.warning(
                f"{provider} request timed out after {self._upstream.timeout_seconds}s",
                extra={"provider": provider},
            )
            raise UpstreamUnavailable("Provider request timed out", provider=provider) from e

        except aiohttp.ClientError as e:
            # Exception text is never surfaced: it may contain the keyed request URL.
            logger.warning(
                f"{provider} request failed: {type(e).__name__}",
                extra={"provider": provider},
            )
            raise UpstreamUnavailable(
                f"Provider request failed: {type(e).__name__}",
                provider=provider,
            ) from e
