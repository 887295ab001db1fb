"""
HTTP Server for the Portal Pages

Maps each route to its pipeline (fetch -> normalize -> curate -> render)
and converts pipeline failures into fixed-text error responses.

Routes:
    GET /, GET /news   news page, optional ?symbol=
    GET /info          coin info page, optional ?symbol=
    GET /prices        prices page, optional ?symbol=
    GET /static/...    static assets
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Optional

from aiohttp import web

from crypto_portal.config import Settings
from crypto_portal.core.types import ParseError, UpstreamUnavailable
from crypto_portal.curation import curate_news, first_or_none, order_by_rank
from crypto_portal.models import Query
from crypto_portal.providers import (
    ProviderAPI,
    ProviderClient,
    normalize_coin_info,
    normalize_news,
    normalize_quotes,
)
from crypto_portal.rendering import (
    EMPTY_INFO_FRAGMENT,
    PageKey,
    TemplateStore,
    info_fragment,
    listing_fragment,
    news_fragment,
    quote_fragment,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailureMessages:
    """Fixed response bodies for a page. Never include upstream detail."""

    upstream: str
    parse: str


NEWS_FAILURES = FailureMessages(
    upstream="Failed to fetch news",
    parse="Failed to parse news response",
)
INFO_FAILURES = FailureMessages(
    upstream="Failed to fetch info",
    parse="Failed to parse info response",
)
PRICES_FAILURES = FailureMessages(
    upstream="Failed to fetch price data",
    parse="Failed to parse price response",
)


class PortalServer:
    """
    aiohttp server rendering the news, info and prices pages.

    Requests share no mutable state: each one performs at most one
    provider call and one template read.
    """

    def __init__(
        self,
        settings: Settings,
        provider: Optional[ProviderAPI] = None,
        templates: Optional[TemplateStore] = None,
    ) -> None:
        self._settings = settings
        self._provider = provider or ProviderClient.from_settings(settings)
        self._templates = templates or TemplateStore(settings.pages.template_dir)
        self._runner: Optional[web.AppRunner] = None

    # ── Pipelines ─────────────────────────────────────────────────────────

    async def render_news(self, query: Query) -> str:
        """
        Fetch, de-duplicate and render the news page.

        Raises:
            UpstreamUnavailable: If the news provider cannot be reached
            ParseError: If the news response is malformed
        """
        raw = await self._provider.fetch_news(query.symbol)
        items = curate_news(normalize_news(raw))
        logger.info(
            f"Rendering {len(items)} news items",
            extra={"page": PageKey.NEWS.value, "symbol": query.symbol},
        )
        return await self._templates.render(PageKey.NEWS, news_fragment(items, query.symbol))

    async def render_info(self, query: Query) -> str:
        """
        Render the coin info page. Without a symbol no provider call is made.

        Raises:
            UpstreamUnavailable: If the market-data provider cannot be reached
            ParseError: If the info response is malformed
        """
        if not query.has_symbol:
            return await self._templates.render(PageKey.INFO, EMPTY_INFO_FRAGMENT)

        logger.info(f"Requesting info for symbol: {query.symbol}", extra={"page": PageKey.INFO.value})
        raw = await self._provider.fetch_coin_info(query.symbol)
        coin = normalize_coin_info(raw, query.symbol)
        if coin is None:
            logger.info(f"No info found for {query.symbol}", extra={"page": PageKey.INFO.value})
        return await self._templates.render(PageKey.INFO, info_fragment(coin))

    async def render_prices(self, query: Query) -> str:
        """
        Render one symbol's price, or the ranked top-N listing without a symbol.

        Raises:
            UpstreamUnavailable: If the market-data provider cannot be reached
            ParseError: If the quotes response is malformed
        """
        raw = await self._provider.fetch_quotes(query.symbol)
        quotes = normalize_quotes(raw, query.symbol)
        if query.has_symbol:
            fragment = quote_fragment(first_or_none(quotes))
        else:
            fragment = listing_fragment(order_by_rank(quotes))
        return await self._templates.render(PageKey.PRICES, fragment)

    # ── Handlers ──────────────────────────────────────────────────────────

    async def handle_news(self, request: web.Request) -> web.Response:
        query = Query(request.query.get("symbol"))
        return await self._respond(PageKey.NEWS, self.render_news(query), NEWS_FAILURES)

    async def handle_info(self, request: web.Request) -> web.Response:
        query = Query(request.query.get("symbol"))
        return await self._respond(PageKey.INFO, self.render_info(query), INFO_FAILURES)

    async def handle_prices(self, request: web.Request) -> web.Response:
        query = Query(request.query.get("symbol"))
        return await self._respond(PageKey.PRICES, self.render_prices(query), PRICES_FAILURES)

    async def _respond(
        self,
        page: PageKey,
        pipeline: Awaitable[str],
        failures: FailureMessages,
    ) -> web.Response:
        try:
            document = await pipeline
        except UpstreamUnavailable as e:
            logger.error(f"{page.value} page: upstream unavailable - {e}", extra={"page": page.value})
            return web.Response(status=502, text=failures.upstream)
        except ParseError as e:
            logger.error(f"{page.value} page: failed to parse response - {e}", extra={"page": page.value})
            return web.Response(status=500, text=failures.parse)

        return web.Response(text=document, content_type="text/html")

    # ── Application lifecycle ─────────────────────────────────────────────

    def build_app(self) -> web.Application:
        """Create the aiohttp application with all routes configured."""
        app = web.Application()
        app.router.add_get("/", self.handle_news)
        app.router.add_get("/news", self.handle_news)
        app.router.add_get("/info", self.handle_info)
        app.router.add_get("/prices", self.handle_prices)

        static_dir = Path(self._settings.pages.static_dir)
        if static_dir.is_dir():
            app.router.add_static("/static", static_dir)
        else:
            logger.warning(f"Static directory not found, /static disabled: {static_dir}")

        app.on_startup.append(self._on_startup)
        app.on_cleanup.append(self._on_cleanup)
        return app

    async def _on_startup(self, app: web.Application) -> None:
        await self._provider.start()

    async def _on_cleanup(self, app: web.Application) -> None:
        await self._provider.close()

    async def start(self) -> None:
        """Bind the listener and start serving."""
        host = self._settings.http_server.host
        port = self._settings.http_server.port

        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, host, port)
        await site.start()

        logger.info(f"Portal server started on http://{host}:{port}")

    async def stop(self) -> None:
        """Stop serving and release the provider session."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Portal server stopped")


async def serve(settings: Settings, shutdown_event: asyncio.Event) -> None:
    """Run the portal until shutdown_event is set."""
    server = PortalServer(settings)
    await server.start()
    try:
        await shutdown_event.wait()
    finally:
        await server.stop()
