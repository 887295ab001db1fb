"""
Tests for crypto_portal.web.server

The provider is an AsyncMock; the app runs in-process via aiohttp's
TestServer/TestClient.
"""
import re
from unittest.mock import AsyncMock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from crypto_portal.core.types import ParseError, UpstreamUnavailable
from crypto_portal.models import Query
from crypto_portal.rendering import PageKey, TemplateStore
from crypto_portal.web import PortalServer
from payloads import coin_entry, market_body, news_article, news_body


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def provider():
    mock = AsyncMock()
    mock.fetch_news = AsyncMock(return_value=news_body(news_article("Default story")))
    mock.fetch_coin_info = AsyncMock(return_value=market_body({}))
    mock.fetch_quotes = AsyncMock(return_value=market_body([]))
    return mock


@pytest.fixture
def portal(settings, provider):
    return PortalServer(settings, provider=provider)


@pytest.fixture
async def client(portal):
    async with TestClient(TestServer(portal.build_app())) as client:
        yield client


# ── News ──────────────────────────────────────────────────────────────────────

class TestNewsPage:
    async def test_root_and_news_routes(self, client, provider):
        for path in ("/", "/news"):
            resp = await client.get(path)
            assert resp.status == 200
            assert resp.content_type == "text/html"
            assert "Default story" in await resp.text()

        assert provider.fetch_news.await_count == 2

    async def test_general_mode(self, client, provider):
        resp = await client.get("/news")
        text = await resp.text()

        provider.fetch_news.assert_awaited_once_with(None)
        assert "Latest Crypto News" in text
        assert "Back to General News" not in text

    async def test_symbol_mode(self, client, provider):
        resp = await client.get("/news", params={"symbol": "eth"})
        text = await resp.text()

        provider.fetch_news.assert_awaited_once_with("ETH")
        assert "<h2>ETH Crypto News</h2>" in text
        assert "Back to General News" in text

    async def test_empty_symbol_is_general_mode(self, client, provider):
        resp = await client.get("/news?symbol=")

        provider.fetch_news.assert_awaited_once_with(None)
        assert "Latest Crypto News" in await resp.text()

    async def test_duplicates_removed_and_capped(self, client, provider):
        articles = []
        for n in range(15):
            articles.append(news_article(f"Story {n}"))
            articles.append(news_article(f"  STORY {n} "))
        provider.fetch_news.return_value = news_body(*articles)

        text = await (await client.get("/news")).text()

        titles = re.findall(r'class="text-decoration-none">(.*?)</a>', text)
        assert titles == [f"Story {n}" for n in range(10)]

    async def test_placeholder_replaced(self, client):
        text = await (await client.get("/news")).text()

        assert PageKey.NEWS.placeholder not in text
        assert text.startswith("<html><body>")


# ── Info ──────────────────────────────────────────────────────────────────────

class TestInfoPage:
    async def test_without_symbol_skips_provider(self, client, provider):
        resp = await client.get("/info")

        assert resp.status == 200
        assert '<div id="info-container" class="mt-4"></div>' in await resp.text()
        provider.fetch_coin_info.assert_not_awaited()

    async def test_known_symbol(self, client, provider):
        provider.fetch_coin_info.return_value = market_body({
            "BTC": {
                "name": "Bitcoin",
                "symbol": "BTC",
                "description": "Peer-to-peer cash.",
                "urls": {"website": ["https://bitcoin.org"]},
            }
        })

        resp = await client.get("/info?symbol=btc")
        text = await resp.text()

        provider.fetch_coin_info.assert_awaited_once_with("BTC")
        assert resp.status == 200
        assert "<h2>Bitcoin (BTC) Info</h2>" in text
        assert 'href="https://bitcoin.org"' in text

    async def test_unknown_symbol_is_success(self, client):
        resp = await client.get("/info?symbol=nope")

        assert resp.status == 200
        assert "No info found for this symbol." in await resp.text()


# ── Prices ────────────────────────────────────────────────────────────────────

class TestPricesPage:
    async def test_known_symbol_two_decimals(self, client, provider):
        provider.fetch_quotes.return_value = market_body({"BTC": coin_entry("Bitcoin", "BTC", price=12345.6)})

        resp = await client.get("/prices?symbol=btc")
        text = await resp.text()

        provider.fetch_quotes.assert_awaited_once_with("BTC")
        assert resp.status == 200
        assert "Bitcoin (BTC)" in text
        assert "$12345.60" in text

    async def test_unknown_symbol_is_success(self, client, provider):
        provider.fetch_quotes.return_value = market_body({})

        resp = await client.get("/prices?symbol=zzz")

        assert resp.status == 200
        assert "No price data found for the given symbol." in await resp.text()

    async def test_missing_price_renders_zero(self, client, provider):
        provider.fetch_quotes.return_value = market_body({"NEW": coin_entry("Newcoin", "NEW")})

        text = await (await client.get("/prices?symbol=NEW")).text()

        assert "$0.00" in text

    async def test_listing_ranks_in_provider_order(self, client, provider):
        provider.fetch_quotes.return_value = market_body([
            coin_entry("Zcash", "ZEC", price=30.0),
            coin_entry("Aave", "AAVE", price=90.0),
            coin_entry("Bitcoin", "BTC", price=60000.0),
            coin_entry("Aave", "AAVE", price=90.0),
        ])

        text = await (await client.get("/prices")).text()

        provider.fetch_quotes.assert_awaited_once_with(None)
        titles = re.findall(r'<h5 class="card-title">(.*?)</h5>', text)
        assert titles == ["1. Zcash (ZEC)", "2. Aave (AAVE)", "3. Bitcoin (BTC)", "4. Aave (AAVE)"]

    async def test_empty_listing_message(self, client):
        resp = await client.get("/prices")

        assert resp.status == 200
        assert "No top cryptocurrency data available." in await resp.text()

    async def test_huge_integer_price_renders_zero(self, client, provider):
        provider.fetch_quotes.return_value = (
            b'{"data": {"BTC": {"name": "Bitcoin", "symbol": "BTC", "quote": {"USD": {"price": 1'
            + b"0" * 400
            + b"}}}}}"
        )

        resp = await client.get("/prices?symbol=BTC")

        assert resp.status == 200
        assert "$0.00" in await resp.text()

    async def test_overlong_integer_listing_is_parse_failure(self, client, provider):
        provider.fetch_quotes.return_value = (
            b'{"data": [{"name": "Bitcoin", "symbol": "BTC", "quote": {"USD": {"price": 1'
            + b"0" * 5000
            + b"}}}]}"
        )

        resp = await client.get("/prices")

        assert resp.status == 500
        assert await resp.text() == "Failed to parse price response"

    async def test_nan_price_is_parse_failure(self, client, provider):
        provider.fetch_quotes.return_value = (
            b'{"data": {"BTC": {"name": "Bitcoin", "symbol": "BTC", "quote": {"USD": {"price": NaN}}}}}'
        )

        resp = await client.get("/prices?symbol=BTC")

        assert resp.status == 500
        assert await resp.text() == "Failed to parse price response"


# ── Failures ──────────────────────────────────────────────────────────────────

_PAGES = [
    ("/news?symbol=btc", "fetch_news", "Failed to fetch news", "Failed to parse news response"),
    ("/info?symbol=btc", "fetch_coin_info", "Failed to fetch info", "Failed to parse info response"),
    ("/prices?symbol=btc", "fetch_quotes", "Failed to fetch price data", "Failed to parse price response"),
    ("/prices", "fetch_quotes", "Failed to fetch price data", "Failed to parse price response"),
]


@pytest.mark.parametrize("path, method, upstream_text, _", _PAGES)
async def test_upstream_failure_is_fixed_5xx(client, provider, path, method, upstream_text, _):
    getattr(provider, method).side_effect = UpstreamUnavailable(
        "Provider request failed: ClientConnectorError",
        provider="newsdata",
        context={"url": "https://newsdata.io/api/1/news?apikey=news-secret-key"},
    )

    resp = await client.get(path)
    text = await resp.text()

    assert resp.status == 502
    assert text == upstream_text
    assert "secret" not in text
    assert "http" not in text


@pytest.mark.parametrize("path, method, _, parse_text", _PAGES)
async def test_malformed_response_is_fixed_5xx(client, provider, path, method, _, parse_text):
    getattr(provider, method).return_value = b"<html>not json</html>"

    resp = await client.get(path)

    assert resp.status == 500
    assert await resp.text() == parse_text


async def test_parse_error_never_returns_partial_html(client, provider):
    provider.fetch_news.side_effect = ParseError("bad shape", provider="newsdata")

    resp = await client.get("/news")

    assert resp.content_type == "text/plain"
    assert "<" not in await resp.text()


async def test_failure_in_one_request_does_not_affect_another(client, provider):
    provider.fetch_news.side_effect = [
        UpstreamUnavailable("down", provider="newsdata"),
        news_body(news_article("Recovered")),
    ]

    first = await client.get("/news")
    second = await client.get("/news")

    assert first.status == 502
    assert second.status == 200
    assert "Recovered" in await second.text()


# ── Templates and lifecycle ───────────────────────────────────────────────────

async def test_missing_template_degrades_to_empty_document(settings, provider, tmp_path):
    portal = PortalServer(settings, provider=provider, templates=TemplateStore(tmp_path / "missing"))

    document = await portal.render_news(Query())

    assert document == ""


async def test_template_without_placeholder_returned_unchanged(settings, provider, template_dir):
    (template_dir / PageKey.PRICES.filename).write_text("<html>maintenance</html>", encoding="utf-8")
    portal = PortalServer(settings, provider=provider)

    assert await portal.render_prices(Query()) == "<html>maintenance</html>"


async def test_static_assets_served(client, template_dir):
    (template_dir / "style.css").write_text("body {}", encoding="utf-8")

    resp = await client.get("/static/style.css")

    assert resp.status == 200
    assert await resp.text() == "body {}"


async def test_app_lifecycle_starts_and_closes_provider(portal, provider):
    async with TestClient(TestServer(portal.build_app())):
        provider.start.assert_awaited_once()
    provider.close.assert_awaited_once()
