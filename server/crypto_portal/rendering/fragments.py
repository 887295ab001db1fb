"""
HTML Fragment Builders

Turn curated items into the markup injected into each page. Every
provider-supplied value passes through escape() before interpolation.
"""
from __future__ import annotations

import html
from typing import Any, Iterable, Optional

from crypto_portal.models.items import CoinSummary, NewsItem, PriceQuote

EMPTY_INFO_FRAGMENT = '<div id="info-container" class="mt-4"></div>'

NO_INFO_MESSAGE = "No info found for this symbol."
NO_PRICE_MESSAGE = "No price data found for the given symbol."
NO_LISTING_MESSAGE = "No top cryptocurrency data available."
NO_NEWS_MESSAGE = "No news articles found."


def escape(value: Any) -> str:
    """HTML-escape a value for use in element text or a quoted attribute."""
    return html.escape(str(value), quote=True)


def format_usd(price: float) -> str:
    """Render a USD price with exactly two decimal places."""
    return f"${price:.2f}"


def _message(text: str, css_class: str = "text-danger") -> str:
    return f'<p class="{css_class}">{escape(text)}</p>'


# ── News ──────────────────────────────────────────────────────────────────────

def news_heading(symbol: Optional[str]) -> str:
    """Heading for the news page, with a link back to general news in symbol mode."""
    if not symbol:
        return '<h2 class="mb-4">Latest Crypto News</h2>'
    return (
        f"<h2>{escape(symbol.upper())} Crypto News</h2>"
        '<form action="/news" method="get">'
        '<button type="submit" class="btn btn-secondary mb-4">Back to General News</button>'
        "</form>"
    )


def news_card(item: NewsItem) -> str:
    return (
        '<div class="col-12 mb-4">'
        '<div class="card shadow-sm">'
        '<div class="card-body">'
        '<h5 class="card-title mb-2">'
        f'<a href="{escape(item.link)}" target="_blank" rel="noopener noreferrer" '
        f'class="text-decoration-none">{escape(item.title)}</a>'
        "</h5>"
        '<p class="card-text">'
        f'<small class="text-muted">{escape(item.published_at)} | Source: {escape(item.source_label)}</small>'
        "</p>"
        "</div>"
        "</div>"
        "</div>"
    )


def news_fragment(items: Iterable[NewsItem], symbol: Optional[str] = None) -> str:
    """Heading followed by one card per news item."""
    cards = [news_card(item) for item in items]
    if not cards:
        cards = [_message(NO_NEWS_MESSAGE, css_class="text-muted")]
    return news_heading(symbol) + '<div class="row">' + "".join(cards) + "</div>"


# ── Coin info ─────────────────────────────────────────────────────────────────

def info_fragment(coin: Optional[CoinSummary]) -> str:
    """Coin description block, or a not-found message."""
    if coin is None:
        return _message(NO_INFO_MESSAGE)

    links = ", ".join(
        f'<a href="{escape(url)}" target="_blank" rel="noopener noreferrer">{escape(url)}</a>'
        for url in coin.website_urls
    )
    return (
        f"<h2>{escape(coin.name)} ({escape(coin.symbol)}) Info</h2>"
        f"<p>{escape(coin.description)}</p>"
        f"<p>Website: {links}</p>"
    )


# ── Prices ────────────────────────────────────────────────────────────────────

def price_card(title: str, price_usd: float) -> str:
    return (
        '<div class="col-md-4 mb-4">'
        '<div class="card text-center shadow-sm">'
        '<div class="card-body">'
        f'<h5 class="card-title">{title}</h5>'
        f'<p class="card-text display-6">{format_usd(price_usd)}</p>'
        "</div>"
        "</div>"
        "</div>"
    )


def quote_fragment(quote: Optional[PriceQuote]) -> str:
    """Single-symbol price card, or a not-found message."""
    if quote is None:
        return _message(NO_PRICE_MESSAGE)
    return price_card(f"{escape(quote.name)} ({escape(quote.symbol)})", quote.price_usd)


def listing_fragment(quotes: Iterable[PriceQuote]) -> str:
    """One ranked price card per listing entry."""
    cards = [
        price_card(f"{q.rank}. {escape(q.name)} ({escape(q.symbol)})", q.price_usd)
        for q in quotes
    ]
    if not cards:
        return _message(NO_LISTING_MESSAGE)
    return "".join(cards)
