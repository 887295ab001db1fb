"""
Provider Response Normalizer

Transforms raw newsdata.io and CoinMarketCap JSON into NewsItem,
CoinSummary and PriceQuote records.

Decoding is permissive: unknown fields are ignored and missing optional
fields take defaults. A body that is not JSON, or whose top-level shape is
wrong, raises ParseError. A well-formed response without the requested
coin is a valid empty result, not an error.
"""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Optional, Union

from crypto_portal.core.types import ParseError
from crypto_portal.models.items import (
    UNKNOWN_DATE,
    UNKNOWN_SOURCE,
    CoinSummary,
    NewsItem,
    PriceQuote,
)
from crypto_portal.providers.client import MARKET_PROVIDER, NEWS_PROVIDER

logger = logging.getLogger(__name__)

RawBody = Union[bytes, str]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite JSON constant: {name}")


def decode_json(raw: RawBody, provider: str) -> Any:
    """
    Decode a provider body into Python objects.

    NaN and Infinity literals are rejected, as are integers too long to parse.

    Raises:
        ParseError: If the body is not valid UTF-8 JSON
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ParseError(
            f"Response is not valid JSON: {type(e).__name__}",
            provider=provider,
        ) from e


def _require_object(payload: Any, provider: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ParseError(
            f"Expected JSON object, got {type(payload).__name__}",
            provider=provider,
        )
    return payload


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_usd_price(entry: dict[str, Any]) -> float:
    """
    Read quote.USD.price from a market-data record.

    A missing, non-numeric or non-finite price yields 0.0 instead of failing.
    """
    quote = entry.get("quote")
    usd = quote.get("USD") if isinstance(quote, dict) else None
    price = usd.get("price") if isinstance(usd, dict) else None
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return 0.0
    try:
        value = float(price)
    except OverflowError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _lookup_symbol_entry(data: dict[str, Any], symbol: str) -> Optional[dict[str, Any]]:
    """
    Find the record for symbol in a keyed data mapping.

    Newer CoinMarketCap endpoints key each symbol to a list of matches;
    the first match is taken.
    """
    entry = data.get(symbol)
    if isinstance(entry, list):
        entry = entry[0] if entry else None
    if entry is None:
        return None
    if not isinstance(entry, dict):
        raise ParseError(
            f"Expected object for symbol entry, got {type(entry).__name__}",
            provider=MARKET_PROVIDER,
            field=f"data.{symbol}",
        )
    return entry


def _require_data_mapping(payload: dict[str, Any]) -> dict[str, Any]:
    data = payload.get("data")
    if not isinstance(data, dict):
        raise ParseError(
            "Missing or invalid 'data' mapping",
            provider=MARKET_PROVIDER,
            field="data",
        )
    return data


# ── News ──────────────────────────────────────────────────────────────────────

def normalize_news_entry(entry: Any) -> Optional[NewsItem]:
    """
    Convert one element of the newsdata.io results array.

    Returns None for entries without a usable title and link.
    """
    if not isinstance(entry, dict):
        return None

    title = _non_empty_str(entry.get("title"))
    link = _non_empty_str(entry.get("link"))
    if title is None or link is None:
        return None

    return NewsItem(
        title=title,
        link=link,
        published_at=_non_empty_str(entry.get("pubDate")) or UNKNOWN_DATE,
        source_label=_non_empty_str(entry.get("source_url")) or UNKNOWN_SOURCE,
    )


def normalize_news(raw: RawBody) -> list[NewsItem]:
    """
    Decode a newsdata.io response into NewsItems in provider order.

    Args:
        raw: Response body

    Returns:
        One NewsItem per usable result; malformed entries are skipped

    Raises:
        ParseError: If the body is not JSON or has no results array
    """
    payload = _require_object(decode_json(raw, NEWS_PROVIDER), NEWS_PROVIDER)

    if "results" not in payload:
        raise ParseError("Missing 'results' array", provider=NEWS_PROVIDER, field="results")

    results = payload["results"]
    if results is None:
        return []
    if not isinstance(results, list):
        raise ParseError(
            f"Expected 'results' array, got {type(results).__name__}",
            provider=NEWS_PROVIDER,
            field="results",
        )

    items: list[NewsItem] = []
    skipped = 0
    for entry in results:
        item = normalize_news_entry(entry)
        if item is None:
            skipped += 1
            continue
        items.append(item)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed news entries", extra={"provider": NEWS_PROVIDER})

    return items


# ── Coin info ─────────────────────────────────────────────────────────────────

def normalize_coin_info(raw: RawBody, symbol: str) -> Optional[CoinSummary]:
    """
    Decode a CoinMarketCap info response and pick out one coin.

    Args:
        raw: Response body
        symbol: Requested ticker; matched case-insensitively

    Returns:
        CoinSummary, or None when the response has no entry for symbol

    Raises:
        ParseError: If the body is not JSON or has no data mapping
    """
    symbol = symbol.strip().upper()
    payload = _require_object(decode_json(raw, MARKET_PROVIDER), MARKET_PROVIDER)
    entry = _lookup_symbol_entry(_require_data_mapping(payload), symbol)
    if entry is None:
        return None

    urls = entry.get("urls")
    websites = urls.get("website") if isinstance(urls, dict) else None
    if not isinstance(websites, list):
        websites = []

    return CoinSummary(
        name=entry.get("name") if isinstance(entry.get("name"), str) else "",
        symbol=_non_empty_str(entry.get("symbol")) or symbol,
        description=entry.get("description") if isinstance(entry.get("description"), str) else "",
        website_urls=tuple(u for u in websites if isinstance(u, str) and u),
    )


# ── Quotes ────────────────────────────────────────────────────────────────────

def _quote_from_entry(entry: dict[str, Any], rank: int, default_symbol: str = "") -> PriceQuote:
    name = entry.get("name")
    symbol = entry.get("symbol")
    return PriceQuote(
        rank=rank,
        name=name if isinstance(name, str) else "",
        symbol=symbol if isinstance(symbol, str) and symbol else default_symbol,
        price_usd=extract_usd_price(entry),
    )


def normalize_quotes(raw: RawBody, symbol: Optional[str] = None) -> list[PriceQuote]:
    """
    Decode a CoinMarketCap quotes or listings response.

    With a symbol, data is a mapping keyed by ticker and at most one quote
    is returned. Without one, data is a positional array and each quote is
    ranked by its position, starting at 1.

    Raises:
        ParseError: If the body is not JSON or data has the wrong shape
    """
    payload = _require_object(decode_json(raw, MARKET_PROVIDER), MARKET_PROVIDER)
    symbol = symbol.strip().upper() if symbol else ""

    if symbol:
        entry = _lookup_symbol_entry(_require_data_mapping(payload), symbol)
        if entry is None:
            return []
        return [_quote_from_entry(entry, rank=1, default_symbol=symbol)]

    data = payload.get("data")
    if not isinstance(data, list):
        raise ParseError(
            "Missing or invalid 'data' array",
            provider=MARKET_PROVIDER,
            field="data",
        )

    quotes: list[PriceQuote] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ParseError(
                f"Expected object in listing, got {type(entry).__name__}",
                provider=MARKET_PROVIDER,
                field=f"data[{index}]",
            )
        quotes.append(_quote_from_entry(entry, rank=index + 1))
    return quotes
