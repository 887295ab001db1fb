"""
Crypto Portal Data Models

Frozen dataclasses with validation.
"""
from crypto_portal.models.items import (
    UNKNOWN_DATE,
    UNKNOWN_SOURCE,
    CoinSummary,
    NewsItem,
    PriceQuote,
    Query,
)

__all__ = [
    "UNKNOWN_DATE",
    "UNKNOWN_SOURCE",
    "CoinSummary",
    "NewsItem",
    "PriceQuote",
    "Query",
]
