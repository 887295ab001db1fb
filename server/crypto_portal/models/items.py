"""
Portal Data Models

Uniform, request-scoped records built from provider responses and consumed
by the renderer. All models use frozen dataclasses with __post_init__ validation.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


UNKNOWN_SOURCE = "Unknown"
UNKNOWN_DATE = "Unknown date"


@dataclass(frozen=True)
class Query:
    """
    Inbound request parameters.

    The symbol is uppercased on construction. An absent or blank symbol
    becomes None, which selects general/top-N mode.
    """

    symbol: Optional[str] = None

    def __post_init__(self) -> None:
        symbol = self.symbol.strip().upper() if self.symbol else ""
        object.__setattr__(self, "symbol", symbol or None)

    @property
    def has_symbol(self) -> bool:
        return self.symbol is not None


@dataclass(frozen=True)
class NewsItem:
    """A single headline from the news provider."""

    title: str
    link: str
    published_at: str
    source_label: str = UNKNOWN_SOURCE

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("title must be non-empty string")
        if not self.link:
            raise ValueError("link must be non-empty string")

    @property
    def dedup_key(self) -> str:
        """Identity used for duplicate detection: trimmed, lowercased title."""
        return self.title.strip().lower()


@dataclass(frozen=True)
class CoinSummary:
    """Descriptive metadata for one coin."""

    name: str
    symbol: str
    description: str
    website_urls: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("symbol must be non-empty string")


@dataclass(frozen=True)
class PriceQuote:
    """
    USD price for one coin.

    rank is the 1-based position in the provider result, assigned during
    normalization rather than read from the provider.
    """

    rank: int
    name: str
    symbol: str
    price_usd: float

    def __post_init__(self) -> None:
        if self.rank < 1:
            raise ValueError(f"rank must be >= 1, got {self.rank}")
