"""
Item Curation

Decides which normalized items reach the page: news is de-duplicated by
title and capped, quotes keep their positional rank.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Optional

from crypto_portal.models.items import NewsItem, PriceQuote

# Number of news cards shown per page
MAX_NEWS_ITEMS = 10


def dedupe_news(items: Iterable[NewsItem]) -> Iterator[NewsItem]:
    """
    Yield items whose normalized title has not been seen yet.

    Encounter order is preserved; the first occurrence of a title wins.
    """
    seen: set[str] = set()
    for item in items:
        key = item.dedup_key
        if key in seen:
            continue
        seen.add(key)
        yield item


def curate_news(items: Iterable[NewsItem], limit: int = MAX_NEWS_ITEMS) -> list[NewsItem]:
    """
    De-duplicate news and stop after limit accepted items.

    Duplicates do not count towards the limit.
    """
    if limit <= 0:
        return []

    accepted: list[NewsItem] = []
    for item in dedupe_news(items):
        accepted.append(item)
        if len(accepted) >= limit:
            break
    return accepted


def order_by_rank(quotes: Iterable[PriceQuote]) -> list[PriceQuote]:
    """Order listing quotes by rank. No de-duplication is applied."""
    return sorted(quotes, key=lambda q: q.rank)


def first_or_none(quotes: Iterable[PriceQuote]) -> Optional[PriceQuote]:
    """Single-symbol mode yields at most one quote."""
    return next(iter(quotes), None)
