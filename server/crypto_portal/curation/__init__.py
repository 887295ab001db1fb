"""
Curation Module

De-duplication, display limits and rank ordering for normalized items.
"""
from crypto_portal.curation.curator import (
    MAX_NEWS_ITEMS,
    curate_news,
    dedupe_news,
    first_or_none,
    order_by_rank,
)

__all__ = [
    "MAX_NEWS_ITEMS",
    "curate_news",
    "dedupe_news",
    "first_or_none",
    "order_by_rank",
]
