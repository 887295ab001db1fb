"""
Rendering Module

Escaped HTML fragments and single-placeholder page templates.
"""
from crypto_portal.rendering.fragments import (
    EMPTY_INFO_FRAGMENT,
    escape,
    format_usd,
    info_fragment,
    listing_fragment,
    news_fragment,
    quote_fragment,
)
from crypto_portal.rendering.templates import PageKey, PageTemplate, TemplateStore

__all__ = [
    "EMPTY_INFO_FRAGMENT",
    "PageKey",
    "PageTemplate",
    "TemplateStore",
    "escape",
    "format_usd",
    "info_fragment",
    "listing_fragment",
    "news_fragment",
    "quote_fragment",
]
