"""
Page Templates

Each page is a static HTML document holding one placeholder token. The
generated fragment replaces that token exactly once; a template without
the token is returned unchanged.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class PageKey(str, Enum):
    """Logical page names mapped to their template file and placeholder."""

    NEWS = "news"
    INFO = "info"
    PRICES = "prices"

    @property
    def filename(self) -> str:
        return _FILENAMES[self]

    @property
    def placeholder(self) -> str:
        return _PLACEHOLDERS[self]


_FILENAMES = {
    PageKey.NEWS: "news_st.html",
    PageKey.INFO: "info.html",
    PageKey.PRICES: "prices.html",
}

# HTML comments: escaped provider text can never reproduce one.
_PLACEHOLDERS = {
    PageKey.NEWS: "<!-- News will be populated here from the backend -->",
    PageKey.INFO: "<!-- Info will be populated here from the backend -->",
    PageKey.PRICES: "<!-- Prices will be populated here from the backend -->",
}


@dataclass(frozen=True)
class PageTemplate:
    """A template source paired with the placeholder it expects."""

    source: str
    placeholder: str

    @property
    def has_placeholder(self) -> bool:
        return self.placeholder in self.source

    def render(self, fragment: str) -> str:
        """Substitute fragment for the first occurrence of the placeholder."""
        if not self.has_placeholder:
            return self.source
        return self.source.replace(self.placeholder, fragment, 1)


class TemplateStore:
    """Loads page templates from a directory on disk."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self._directory = Path(directory)

    async def load(self, key: PageKey) -> PageTemplate:
        """
        Read the template for key without blocking the event loop.

        An unreadable template degrades to an empty source rather than failing.
        """
        path = self._directory / key.filename
        try:
            source = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                f"Template unavailable: {path} ({type(e).__name__})",
                extra={"page": key.value},
            )
            source = ""
        return PageTemplate(source=source, placeholder=key.placeholder)

    async def render(self, key: PageKey, fragment: str) -> str:
        """Load the template for key and merge fragment into it."""
        template = await self.load(key)
        return template.render(fragment)
