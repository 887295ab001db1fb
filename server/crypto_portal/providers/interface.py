"""
Provider Protocol

The web layer depends only on this protocol, so tests and alternative
transports can stand in for ProviderClient.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ProviderAPI(Protocol):
    """Raw-bytes access to the news and market-data providers."""

    async def start(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def fetch_news(self, symbol: Optional[str] = None) -> bytes:
        """Latest news, filtered by symbol when one is given."""
        ...

    async def fetch_coin_info(self, symbol: str) -> bytes:
        """Descriptive metadata for one coin."""
        ...

    async def fetch_quotes(self, symbol: Optional[str] = None) -> bytes:
        """Quote for one symbol, or the top-N listing without one."""
        ...
