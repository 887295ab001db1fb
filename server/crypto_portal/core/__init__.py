"""
Crypto Portal Core Utilities
"""
from crypto_portal.core.types import (
    ParseError,
    PortalError,
    UpstreamUnavailable,
)

__all__ = [
    "ParseError",
    "PortalError",
    "UpstreamUnavailable",
]
