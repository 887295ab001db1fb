"""
Core Type Definitions and Exceptions

Failure taxonomy for the provider pipelines. Every upstream or decoding
failure is raised as one of these and converted to a fixed-text response
at the web boundary.
"""
from __future__ import annotations

from typing import Any, Optional


class PortalError(Exception):
    """Base exception for all portal pipeline errors."""

    def __init__(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class UpstreamUnavailable(PortalError):
    """Raised when a provider call fails at the transport level or returns non-2xx."""

    def __init__(
        self,
        message: str,
        provider: str,
        status: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["provider"] = provider
        if status is not None:
            ctx["status"] = status
        super().__init__(message, ctx)
        self.provider = provider
        self.status = status


class ParseError(PortalError):
    """Raised when a provider response does not match the expected shape."""

    def __init__(
        self,
        message: str,
        provider: str,
        field: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        ctx = context or {}
        ctx["provider"] = provider
        if field:
            ctx["field"] = field
        super().__init__(message, ctx)
        self.provider = provider
        self.field = field
