"""Protocols describing the subset of Playwright used by the tracer."""

from __future__ import annotations

from typing import Any, Callable, Protocol


class RequestProtocol(Protocol):
    """Minimal interface for Playwright request objects."""

    @property
    def resource_type(self) -> str:
        """Browser-reported purpose of the request (``image``, ``script``...)."""


class ResponseProtocol(Protocol):
    """Minimal interface for Playwright response objects."""

    @property
    def url(self) -> str:
        """URL of the response."""

    @property
    def headers(self) -> dict[str, str]:
        """Response headers with lowercased names."""

    @property
    def request(self) -> RequestProtocol:
        """Request that produced this response."""

    async def body(self) -> bytes:
        """Return the buffered response body."""


class PageProtocol(Protocol):
    """Subset of Playwright page APIs used by the tracer."""

    @property
    def url(self) -> str:
        """Current page URL."""

    def on(self, event: str, f: Callable[..., Any]) -> None:
        """Register an event handler."""

    def remove_listener(self, event: str, f: Callable[..., Any]) -> None:
        """Detach a handler registered with :meth:`on`."""

    async def goto(
        self, url: str, *, timeout: float | None = None, wait_until: str | None = None
    ) -> Any:
        """Navigate to ``url``."""
