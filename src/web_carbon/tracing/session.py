"""Scoped headless browser sessions."""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Callable, Final

from playwright.async_api import async_playwright

from web_carbon.settings import WebCarbonSettings, get_settings
from web_carbon.tracing._playwright_protocols import PageProtocol

__all__ = ["SessionFactory", "playwright_session", "session_factory_from_settings"]

LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[PageProtocol]]

_CHROMIUM_ARGS: Final[tuple[str, ...]] = (
    "--disable-gpu",
    "--no-sandbox",
    "--disable-dev-shm-usage",
)


@asynccontextmanager
async def playwright_session(
    *, headless: bool = True, user_agent: str | None = None
) -> AsyncIterator[PageProtocol]:
    """Open a Chromium page and close the browser on every exit path.

    Args:
        headless: Launch without a visible window.
        user_agent: Optional user agent for the browsing context.

    Yields:
        A fresh page in its own browser context.
    """

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=headless, args=list(_CHROMIUM_ARGS)
        )
        LOGGER.debug("Browser session opened", extra={"headless": headless})
        try:
            context = await browser.new_context(user_agent=user_agent)
            page = await context.new_page()
            yield page
        finally:
            await browser.close()
            LOGGER.debug("Browser session closed")


def session_factory_from_settings(
    settings: WebCarbonSettings | None = None,
) -> SessionFactory:
    """Return a session factory configured from ``settings``."""

    settings = settings or get_settings()

    def _factory() -> AbstractAsyncContextManager[PageProtocol]:
        return playwright_session(
            headless=settings.headless, user_agent=settings.browser_user_agent
        )

    return _factory
