"""Network tracer measuring page weight by resource category."""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from web_carbon.errors import PageLoadFailureError, PageLoadTimeoutError
from web_carbon.page_models import CaptureOutcome, ResourceTransfer, TraceResult
from web_carbon.settings import WebCarbonSettings, get_settings
from web_carbon.tracing._playwright_protocols import ResponseProtocol
from web_carbon.tracing.accumulator import BreakdownAccumulator
from web_carbon.tracing.session import SessionFactory, session_factory_from_settings

__all__ = ["PageTracer"]

LOGGER = logging.getLogger(__name__)


class PageTracer:
    """Load a page in a headless browser and weigh every response.

    Each call to :meth:`trace` opens exactly one browser session through the
    session factory and releases it on success, timeout and error alike.
    """

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        navigation_timeout_ms: int | None = None,
        settle_delay_ms: int | None = None,
        capture_drain_ms: int | None = None,
        settings: WebCarbonSettings | None = None,
    ) -> None:
        """Initialise the tracer.

        Args:
            session_factory: Callable returning an async context manager that
                yields a page. Defaults to a Playwright Chromium session.
            navigation_timeout_ms: Hard navigation bound; defaults to
                settings (30 s).
            settle_delay_ms: Grace period after navigation; defaults to
                settings (2 s).
            capture_drain_ms: Bound on in-flight body captures after the
                grace period; defaults to settings (5 s).
            settings: Optional pre-built settings.
        """

        settings = settings or get_settings()
        self._session_factory = session_factory or session_factory_from_settings(
            settings
        )
        self.navigation_timeout_ms = (
            navigation_timeout_ms
            if navigation_timeout_ms is not None
            else settings.navigation_timeout_ms
        )
        self.settle_delay_ms = (
            settle_delay_ms if settle_delay_ms is not None else settings.settle_delay_ms
        )
        self.capture_drain_ms = (
            capture_drain_ms
            if capture_drain_ms is not None
            else settings.capture_drain_ms
        )

    async def trace(self, url: str) -> TraceResult:
        """Load ``url`` and return the resource breakdown.

        Args:
            url: Absolute, validated http(s) URL.

        Returns:
            :class:`TraceResult` for the completed load.

        Raises:
            PageLoadTimeoutError: Navigation exceeded ``navigation_timeout_ms``.
            PageLoadFailureError: Navigation failed for another reason.
        """

        accumulator = BreakdownAccumulator()
        outcomes: list[CaptureOutcome] = []
        pending: dict[asyncio.Task[CaptureOutcome], str] = {}

        def _on_done(task: asyncio.Task[CaptureOutcome]) -> None:
            pending.pop(task, None)
            if not task.cancelled():
                outcomes.append(task.result())

        def _on_response(response: ResponseProtocol) -> None:
            task = asyncio.ensure_future(self._capture(response, accumulator))
            pending[task] = response.url
            task.add_done_callback(_on_done)

        async with self._session_factory() as page:
            page.on("response", _on_response)
            try:
                try:
                    await page.goto(
                        url,
                        wait_until="networkidle",
                        timeout=self.navigation_timeout_ms,
                    )
                except PlaywrightTimeoutError as exc:
                    LOGGER.warning(
                        "Navigation timed out",
                        extra={"url": url, "timeout_ms": self.navigation_timeout_ms},
                    )
                    raise PageLoadTimeoutError(url, self.navigation_timeout_ms) from exc
                except PlaywrightError as exc:
                    LOGGER.warning(
                        "Navigation failed", extra={"url": url, "error": exc.message}
                    )
                    raise PageLoadFailureError(url, exc.message) from exc

                if self.settle_delay_ms > 0:
                    await asyncio.sleep(self.settle_delay_ms / 1000.0)
                await self._drain(pending, accumulator, outcomes)
                final_url = page.url
            finally:
                # Responses emitted while the session closes are not measured.
                page.remove_listener("response", _on_response)
                await self._cancel(pending)

        result = TraceResult(
            breakdown=accumulator.snapshot(),
            transfer_count=accumulator.transfer_count,
            skipped_count=accumulator.skipped_count,
            empty_count=accumulator.empty_count,
            final_url=final_url,
            outcomes=tuple(outcomes),
        )
        LOGGER.info(
            "Page traced",
            extra={
                "url": url,
                "total_bytes": result.breakdown.total,
                "transfer_count": result.transfer_count,
                "skipped_count": result.skipped_count,
                "empty_count": result.empty_count,
            },
        )
        return result

    async def _capture(
        self, response: ResponseProtocol, accumulator: BreakdownAccumulator
    ) -> CaptureOutcome:
        """Buffer one response body and fold it into ``accumulator``."""

        response_url = response.url
        try:
            body = await response.body()
            content_type = response.headers.get("content-type")
            resource_role = response.request.resource_type
        except PlaywrightError as exc:
            LOGGER.debug(
                "Skipping response without a readable body",
                extra={"url": response_url, "reason": exc.message},
            )
            return accumulator.record(CaptureOutcome.skipped(response_url, exc.message))
        except Exception as exc:  # pragma: no cover
            LOGGER.debug(
                "Skipping response after unexpected capture error",
                extra={"url": response_url, "error_type": type(exc).__name__},
                exc_info=exc,
            )
            return accumulator.record(
                CaptureOutcome.skipped(response_url, type(exc).__name__)
            )

        transfer = ResourceTransfer(
            url=response_url,
            byte_size=len(body or b""),
            declared_content_type=content_type,
            resource_role=resource_role,
        )
        return accumulator.add(transfer)

    async def _drain(
        self,
        pending: dict[asyncio.Task[CaptureOutcome], str],
        accumulator: BreakdownAccumulator,
        outcomes: list[CaptureOutcome],
    ) -> None:
        """Wait for in-flight captures, skipping those that overrun."""

        if not pending:
            return
        in_flight = dict(pending)
        _, overdue = await asyncio.wait(
            set(in_flight), timeout=max(self.capture_drain_ms, 0) / 1000.0
        )
        for task in overdue:
            task.cancel()
        if overdue:
            await asyncio.gather(*overdue, return_exceptions=True)
            for task in overdue:
                if task.cancelled():
                    outcomes.append(
                        accumulator.record(
                            CaptureOutcome.skipped(
                                in_flight[task], "capture drain timeout"
                            )
                        )
                    )
            LOGGER.debug(
                "Cancelled overdue captures", extra={"count": len(overdue)}
            )

    @staticmethod
    async def _cancel(pending: dict[asyncio.Task[CaptureOutcome], str]) -> None:
        tasks = list(pending)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
