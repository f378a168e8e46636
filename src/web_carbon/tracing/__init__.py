"""Page loading and network tracing."""

from __future__ import annotations

from web_carbon.tracing.accumulator import BreakdownAccumulator
from web_carbon.tracing.session import (
    SessionFactory,
    playwright_session,
    session_factory_from_settings,
)
from web_carbon.tracing.tracer import PageTracer

__all__ = [
    "BreakdownAccumulator",
    "PageTracer",
    "SessionFactory",
    "playwright_session",
    "session_factory_from_settings",
]
