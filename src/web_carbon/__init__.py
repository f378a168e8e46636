"""Web Carbon - estimate the carbon footprint of web page visits."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "AnalysisError",
    "AnalysisReport",
    "InternalAnalysisError",
    "InvalidInputError",
    "PageCarbonEstimator",
    "PageLoadFailureError",
    "PageLoadTimeoutError",
    "PageTracer",
    "WebCarbonAnalyzer",
    "analyze",
    "run_analysis",
]

if TYPE_CHECKING:
    from .analyzer import WebCarbonAnalyzer, analyze, run_analysis
    from .errors import (
        AnalysisError,
        InternalAnalysisError,
        InvalidInputError,
        PageLoadFailureError,
        PageLoadTimeoutError,
    )
    from .estimation import PageCarbonEstimator
    from .schemas import AnalysisReport
    from .tracing import PageTracer


def __getattr__(name: str) -> Any:
    """Lazily import modules so Playwright loads only when tracing is used."""

    module_map = {
        "AnalysisError": "errors",
        "AnalysisReport": "schemas",
        "InternalAnalysisError": "errors",
        "InvalidInputError": "errors",
        "PageCarbonEstimator": "estimation",
        "PageLoadFailureError": "errors",
        "PageLoadTimeoutError": "errors",
        "PageTracer": "tracing",
        "WebCarbonAnalyzer": "analyzer",
        "analyze": "analyzer",
        "run_analysis": "analyzer",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
