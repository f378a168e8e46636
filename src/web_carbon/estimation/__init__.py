"""Emission estimation package.

Provides the region resolver, the three-stage emission model, allocation
and scoring helpers, and the :class:`PageCarbonEstimator` that chains them.
"""

from __future__ import annotations

from .allocation import allocate_co2_by_resource, green_score
from .configuration import resolve_config
from .engine import bytes_to_gb, estimate
from .estimator import PageCarbonEstimate, PageCarbonEstimator
from .reporting import compare_equivalents, compare_to_average, regional_impact, yearly_co2

__all__ = [
    "PageCarbonEstimate",
    "PageCarbonEstimator",
    "allocate_co2_by_resource",
    "bytes_to_gb",
    "compare_equivalents",
    "compare_to_average",
    "estimate",
    "green_score",
    "regional_impact",
    "resolve_config",
    "yearly_co2",
]
