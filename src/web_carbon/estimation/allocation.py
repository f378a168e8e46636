"""Per-category apportionment and the normalised green score."""

from __future__ import annotations

import math
from typing import Final

from web_carbon.classification import ResourceCategory
from web_carbon.page_models import ResourceBreakdown

__all__ = [
    "BEST_CO2_PER_VISIT",
    "WORST_CO2_PER_VISIT",
    "allocate_co2_by_resource",
    "green_score",
    "score_rating",
]

BEST_CO2_PER_VISIT: Final[float] = 0.2
WORST_CO2_PER_VISIT: Final[float] = 4.0


def allocate_co2_by_resource(
    co2_per_visit: float, breakdown: ResourceBreakdown
) -> dict[str, float]:
    """Split per-visit CO2e across categories by their share of bytes.

    Args:
        co2_per_visit: Total CO2e per visit in grams.
        breakdown: Bytes per resource category.

    Returns:
        Mapping of category name to grams. All zeros when no bytes were
        transferred.
    """

    total = breakdown.total
    if total <= 0:
        return {category.value: 0.0 for category in ResourceCategory}
    return {
        category.value: co2_per_visit * (breakdown.bytes_for(category) / total)
        for category in ResourceCategory
    }


def green_score(co2_per_visit: float) -> int:
    """Map per-visit CO2e onto a 0-100 score, higher is better.

    100 at or below 0.2 g, 0 at or above 4.0 g, linear in between and rounded
    half up.
    """

    if co2_per_visit <= BEST_CO2_PER_VISIT:
        return 100
    if co2_per_visit >= WORST_CO2_PER_VISIT:
        return 0
    ratio = (co2_per_visit - BEST_CO2_PER_VISIT) / (
        WORST_CO2_PER_VISIT - BEST_CO2_PER_VISIT
    )
    score = math.floor(100.0 - ratio * 100.0 + 0.5)
    return max(0, min(100, int(score)))


def score_rating(score: int) -> str:
    """Derive an A+ to F letter from a green score."""

    if score < 0 or score > 100:
        raise ValueError("score must be within [0, 100]")
    if score >= 95:
        return "A+"
    if score >= 80:
        return "A"
    if score >= 65:
        return "B"
    if score >= 50:
        return "C"
    if score >= 35:
        return "D"
    if score >= 20:
        return "E"
    return "F"
