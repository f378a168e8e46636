"""Yearly extrapolation, equivalences and benchmark helpers."""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from web_carbon.carbon_models import (
    AverageWebsiteComparison,
    ComparisonSet,
    RegionalImpact,
)
from web_carbon.estimation import defaults
from web_carbon.estimation.configuration import resolve_config
from web_carbon.estimation.engine import estimate

__all__ = [
    "compare_equivalents",
    "compare_to_average",
    "regional_impact",
    "yearly_co2",
]


def yearly_co2(co2_per_visit: float, monthly_visits: int) -> float:
    """Scale per-visit CO2e to a year of traffic."""

    if monthly_visits < 0:
        raise ValueError("monthly_visits must be non-negative")
    return co2_per_visit * monthly_visits * 12


def compare_equivalents(yearly_co2_g: float, region: str = "global") -> ComparisonSet:
    """Convert yearly CO2e into everyday equivalences.

    Args:
        yearly_co2_g: Yearly CO2e in grams.
        region: Region used to pick the car emissions factor.

    Returns:
        :class:`ComparisonSet` with every value rounded to 2 decimals.

    Raises:
        ValueError: If ``yearly_co2_g`` is negative.
    """

    if yearly_co2_g < 0:
        raise ValueError("yearly_co2_g must be non-negative")
    return ComparisonSet(
        car_km=round(yearly_co2_g / defaults.car_emissions_per_km(region), 2),
        trees=round(yearly_co2_g / defaults.TREE_ABSORPTION_G_PER_YEAR, 2),
        charges=round(yearly_co2_g / defaults.PHONE_CHARGE_G, 2),
        short_flights=round(yearly_co2_g / defaults.SHORT_FLIGHT_G, 2),
        kettle_boils=round(yearly_co2_g / defaults.KETTLE_BOIL_G, 2),
        streaming_hours=round(yearly_co2_g / defaults.STREAMING_HOUR_G, 2),
        beef_burgers=round(yearly_co2_g / defaults.BEEF_BURGER_G, 2),
    )


def compare_to_average(
    yearly_co2_g: float,
    monthly_visits: int,
    *,
    average_co2_per_visit: float = defaults.AVERAGE_SITE_CO2_PER_VISIT_G,
) -> AverageWebsiteComparison:
    """Benchmark yearly CO2e against an average page at the same traffic.

    ``cleaner_than_average`` is positive when the page is cleaner than the
    reference and negative when it is dirtier, clamped to [-100, 100].
    """

    average_yearly = yearly_co2(average_co2_per_visit, monthly_visits)
    if yearly_co2_g <= 0 or average_yearly <= 0:
        cleaner = 0
    else:
        ratio = 1.0 - yearly_co2_g / average_yearly
        cleaner = max(-100, min(100, math.floor(ratio * 100 + 0.5)))
    return AverageWebsiteComparison(
        co2_per_visit=average_co2_per_visit,
        yearly_co2=average_yearly,
        cleaner_than_average=int(cleaner),
    )


def regional_impact(
    data_transfer_gb: float,
    green_hosting: bool,
    monthly_visits: int,
    regions: Iterable[str] = defaults.COMPARISON_REGIONS,
    *,
    intensity_mapping: Mapping[str, float] | None = None,
) -> list[RegionalImpact]:
    """Re-run the emission model for the same transfer on other grids.

    Each region resolves its own configuration, so the primary result is
    never touched.
    """

    rows: list[RegionalImpact] = []
    for region in regions:
        config = resolve_config(region, intensity_mapping=intensity_mapping)
        result = estimate(data_transfer_gb, green_hosting, config)
        rows.append(
            RegionalImpact(
                region=region,
                co2_per_visit=result.co2_per_visit_grams,
                yearly_co2=yearly_co2(result.co2_per_visit_grams, monthly_visits),
            )
        )
    return rows
