"""High-level emission estimation for a traced page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from web_carbon.carbon_models import (
    AverageWebsiteComparison,
    ComparisonSet,
    EmissionModelConfig,
    EmissionResult,
    RegionalImpact,
)
from web_carbon.estimation import defaults as estimation_defaults
from web_carbon.estimation.allocation import allocate_co2_by_resource, green_score
from web_carbon.estimation.configuration import normalise_region, resolve_config
from web_carbon.estimation.engine import bytes_to_gb, estimate
from web_carbon.estimation.reporting import (
    compare_equivalents,
    compare_to_average,
    regional_impact,
    yearly_co2,
)
from web_carbon.page_models import ResourceBreakdown
from web_carbon.settings import WebCarbonSettings

__all__ = ["PageCarbonEstimate", "PageCarbonEstimator"]


@dataclass(frozen=True, slots=True)
class PageCarbonEstimate:
    """Unrounded estimation output for one page at one traffic volume."""

    region: str
    monthly_visits: int
    data_transfer_gb: float
    config: EmissionModelConfig
    emissions: EmissionResult
    yearly_co2: float
    co2_by_resource: Mapping[str, float]
    green_score: int
    comparisons: ComparisonSet
    average_website: AverageWebsiteComparison
    regional_impact: tuple[RegionalImpact, ...]

    @property
    def co2_per_visit(self) -> float:
        return self.emissions.co2_per_visit_grams


class PageCarbonEstimator:
    """Estimate emissions for traced page weight.

    The grid intensity table is loaded once per estimator; each call to
    :meth:`estimate_page` resolves its own frozen configuration from it.
    """

    def __init__(
        self,
        *,
        overrides: Mapping[str, float] | None = None,
        comparison_regions: Iterable[str] = estimation_defaults.COMPARISON_REGIONS,
        settings: WebCarbonSettings | None = None,
    ) -> None:
        """Initialise the estimator.

        Args:
            overrides: Model coefficient overrides applied to every region.
            comparison_regions: Regions used for the regional impact sweep.
            settings: Optional settings used to locate an intensity override
                file.
        """

        self.logger = logging.getLogger("web_carbon.estimator")
        self._intensity_mapping = estimation_defaults.load_carbon_intensity_mapping(
            settings
        )
        self._overrides = dict(overrides or {})
        self._comparison_regions = tuple(comparison_regions)

    @property
    def available_regions(self) -> dict[str, float]:
        """Return the region -> intensity table in use."""

        return dict(self._intensity_mapping)

    def config_for(self, region: str | None) -> EmissionModelConfig:
        """Resolve the model configuration for ``region``."""

        return resolve_config(
            region, self._overrides, intensity_mapping=self._intensity_mapping
        )

    def estimate_page(
        self,
        breakdown: ResourceBreakdown,
        *,
        green_hosting: bool,
        region: str | None = None,
        monthly_visits: int = 10_000,
    ) -> PageCarbonEstimate:
        """Run the full estimation chain for a resource breakdown.

        Args:
            breakdown: Bytes per resource category from the tracer.
            green_hosting: Hosting oracle verdict.
            region: Grid region; unknown codes fall back to ``global``.
            monthly_visits: Traffic volume used for yearly figures.

        Returns:
            :class:`PageCarbonEstimate` with unrounded values.

        Raises:
            ValueError: If ``monthly_visits`` is negative.
        """

        if monthly_visits < 0:
            raise ValueError("monthly_visits must be non-negative")

        resolved_region = normalise_region(region, self._intensity_mapping)
        config = self.config_for(resolved_region)
        data_transfer_gb = bytes_to_gb(breakdown.total)
        emissions = estimate(data_transfer_gb, green_hosting, config)
        co2 = emissions.co2_per_visit_grams
        yearly = yearly_co2(co2, monthly_visits)

        impact = tuple(
            regional_impact(
                data_transfer_gb,
                green_hosting,
                monthly_visits,
                self._comparison_regions,
                intensity_mapping=self._intensity_mapping,
            )
        )

        self.logger.info(
            "Page emissions estimated",
            extra={
                "region": resolved_region,
                "total_bytes": breakdown.total,
                "green_hosting": green_hosting,
                "co2_per_visit_grams": co2,
                "carbon_intensity": config.carbon_intensity,
            },
        )
        return PageCarbonEstimate(
            region=resolved_region,
            monthly_visits=monthly_visits,
            data_transfer_gb=data_transfer_gb,
            config=config,
            emissions=emissions,
            yearly_co2=yearly,
            co2_by_resource=allocate_co2_by_resource(co2, breakdown),
            green_score=green_score(co2),
            comparisons=compare_equivalents(yearly, resolved_region),
            average_website=compare_to_average(yearly, monthly_visits),
            regional_impact=impact,
        )
