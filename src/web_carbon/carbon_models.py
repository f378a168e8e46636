"""Emission model data types for the web-carbon toolkit.

All values are kept unrounded. Rounding for display happens once, when the
public :class:`~web_carbon.schemas.AnalysisReport` is built.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

__all__ = [
    "AverageWebsiteComparison",
    "ComparisonSet",
    "EmissionBreakdown",
    "EmissionModelConfig",
    "EmissionResult",
    "RegionalImpact",
]


@dataclass(frozen=True, slots=True)
class EmissionModelConfig:
    """Coefficients of the three-stage energy model for one grid region.

    Attributes:
        energy_per_gb: Aggregate energy per GB transferred (kWh/GB). Kept for
            reference; the stage coefficients drive the estimate.
        carbon_intensity: Grid carbon intensity in gCO2e/kWh.
        client_device_energy_per_gb: Client device energy (kWh/GB).
        data_center_energy_per_gb: Data centre energy (kWh/GB).
        network_energy_per_gb: Network energy (kWh/GB).
        green_hosting_discount_factor: Multiplier applied to the data centre
            stage for green-hosted sites, in ``(0, 1]``.
    """

    energy_per_gb: float = 0.06
    carbon_intensity: float = 442.0
    client_device_energy_per_gb: float = 0.02
    data_center_energy_per_gb: float = 0.015
    network_energy_per_gb: float = 0.025
    green_hosting_discount_factor: float = 0.5

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{item.name} must be a number")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{item.name} must be a finite, non-negative number")
        factor = self.green_hosting_discount_factor
        if not 0 < factor <= 1:
            raise ValueError("green_hosting_discount_factor must be in (0, 1]")

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the names accepted as configuration overrides."""

        return frozenset(item.name for item in fields(cls))


@dataclass(frozen=True, slots=True)
class EmissionBreakdown:
    """Per-stage CO2e in grams."""

    data_center: float
    network: float
    client: float

    @property
    def total(self) -> float:
        """Sum of the three stages."""

        return self.client + self.network + self.data_center


@dataclass(frozen=True, slots=True)
class EmissionResult:
    """Output of the emission model for a single page visit.

    Attributes:
        co2_per_visit_grams: Total CO2e per visit in grams.
        breakdown: Per-stage CO2e.
        client_energy_kwh: Client device energy per visit.
        network_energy_kwh: Network energy per visit.
        data_center_energy_kwh: Data centre energy per visit after any green
            hosting discount.
        carbon_intensity: Grid intensity used (gCO2e/kWh).
        green_hosting: Whether the green hosting discount was applied.
    """

    co2_per_visit_grams: float
    breakdown: EmissionBreakdown
    client_energy_kwh: float
    network_energy_kwh: float
    data_center_energy_kwh: float
    carbon_intensity: float
    green_hosting: bool


@dataclass(frozen=True, slots=True)
class ComparisonSet:
    """Human-relatable equivalences of a yearly CO2e figure."""

    car_km: float
    trees: float
    charges: float
    short_flights: float
    kettle_boils: float
    streaming_hours: float
    beef_burgers: float


@dataclass(frozen=True, slots=True)
class AverageWebsiteComparison:
    """Benchmark against a reference average web page."""

    co2_per_visit: float
    yearly_co2: float
    cleaner_than_average: int


@dataclass(frozen=True, slots=True)
class RegionalImpact:
    """Emissions of the same page evaluated on another region's grid."""

    region: str
    co2_per_visit: float
    yearly_co2: float
