"""Three-stage energy and carbon model for page transfers."""

from __future__ import annotations

import logging
import math

from web_carbon.carbon_models import EmissionBreakdown, EmissionModelConfig, EmissionResult

__all__ = ["BYTES_PER_GB", "bytes_to_gb", "estimate"]

_LOGGER = logging.getLogger("web_carbon.estimation.engine")

BYTES_PER_GB = 1024**3


def bytes_to_gb(num_bytes: int) -> float:
    """Convert a byte count to gigabytes (binary)."""

    if num_bytes < 0:
        raise ValueError("num_bytes must be non-negative")
    return num_bytes / BYTES_PER_GB


def estimate(
    data_transfer_gb: float,
    green_hosting: bool,
    config: EmissionModelConfig,
) -> EmissionResult:
    """Estimate per-visit CO2e for a page transfer.

    Each stage is linear in the transferred volume; the green hosting
    discount only touches the data centre stage.

    Args:
        data_transfer_gb: Transferred volume in GB.
        green_hosting: Whether the site is served from green hosting.
        config: Region-resolved model coefficients.

    Returns:
        :class:`EmissionResult` whose breakdown total equals
        ``co2_per_visit_grams``.

    Raises:
        ValueError: If ``data_transfer_gb`` is negative or not finite.
    """

    if not math.isfinite(data_transfer_gb) or data_transfer_gb < 0:
        raise ValueError("data_transfer_gb must be a finite, non-negative number")

    discount = config.green_hosting_discount_factor if green_hosting else 1.0
    client_energy = data_transfer_gb * config.client_device_energy_per_gb
    network_energy = data_transfer_gb * config.network_energy_per_gb
    data_center_energy = data_transfer_gb * config.data_center_energy_per_gb * discount

    intensity = config.carbon_intensity
    breakdown = EmissionBreakdown(
        data_center=data_center_energy * intensity,
        network=network_energy * intensity,
        client=client_energy * intensity,
    )
    result = EmissionResult(
        co2_per_visit_grams=breakdown.total,
        breakdown=breakdown,
        client_energy_kwh=client_energy,
        network_energy_kwh=network_energy,
        data_center_energy_kwh=data_center_energy,
        carbon_intensity=intensity,
        green_hosting=green_hosting,
    )
    _LOGGER.debug(
        "Emission estimate computed",
        extra={
            "data_transfer_gb": data_transfer_gb,
            "green_hosting": green_hosting,
            "carbon_intensity": intensity,
            "co2_per_visit_grams": result.co2_per_visit_grams,
        },
    )
    return result
