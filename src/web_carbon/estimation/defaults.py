"""Default data tables for emission estimation.

The module centralises access to the regional grid intensity table and the
fixed reference constants used by the comparison engine. Callers receive
fresh copies so no table is shared mutably between requests.
"""

from __future__ import annotations

import json
import logging
import pathlib
from types import MappingProxyType
from typing import Final, Mapping

from web_carbon.settings import WebCarbonSettings, get_settings

LOGGER = logging.getLogger(__name__)

DEFAULT_REGION: Final[str] = "global"

_REGION_CARBON_INTENSITY: Final[Mapping[str, float]] = MappingProxyType(
    {
        "global": 442.0,
        "eu": 253.0,
        "uk": 225.0,
        "us": 493.0,
        "asia": 575.0,
        "africa": 700.0,
    }
)

# Average passenger car emissions, gCO2/km.
CAR_EMISSIONS_PER_KM: Final[Mapping[str, float]] = MappingProxyType(
    {
        "global": 120.0,
        "eu": 95.0,
        "us": 180.0,
        "uk": 120.0,
    }
)

TREE_ABSORPTION_G_PER_YEAR: Final[float] = 21_000.0
PHONE_CHARGE_G: Final[float] = 0.008
SHORT_FLIGHT_G: Final[float] = 115_000.0
KETTLE_BOIL_G: Final[float] = 70.0
STREAMING_HOUR_G: Final[float] = 55.0
BEEF_BURGER_G: Final[float] = 6_000.0

AVERAGE_SITE_CO2_PER_VISIT_G: Final[float] = 1.76

COMPARISON_REGIONS: Final[tuple[str, ...]] = ("eu", "us", "asia", "africa")


def load_carbon_intensity_mapping(
    settings: WebCarbonSettings | None = None,
) -> dict[str, float]:
    """Load the region -> grid intensity mapping.

    Args:
        settings: Optional settings; read from the environment when omitted.

    Returns:
        Mapping of region codes to carbon intensity in gCO2e/kWh. The
        ``global`` entry is always present.

    Raises:
        FileNotFoundError: When ``WEB_CARBON_INTENSITY_FILE`` points at a
            missing file.
        RuntimeError: When the override file is not a JSON object of numbers.
    """

    settings = settings or get_settings()
    override_path = settings.carbon_intensity_file
    if not override_path:
        return dict(_REGION_CARBON_INTENSITY)

    path = pathlib.Path(override_path)
    if not path.exists():
        msg = f"WEB_CARBON_INTENSITY_FILE not found: {path}"
        raise FileNotFoundError(msg)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RuntimeError("Failed to parse carbon intensity override JSON") from exc
    if not isinstance(data, dict):
        raise RuntimeError("Carbon intensity override must be a JSON object")

    mapping: dict[str, float] = {}
    for key, value in data.items():
        try:
            mapping[str(key).strip().lower()] = float(value)
        except (TypeError, ValueError):
            LOGGER.warning("Skipping invalid carbon intensity for region %s", key)
    mapping.setdefault(DEFAULT_REGION, _REGION_CARBON_INTENSITY[DEFAULT_REGION])
    LOGGER.debug(
        "Loaded carbon intensity override",
        extra={"path": str(path), "regions": sorted(mapping)},
    )
    return mapping


def car_emissions_per_km(region: str | None) -> float:
    """Return car emissions per km for ``region``, defaulting to global."""

    key = (region or DEFAULT_REGION).strip().lower()
    return CAR_EMISSIONS_PER_KM.get(key, CAR_EMISSIONS_PER_KM[DEFAULT_REGION])
