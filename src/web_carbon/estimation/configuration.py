"""Region-aware configuration for :mod:`web_carbon.estimation`.

Every call builds a new frozen :class:`EmissionModelConfig`; there is no
module-level default instance for callers to mutate.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping

from web_carbon.carbon_models import EmissionModelConfig
from web_carbon.estimation.defaults import DEFAULT_REGION, load_carbon_intensity_mapping

__all__ = ["normalise_region", "resolve_config"]


def normalise_region(region: str | None, known: Mapping[str, float]) -> str:
    """Return the canonical region code, falling back to ``global``."""

    if not region:
        return DEFAULT_REGION
    key = region.strip().lower()
    return key if key in known else DEFAULT_REGION


def resolve_config(
    region: str | None,
    overrides: Mapping[str, float] | None = None,
    *,
    intensity_mapping: Mapping[str, float] | None = None,
) -> EmissionModelConfig:
    """Resolve the emission model configuration for a grid region.

    Args:
        region: Region code (``global``, ``eu``, ``uk``, ``us``, ``asia``,
            ``africa``). Unknown codes fall back to ``global``.
        overrides: Explicit field values applied after the regional
            intensity, e.g. ``{"carbon_intensity": 100.0}``.
        intensity_mapping: Pre-loaded region table. Loaded from
            :mod:`web_carbon.estimation.defaults` when omitted.

    Returns:
        A new frozen :class:`EmissionModelConfig`.

    Raises:
        ValueError: If ``overrides`` names an unknown field or produces an
            invalid configuration.
    """

    mapping = (
        intensity_mapping
        if intensity_mapping is not None
        else load_carbon_intensity_mapping()
    )
    resolved = normalise_region(region, mapping)
    base = EmissionModelConfig(carbon_intensity=float(mapping[resolved]))
    if not overrides:
        return base

    unknown = set(overrides) - EmissionModelConfig.field_names()
    if unknown:
        raise ValueError(f"Unknown configuration override(s): {sorted(unknown)}")
    return replace(base, **{key: float(value) for key, value in overrides.items()})
