"""Tests for the page-level estimation chain."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from web_carbon.estimation import PageCarbonEstimator
from web_carbon.page_models import BYTES_PER_MB, ResourceBreakdown
from web_carbon.settings import WebCarbonSettings

_FIFTY_MB = ResourceBreakdown(images=40 * BYTES_PER_MB, js=10 * BYTES_PER_MB)


@pytest.fixture
def estimator() -> PageCarbonEstimator:
    return PageCarbonEstimator(settings=WebCarbonSettings())


def test_estimate_page_chain(estimator: PageCarbonEstimator):
    result = estimator.estimate_page(_FIFTY_MB, green_hosting=False)

    assert result.region == "global"
    assert result.data_transfer_gb == pytest.approx(50 / 1024)
    assert result.co2_per_visit == pytest.approx(1.294921875)
    assert result.yearly_co2 == pytest.approx(1.294921875 * 120_000)
    assert result.green_score == 71
    assert result.co2_by_resource["images"] == pytest.approx(1.294921875 * 0.8)
    assert result.comparisons.car_km == 1294.92
    assert result.average_website.cleaner_than_average == 26
    assert [row.region for row in result.regional_impact] == ["eu", "us", "asia", "africa"]


def test_green_hosting_lowers_estimate(estimator: PageCarbonEstimator):
    dirty = estimator.estimate_page(_FIFTY_MB, green_hosting=False)
    green = estimator.estimate_page(_FIFTY_MB, green_hosting=True)
    assert green.co2_per_visit < dirty.co2_per_visit
    assert green.green_score >= dirty.green_score


def test_region_resolution_per_call(estimator: PageCarbonEstimator):
    eu = estimator.estimate_page(_FIFTY_MB, green_hosting=False, region="EU")
    unknown = estimator.estimate_page(_FIFTY_MB, green_hosting=False, region="atlantis")

    assert eu.region == "eu"
    assert eu.config.carbon_intensity == 253.0
    assert unknown.region == "global"
    assert unknown.config.carbon_intensity == 442.0


def test_empty_page(estimator: PageCarbonEstimator):
    result = estimator.estimate_page(ResourceBreakdown(), green_hosting=False)
    assert result.co2_per_visit == 0.0
    assert result.green_score == 100
    assert result.average_website.cleaner_than_average == 0
    assert set(result.co2_by_resource.values()) == {0.0}


def test_negative_visits_rejected(estimator: PageCarbonEstimator):
    with pytest.raises(ValueError):
        estimator.estimate_page(_FIFTY_MB, green_hosting=False, monthly_visits=-10)


def test_overrides_apply_to_every_region():
    estimator = PageCarbonEstimator(
        overrides={"carbon_intensity": 100.0}, settings=WebCarbonSettings()
    )
    result = estimator.estimate_page(_FIFTY_MB, green_hosting=False, region="asia")
    assert result.config.carbon_intensity == 100.0


def test_intensity_file_loaded_once(tmp_path: Path):
    override = tmp_path / "grid.json"
    override.write_text(json.dumps({"eu": 100}), encoding="utf-8")
    estimator = PageCarbonEstimator(
        settings=WebCarbonSettings(carbon_intensity_file=str(override))
    )
    override.unlink()

    result = estimator.estimate_page(_FIFTY_MB, green_hosting=False, region="eu")

    assert result.config.carbon_intensity == 100.0
    assert estimator.available_regions == {"eu": 100.0, "global": 442.0}
