"""Tests for yearly extrapolation, equivalences and benchmarks."""

import pytest

from web_carbon.estimation.reporting import (
    compare_equivalents,
    compare_to_average,
    regional_impact,
    yearly_co2,
)


def test_yearly_co2_scenario():
    assert yearly_co2(0.5, 10_000) == 60_000


def test_yearly_co2_rejects_negative_visits():
    with pytest.raises(ValueError):
        yearly_co2(0.5, -1)


def test_yearly_co2_zero_traffic():
    assert yearly_co2(3.0, 0) == 0.0


def test_equivalence_scenarios():
    assert compare_equivalents(12_000, "global").car_km == 100
    assert compare_equivalents(21_000, "global").trees == 1
    assert compare_equivalents(8, "global").charges == 1000
    assert compare_equivalents(700, "global").kettle_boils == pytest.approx(10)


def test_equivalences_use_regional_car_factor():
    assert compare_equivalents(18_000, "us").car_km == 100
    assert compare_equivalents(9_500, "EU").car_km == 100
    # Regions without a car factor use the global one.
    assert compare_equivalents(12_000, "asia").car_km == 100


def test_equivalences_are_rounded():
    comparisons = compare_equivalents(60_000)
    assert comparisons.trees == 2.86
    assert comparisons.short_flights == 0.52
    assert comparisons.streaming_hours == 1090.91
    assert comparisons.beef_burgers == 10


def test_equivalences_reject_negative():
    with pytest.raises(ValueError):
        compare_equivalents(-1.0)


@pytest.mark.parametrize(
    ("co2_per_visit", "expected"),
    [
        (0.88, 50),
        (1.76, 0),
        (3.52, -100),
        (10.0, -100),
        (0.0, 0),
    ],
)
def test_cleaner_than_average(co2_per_visit, expected):
    visits = 10_000
    result = compare_to_average(yearly_co2(co2_per_visit, visits), visits)
    assert result.cleaner_than_average == expected
    assert result.co2_per_visit == 1.76
    assert result.yearly_co2 == pytest.approx(1.76 * visits * 12)


def test_cleaner_than_average_with_zero_traffic_is_neutral():
    assert compare_to_average(0.0, 0).cleaner_than_average == 0


def test_regional_impact_rows_follow_region_order():
    rows = regional_impact(1.0, False, 1_000)

    assert [row.region for row in rows] == ["eu", "us", "asia", "africa"]
    eu = rows[0]
    assert eu.co2_per_visit == pytest.approx(0.06 * 253.0)
    assert eu.yearly_co2 == pytest.approx(eu.co2_per_visit * 12_000)


def test_regional_impact_custom_mapping():
    rows = regional_impact(
        1.0,
        True,
        10,
        ("eu", "moon"),
        intensity_mapping={"global": 100.0, "eu": 50.0},
    )
    assert rows[0].co2_per_visit == pytest.approx(0.0525 * 50.0)
    # Unknown regions are evaluated on the global grid.
    assert rows[1].co2_per_visit == pytest.approx(0.0525 * 100.0)
