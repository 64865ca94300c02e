"""
Tests for the official CMS threshold reference.

Run with: pytest test_official_thresholds.py -v
"""

import dataclasses

import pytest
from reward_factor import (
    OFFICIAL_THRESHOLDS_2026,
    PercentileThresholds,
    RatingType,
    compare_with_official,
    get_official_thresholds,
    official_to_percentile_thresholds,
)
from reward_factor.official_thresholds import _percent_difference


class TestOfficialLookup:
    """Test scenario lookup."""

    def test_four_scenarios(self):
        scenarios = {
            (t.scenario.improvement_measures_included, t.scenario.new_measures_included)
            for t in OFFICIAL_THRESHOLDS_2026
        }
        assert scenarios == {(True, True), (True, False), (False, True), (False, False)}

    def test_lookup_all_included(self):
        official = get_official_thresholds(True, True)

        assert official is not None
        assert official.performance_65th.part_c == 3.695652
        assert official.performance_85th.overall_mapd == 3.932432
        assert official.variance_30th.part_d_mapd == 0.754209
        assert official.variance_70th.part_d_pdp == 1.747939

    def test_lookup_none_included(self):
        official = get_official_thresholds(False, False)

        assert official.performance_65th.overall_mapd == 3.7
        assert official.performance_85th.part_c == 4.02381

    def test_unknown_year(self):
        assert get_official_thresholds(True, True, star_year=2025) is None

    def test_reference_is_immutable(self):
        official = get_official_thresholds(True, True)

        with pytest.raises(dataclasses.FrozenInstanceError):
            official.performance_65th = None


class TestOfficialProjection:
    """Test projection to a single rating type."""

    @pytest.mark.parametrize("rating_type,expected", [
        (RatingType.PART_C, (3.695652, 4.0, 0.918435, 1.28517)),
        (RatingType.PART_D_MAPD, (3.740741, 4.0, 0.754209, 1.268986)),
        (RatingType.PART_D_PDP, (3.385522, 3.9133, 0.869005, 1.747939)),
        (RatingType.OVERALL_MAPD, (3.649351, 3.932432, 0.91485, 1.263462)),
    ])
    def test_rating_type_columns(self, rating_type, expected):
        thresholds = official_to_percentile_thresholds(get_official_thresholds(True, True), rating_type)

        assert (thresholds.mean_65th, thresholds.mean_85th,
                thresholds.variance_30th, thresholds.variance_70th) == expected

    def test_no_improvement_scenario(self):
        thresholds = official_to_percentile_thresholds(
            get_official_thresholds(False, True), RatingType.PART_D_PDP
        )

        assert thresholds.mean_85th == 4.117647
        assert thresholds.variance_70th == 1.814773


class TestCompareWithOfficial:
    """Test calculated vs official comparison."""

    def test_exact_match(self):
        calculated = PercentileThresholds(
            mean_65th=3.695652, mean_85th=4.0, variance_30th=0.918435, variance_70th=1.28517
        )
        comparison = compare_with_official(calculated, RatingType.PART_C)

        assert comparison.differences == PercentileThresholds()
        assert comparison.percent_differences == PercentileThresholds()

    def test_percent_difference(self):
        calculated = PercentileThresholds(
            mean_65th=3.695652, mean_85th=4.4, variance_30th=0.918435, variance_70th=1.28517
        )
        comparison = compare_with_official(calculated, RatingType.PART_C)

        assert comparison.official.mean_85th == 4.0
        assert comparison.differences.mean_85th == pytest.approx(0.4)
        assert comparison.percent_differences.mean_85th == pytest.approx(10.0)
        assert comparison.percent_differences.mean_65th == 0

    def test_negative_difference(self):
        calculated = PercentileThresholds(
            mean_65th=3.0, mean_85th=4.0, variance_30th=0.918435, variance_70th=1.28517
        )
        comparison = compare_with_official(calculated, RatingType.PART_C)

        assert comparison.differences.mean_65th == pytest.approx(-0.695652)
        assert comparison.percent_differences.mean_65th < 0

    def test_scenario_flags(self):
        calculated = PercentileThresholds(mean_65th=3.7, mean_85th=4.0, variance_30th=0.9, variance_70th=1.3)

        comparison = compare_with_official(calculated, RatingType.OVERALL_MAPD, False, False)

        assert comparison.official.mean_65th == 3.7
        assert comparison.differences.mean_65th == 0

    def test_unknown_scenario(self):
        assert compare_with_official(PercentileThresholds(), RatingType.PART_C, star_year=2030) is None

    def test_zero_official_value(self):
        assert _percent_difference(1.0, 0.0) == 0
