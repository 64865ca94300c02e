"""
Tests for reward factor classification and r-Factor mapping.

Run with: pytest test_reward_factor.py -v
"""

import pytest
from reward_factor import (
    ContractMeasure,
    ContractRatingStats,
    MeanCategory,
    PercentileThresholds,
    RatingType,
    VarianceCategory,
    calculate_contract_stats,
    calculate_reward_factor,
    classify_mean,
    classify_variance,
    compare_thresholds,
    compute_percentile_thresholds,
    filter_measures,
    map_to_r_factor,
)


@pytest.fixture
def thresholds():
    return PercentileThresholds(mean_65th=3.7, mean_85th=4.0, variance_30th=0.9, variance_70th=1.3)


def make_stats(mean, variance, count=5, contract_id="H1234"):
    return ContractRatingStats(
        contract_id=contract_id,
        weighted_mean=mean,
        weighted_variance=variance,
        measure_count=count,
        total_weight=float(count),
    )


class TestClassification:
    """Test mean and variance classification."""

    def test_mean_categories(self, thresholds):
        assert classify_mean(4.5, thresholds) == MeanCategory.HIGH
        assert classify_mean(3.8, thresholds) == MeanCategory.RELATIVELY_HIGH
        assert classify_mean(3.0, thresholds) == MeanCategory.BELOW_THRESHOLD

    def test_mean_boundaries_inclusive(self, thresholds):
        assert classify_mean(4.0, thresholds) == MeanCategory.HIGH
        assert classify_mean(3.7, thresholds) == MeanCategory.RELATIVELY_HIGH

    def test_variance_categories(self, thresholds):
        assert classify_variance(0.5, thresholds) == VarianceCategory.LOW
        assert classify_variance(1.0, thresholds) == VarianceCategory.MEDIUM
        assert classify_variance(2.0, thresholds) == VarianceCategory.HIGH

    def test_variance_boundaries_exclusive(self, thresholds):
        assert classify_variance(0.9, thresholds) == VarianceCategory.MEDIUM
        assert classify_variance(1.3, thresholds) == VarianceCategory.HIGH


class TestRFactorMapping:
    """Test the r-Factor lookup table."""

    @pytest.mark.parametrize("mean_category,variance_category,expected", [
        (MeanCategory.HIGH, VarianceCategory.LOW, 0.4),
        (MeanCategory.HIGH, VarianceCategory.MEDIUM, 0.3),
        (MeanCategory.HIGH, VarianceCategory.HIGH, 0.0),
        (MeanCategory.RELATIVELY_HIGH, VarianceCategory.LOW, 0.2),
        (MeanCategory.RELATIVELY_HIGH, VarianceCategory.MEDIUM, 0.1),
        (MeanCategory.RELATIVELY_HIGH, VarianceCategory.HIGH, 0.0),
        (MeanCategory.BELOW_THRESHOLD, VarianceCategory.LOW, 0.0),
        (MeanCategory.BELOW_THRESHOLD, VarianceCategory.MEDIUM, 0.0),
        (MeanCategory.BELOW_THRESHOLD, VarianceCategory.HIGH, 0.0),
    ])
    def test_mapping(self, mean_category, variance_category, expected):
        assert map_to_r_factor(mean_category, variance_category) == expected

    def test_accepts_string_values(self):
        assert map_to_r_factor("relatively_high", "medium") == 0.1


class TestCalculateRewardFactor:
    """Test single-contract reward factor results."""

    def test_high_low_contract(self, thresholds):
        result = calculate_reward_factor(make_stats(4.2, 0.5), thresholds, RatingType.PART_C)

        assert result.contract_id == "H1234"
        assert result.rating_type == RatingType.PART_C
        assert result.mean_category == MeanCategory.HIGH
        assert result.variance_category == VarianceCategory.LOW
        assert result.r_factor == 0.4
        assert result.base_rating == 4.2
        assert result.adjusted_rating == pytest.approx(4.6)

    def test_base_rating_override(self, thresholds):
        result = calculate_reward_factor(
            make_stats(3.8, 1.0), thresholds, RatingType.OVERALL_MAPD, base_rating=3.5
        )

        assert result.r_factor == 0.1
        assert result.base_rating == 3.5
        assert result.adjusted_rating == pytest.approx(3.6)

    def test_adjusted_rating_clamped_high(self, thresholds):
        result = calculate_reward_factor(
            make_stats(4.9, 0.1), thresholds, RatingType.PART_D_MAPD, base_rating=4.9
        )

        assert result.r_factor == 0.4
        assert result.adjusted_rating == 5.0

    def test_adjusted_rating_at_floor(self, thresholds):
        result = calculate_reward_factor(
            make_stats(2.0, 2.0), thresholds, RatingType.PART_D_PDP, base_rating=1.0
        )

        assert result.r_factor == 0.0
        assert result.adjusted_rating == 1.0

    def test_adjusted_rating_clamped_low(self, thresholds):
        result = calculate_reward_factor(
            make_stats(0.5, 0.0, count=1), thresholds, RatingType.PART_C
        )

        assert result.adjusted_rating == 1.0

    def test_single_measure_contract_classified(self, thresholds):
        stats = calculate_contract_stats(
            "H5555", [ContractMeasure(code="C01", star_value=5, weight=1, category="Part C")]
        )
        result = calculate_reward_factor(stats, thresholds, RatingType.PART_C)

        assert stats.measure_count == 1
        assert result.variance_category == VarianceCategory.LOW
        assert result.mean_category == MeanCategory.HIGH
        assert result.r_factor == 0.4


class TestEndToEnd:
    """Test stats -> thresholds -> reward factor for a small population."""

    def test_best_contract_gets_full_reward(self):
        star_patterns = {
            "H0001": [5, 5, 5],
            "H0002": [4, 4, 5],
            "H0003": [3, 4, 5],
            "H0004": [2, 3, 4],
            "H0005": [1, 3, 5],
        }
        stats = [
            calculate_contract_stats(contract_id, [
                ContractMeasure(code=f"C0{i + 1}", star_value=s, weight=1, category="Part C")
                for i, s in enumerate(stars)
            ])
            for contract_id, stars in star_patterns.items()
        ]
        thresholds = compute_percentile_thresholds(stats)
        results = {
            s.contract_id: calculate_reward_factor(s, thresholds, RatingType.PART_C)
            for s in stats
        }

        best = results["H0001"]
        assert best.mean_category == MeanCategory.HIGH
        assert best.variance_category == VarianceCategory.LOW
        assert best.r_factor == 0.4
        assert best.adjusted_rating == 5.0

        assert results["H0002"].mean_category == MeanCategory.RELATIVELY_HIGH
        assert results["H0002"].r_factor == 0.2

        for contract_id in ("H0003", "H0004", "H0005"):
            assert results[contract_id].mean_category == MeanCategory.BELOW_THRESHOLD
            assert results[contract_id].r_factor == 0.0


class TestHelpers:
    """Test measure filtering and threshold diffs."""

    def test_filter_measures_case_insensitive(self):
        data = [
            ContractMeasure(code="c01", star_value=4, weight=1),
            ContractMeasure(code="C02", star_value=3, weight=1),
            ContractMeasure(code="D01", star_value=5, weight=1),
        ]
        kept = filter_measures(data, {"C01", "D01"})

        assert [m.code for m in kept] == ["C02"]

    def test_compare_thresholds(self):
        current = PercentileThresholds(mean_65th=3.5, mean_85th=4.0, variance_30th=0.8, variance_70th=1.2)
        projected = PercentileThresholds(mean_65th=3.75, mean_85th=4.0, variance_30th=0.5, variance_70th=1.5)

        changes = compare_thresholds(current, projected)

        assert changes.mean_65th_change == pytest.approx(0.25)
        assert changes.mean_85th_change == 0
        assert changes.variance_30th_change == pytest.approx(-0.3)
        assert changes.variance_70th_change == pytest.approx(0.3)
