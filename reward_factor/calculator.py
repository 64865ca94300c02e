"""
Reward factor classification.

Contracts are placed into a performance bucket by their weighted mean and a
consistency bucket by their weighted variance, both relative to population
percentiles. The bucket pair maps to the reward factor (r-Factor):

                       Low variance   Medium variance   High variance
    High mean              0.4             0.3              0.0
    Relatively high        0.2             0.1              0.0
    Below threshold        0.0             0.0              0.0
"""

from typing import Iterable, List, Optional, Set

from .models import (
    ContractMeasure,
    ContractRatingStats,
    MeanCategory,
    PercentileThresholds,
    RatingType,
    RewardFactorResult,
    ThresholdChanges,
    VarianceCategory,
)

MIN_RATING = 1.0
MAX_RATING = 5.0

R_FACTOR_TABLE = {
    (MeanCategory.HIGH, VarianceCategory.LOW): 0.4,
    (MeanCategory.HIGH, VarianceCategory.MEDIUM): 0.3,
    (MeanCategory.HIGH, VarianceCategory.HIGH): 0.0,
    (MeanCategory.RELATIVELY_HIGH, VarianceCategory.LOW): 0.2,
    (MeanCategory.RELATIVELY_HIGH, VarianceCategory.MEDIUM): 0.1,
    (MeanCategory.RELATIVELY_HIGH, VarianceCategory.HIGH): 0.0,
    (MeanCategory.BELOW_THRESHOLD, VarianceCategory.LOW): 0.0,
    (MeanCategory.BELOW_THRESHOLD, VarianceCategory.MEDIUM): 0.0,
    (MeanCategory.BELOW_THRESHOLD, VarianceCategory.HIGH): 0.0,
}


def classify_mean(mean: float, thresholds: PercentileThresholds) -> MeanCategory:
    """Classify a weighted mean against the 65th/85th percentiles."""
    if mean >= thresholds.mean_85th:
        return MeanCategory.HIGH
    if mean >= thresholds.mean_65th:
        return MeanCategory.RELATIVELY_HIGH
    return MeanCategory.BELOW_THRESHOLD


def classify_variance(variance: float, thresholds: PercentileThresholds) -> VarianceCategory:
    """Classify a weighted variance against the 30th/70th percentiles."""
    if variance < thresholds.variance_30th:
        return VarianceCategory.LOW
    if variance < thresholds.variance_70th:
        return VarianceCategory.MEDIUM
    return VarianceCategory.HIGH


def map_to_r_factor(mean_category: MeanCategory, variance_category: VarianceCategory) -> float:
    """Look up the reward factor for a mean/variance bucket pair."""
    return R_FACTOR_TABLE[(MeanCategory(mean_category), VarianceCategory(variance_category))]


def clamp_rating(rating: float) -> float:
    """Clamp a rating to the 1-5 star range."""
    return min(MAX_RATING, max(MIN_RATING, rating))


def calculate_reward_factor(
    contract_stats: ContractRatingStats,
    thresholds: PercentileThresholds,
    rating_type: RatingType,
    base_rating: Optional[float] = None
) -> RewardFactorResult:
    """
    Calculate the reward factor for a single contract.

    Args:
        contract_stats: Weighted statistics for the contract
        thresholds: Population percentile thresholds
        rating_type: Rating summary being adjusted
        base_rating: Rating before adjustment; defaults to the weighted mean

    Returns:
        RewardFactorResult with categories, r-Factor and adjusted rating
    """
    mean_category = classify_mean(contract_stats.weighted_mean, thresholds)
    variance_category = classify_variance(contract_stats.weighted_variance, thresholds)
    r_factor = map_to_r_factor(mean_category, variance_category)

    effective_base_rating = base_rating if base_rating is not None else contract_stats.weighted_mean

    return RewardFactorResult(
        contract_id=contract_stats.contract_id,
        rating_type=rating_type,
        weighted_mean=contract_stats.weighted_mean,
        weighted_variance=contract_stats.weighted_variance,
        mean_category=mean_category,
        variance_category=variance_category,
        r_factor=r_factor,
        base_rating=effective_base_rating,
        adjusted_rating=clamp_rating(effective_base_rating + r_factor),
    )


def filter_measures(
    measures: Iterable[ContractMeasure],
    removed_codes: Set[str]
) -> List[ContractMeasure]:
    """Drop measures whose upper-cased code is in removed_codes."""
    return [m for m in measures if m.code.upper() not in removed_codes]


def compare_thresholds(
    current: PercentileThresholds,
    projected: PercentileThresholds
) -> ThresholdChanges:
    """Elementwise projected minus current thresholds."""
    return ThresholdChanges(
        mean_65th_change=projected.mean_65th - current.mean_65th,
        mean_85th_change=projected.mean_85th - current.mean_85th,
        variance_30th_change=projected.variance_30th - current.variance_30th,
        variance_70th_change=projected.variance_70th - current.variance_70th,
    )
