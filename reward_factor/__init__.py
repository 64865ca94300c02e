"""
CMS Star Ratings Reward Factor

Reproduces the CMS reward factor (r-Factor) methodology for Medicare Advantage
and Part D contracts: weighted mean and variance of measure stars, population
percentile thresholds, mean/variance classification, and what-if analysis of
removing measures from the Star Ratings.
"""

from .models import (
    ContractMeasure,
    ContractRatingStats,
    PercentileThresholds,
    RewardFactorResult,
    RewardFactorImpact,
    ImpactSummary,
    RatingType,
    MeanCategory,
    VarianceCategory,
    ExclusionSide,
)
from .statistics import (
    calculate_percentile,
    calculate_weighted_mean,
    calculate_weighted_variance,
    calculate_contract_stats,
    compute_percentile_thresholds,
)
from .calculator import (
    classify_mean,
    classify_variance,
    map_to_r_factor,
    calculate_reward_factor,
    filter_measures,
    compare_thresholds,
)
from .analyzer import (
    CMS_REMOVED_MEASURE_CODES,
    analyze_reward_factor_impact,
    summarize_impact,
    final_adjusted_ratings,
)
from .official_thresholds import (
    OFFICIAL_THRESHOLDS_2026,
    get_official_thresholds,
    official_to_percentile_thresholds,
    compare_with_official,
)
from .loader import build_contracts_data, load_contracts_data

__version__ = "1.0.0"
__all__ = [
    "ContractMeasure",
    "ContractRatingStats",
    "PercentileThresholds",
    "RewardFactorResult",
    "RewardFactorImpact",
    "ImpactSummary",
    "RatingType",
    "MeanCategory",
    "VarianceCategory",
    "ExclusionSide",
    "calculate_percentile",
    "calculate_weighted_mean",
    "calculate_weighted_variance",
    "calculate_contract_stats",
    "compute_percentile_thresholds",
    "classify_mean",
    "classify_variance",
    "map_to_r_factor",
    "calculate_reward_factor",
    "filter_measures",
    "compare_thresholds",
    "CMS_REMOVED_MEASURE_CODES",
    "analyze_reward_factor_impact",
    "summarize_impact",
    "final_adjusted_ratings",
    "OFFICIAL_THRESHOLDS_2026",
    "get_official_thresholds",
    "official_to_percentile_thresholds",
    "compare_with_official",
    "build_contracts_data",
    "load_contracts_data",
]
