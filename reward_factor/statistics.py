"""
Weighted star statistics and population percentiles.

Implements the performance and consistency measures from the CMS Star Ratings
Technical Notes:

- Weighted mean:      mean_j = sum(w_i * s_i) / sum(w_i)
- Weighted variance:  var_j = [n / (n - 1)] * sum(w_i * (s_i - mean_j)^2) / sum(w_i)

A measure only counts when both its star value and weight are positive finite
numbers.
"""

import math
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .models import ContractMeasure, ContractRatingStats, PercentileThresholds


def is_valid_measure(measure: ContractMeasure) -> bool:
    """Whether a measure contributes to the weighted statistics."""
    return (
        math.isfinite(measure.star_value)
        and math.isfinite(measure.weight)
        and measure.weight > 0
        and measure.star_value > 0
    )


def valid_measures(measures: Iterable[ContractMeasure]) -> List[ContractMeasure]:
    return [m for m in measures if is_valid_measure(m)]


def calculate_percentile(sorted_values: Sequence[float], percentile: float) -> float:
    """
    Percentile of an ascending sequence using linear interpolation between
    the closest ranks (NumPy's default "linear" method).

    Args:
        sorted_values: Values sorted ascending
        percentile: Percentile rank between 0 and 100

    Returns:
        Interpolated value, 0 for an empty sequence
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    if n == 1:
        return float(sorted_values[0])

    index = (percentile / 100) * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    fraction = index - lower

    if lower == upper:
        return float(sorted_values[lower])

    return float(sorted_values[lower] + fraction * (sorted_values[upper] - sorted_values[lower]))


def calculate_weighted_mean(measures: Iterable[ContractMeasure]) -> float:
    """Weighted mean of valid measure stars, 0 when there are none."""
    weighted_sum = 0.0
    total_weight = 0.0

    for m in valid_measures(measures):
        weighted_sum += m.weight * m.star_value
        total_weight += m.weight

    return weighted_sum / total_weight if total_weight > 0 else 0.0


def calculate_weighted_variance(
    measures: Iterable[ContractMeasure],
    mean: Optional[float] = None
) -> float:
    """
    Weighted variance of valid measure stars with Bessel's correction.

    Args:
        measures: Contract measures
        mean: Precomputed weighted mean; computed from the valid measures if omitted

    Returns:
        Variance, 0 when fewer than two measures are valid
    """
    valid = valid_measures(measures)
    n = len(valid)

    if n <= 1:
        return 0.0

    if mean is None:
        mean = calculate_weighted_mean(valid)

    sum_weighted_squared_deviations = 0.0
    total_weight = 0.0

    for m in valid:
        deviation = m.star_value - mean
        sum_weighted_squared_deviations += m.weight * deviation * deviation
        total_weight += m.weight

    if total_weight == 0:
        return 0.0

    bessel_correction = n / (n - 1)
    return bessel_correction * (sum_weighted_squared_deviations / total_weight)


def calculate_contract_stats(
    contract_id: str,
    measures: Iterable[ContractMeasure],
    filter_category: Optional[str] = None
) -> ContractRatingStats:
    """
    Calculate rating statistics for one contract.

    Args:
        contract_id: Contract identifier (e.g., 'H1234')
        measures: All measures reported for the contract
        filter_category: Restrict to 'Part C' or 'Part D' measures if given

    Returns:
        ContractRatingStats over the valid measures
    """
    if filter_category:
        measures = [m for m in measures if m.category == filter_category]

    valid = valid_measures(measures)
    weighted_mean = calculate_weighted_mean(valid)
    weighted_variance = calculate_weighted_variance(valid, weighted_mean)

    return ContractRatingStats(
        contract_id=contract_id,
        weighted_mean=weighted_mean,
        weighted_variance=weighted_variance,
        measure_count=len(valid),
        total_weight=sum(m.weight for m in valid),
    )


def compute_percentile_thresholds(
    contract_stats: Iterable[ContractRatingStats]
) -> PercentileThresholds:
    """
    Compute the mean 65th/85th and variance 30th/70th percentiles.

    Contracts with fewer than two valid measures have no meaningful variance
    and are left out of the population.
    """
    population = [c for c in contract_stats if c.measure_count > 1]
    if not population:
        return PercentileThresholds()

    means = np.sort(np.array([c.weighted_mean for c in population], dtype=float)).tolist()
    variances = np.sort(np.array([c.weighted_variance for c in population], dtype=float)).tolist()

    return PercentileThresholds(
        mean_65th=calculate_percentile(means, 65),
        mean_85th=calculate_percentile(means, 85),
        variance_30th=calculate_percentile(variances, 30),
        variance_70th=calculate_percentile(variances, 70),
    )
