"""
Reward factor impact analysis.

Answers "what happens to reward factors if these measures are removed?" by
running the full calculation twice, once over every measure and once with the
removed measure codes filtered out, then diffing thresholds and per-contract
results.
"""

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional

from .calculator import calculate_reward_factor, compare_thresholds, filter_measures
from .models import (
    AdjustedRatingChange,
    ContractImpact,
    ContractMeasure,
    ContractMover,
    ContractRatingStats,
    ExcludedContract,
    ExclusionSide,
    ImpactSummary,
    RatingType,
    RewardFactorImpact,
    RFactorDistribution,
)
from .official_thresholds import DEFAULT_STAR_YEAR, compare_with_official
from .statistics import calculate_contract_stats, compute_percentile_thresholds

logger = logging.getLogger(__name__)

# Measures CMS announced for removal from the 2028 and 2029 Star Ratings
CMS_REMOVED_MEASURE_CODES = frozenset({
    "C07",  # Special Needs Plan (SNP) Care Management - 2029
    "C11",  # Diabetes Care - Eye Exam - 2029
    "C19",  # Statin Therapy for Patients with Cardiovascular Disease - 2028
    "C24",  # Customer Service - 2029
    "C25",  # Rating of Health Care Quality - 2029
    "C28",  # Complaints about the Health Plan - 2029
    "C29",  # Members Choosing to Leave the Plan - 2029
    "C31",  # Plan Makes Timely Decisions about Appeals - 2029
    "C32",  # Reviewing Appeals Decisions - 2029
    "C33",  # Call Center - Foreign Language Interpreter and TTY Availability - 2028
    "D01",  # Call Center - Foreign Language Interpreter and TTY Availability - 2028
    "D02",  # Complaints about the Drug Plan - 2029
    "D03",  # Members Choosing to Leave the Plan - 2029
    "D07",  # Medicare Plan Finder Price Accuracy - 2029
})


def normalize_codes(codes: Iterable[str]) -> frozenset:
    """Strip and upper-case measure codes, dropping blanks."""
    return frozenset(c.strip().upper() for c in codes if c and c.strip())


def analyze_reward_factor_impact(
    contracts_data: Mapping[str, Iterable[ContractMeasure]],
    removed_codes: Iterable[str],
    rating_type: RatingType,
    filter_category: Optional[str] = None
) -> RewardFactorImpact:
    """
    Compare current reward factors against a projection with measures removed.

    Current and projected thresholds are each computed from the contracts that
    keep at least two valid measures on that side. Only contracts qualifying on
    both sides appear in contract_results; the rest are listed in
    excluded_contracts.

    Args:
        contracts_data: Contract ID -> measures reported for that contract
        removed_codes: Measure codes to drop in the projection
        rating_type: Rating summary being analyzed
        filter_category: Restrict to 'Part C' or 'Part D' measures if given

    Returns:
        RewardFactorImpact with both threshold sets and per-contract changes
    """
    removed = normalize_codes(removed_codes)

    current_stats: Dict[str, ContractRatingStats] = {}
    projected_stats: Dict[str, ContractRatingStats] = {}
    excluded: List[ExcludedContract] = []

    for contract_id, measures in contracts_data.items():
        measures = list(measures)
        current = calculate_contract_stats(contract_id, measures, filter_category)
        projected = calculate_contract_stats(
            contract_id, filter_measures(measures, removed), filter_category
        )

        has_current = current.measure_count > 1
        has_projected = projected.measure_count > 1
        if has_current:
            current_stats[contract_id] = current
        if has_projected:
            projected_stats[contract_id] = projected

        if not (has_current and has_projected):
            excluded.append(ExcludedContract(
                contract_id=contract_id,
                current_measure_count=current.measure_count,
                projected_measure_count=projected.measure_count,
                side=(
                    ExclusionSide.PROJECTED if has_current
                    else ExclusionSide.CURRENT if has_projected
                    else ExclusionSide.BOTH
                ),
            ))

    current_thresholds = compute_percentile_thresholds(current_stats.values())
    projected_thresholds = compute_percentile_thresholds(projected_stats.values())

    logger.debug(
        "%s thresholds from %d current / %d projected contracts: current=%s projected=%s",
        RatingType(rating_type).value, len(current_stats), len(projected_stats),
        current_thresholds, projected_thresholds
    )

    contract_results: List[ContractImpact] = []
    for contract_id in contracts_data:
        current = current_stats.get(contract_id)
        projected = projected_stats.get(contract_id)
        if current is None or projected is None:
            continue

        current_result = calculate_reward_factor(current, current_thresholds, rating_type)
        projected_result = calculate_reward_factor(projected, projected_thresholds, rating_type)

        contract_results.append(ContractImpact(
            contract_id=contract_id,
            current=current_result,
            projected=projected_result,
            r_factor_change=projected_result.r_factor - current_result.r_factor,
        ))

    if excluded:
        logger.warning(
            "%d of %d contracts excluded from %s reward factor comparison "
            "(fewer than 2 valid measures)",
            len(excluded), len(contracts_data), RatingType(rating_type).value
        )

    return RewardFactorImpact(
        rating_type=rating_type,
        removed_codes=sorted(removed),
        current_thresholds=current_thresholds,
        projected_thresholds=projected_thresholds,
        threshold_changes=compare_thresholds(current_thresholds, projected_thresholds),
        contract_results=contract_results,
        excluded_contracts=excluded,
    )


def _mover(impact: ContractImpact) -> ContractMover:
    return ContractMover(
        contract_id=impact.contract_id,
        current_r_factor=impact.current.r_factor,
        projected_r_factor=impact.projected.r_factor,
        change=impact.r_factor_change,
        current_mean=impact.current.weighted_mean,
        projected_mean=impact.projected.weighted_mean,
        current_variance=impact.current.weighted_variance,
        projected_variance=impact.projected.weighted_variance,
    )


def _distribution(changes: List[float]) -> RFactorDistribution:
    dist = RFactorDistribution()
    for change in changes:
        if change >= 0.4:
            dist.gains_by_0_4 += 1
        elif change >= 0.3:
            dist.gains_by_0_3 += 1
        elif change >= 0.2:
            dist.gains_by_0_2 += 1
        elif change > 0:
            dist.gains_by_0_1 += 1
        elif change <= -0.4:
            dist.losses_by_0_4 += 1
        elif change <= -0.3:
            dist.losses_by_0_3 += 1
        elif change <= -0.2:
            dist.losses_by_0_2 += 1
        elif change < 0:
            dist.losses_by_0_1 += 1
    return dist


def summarize_impact(
    impact: RewardFactorImpact,
    improvement_measures_included: bool = True,
    new_measures_included: bool = True,
    top_n: int = 10,
    star_year: int = DEFAULT_STAR_YEAR
) -> ImpactSummary:
    """
    Aggregate an impact analysis into gain/loss counts and top movers.

    The current thresholds are also compared against the published CMS
    thresholds for the given scenario.

    Raises:
        ValueError: If top_n is negative
    """
    if top_n < 0:
        raise ValueError(f"top_n must be 0 or greater, got {top_n}")

    results = impact.contract_results
    # r-Factor steps are 0.1; rounding keeps 0.3 - 0.1 out of the 0.1 bucket
    changes = [round(c.r_factor_change, 1) for c in results]

    gains = [c for c, change in zip(results, changes) if change > 0]
    losses = [c for c, change in zip(results, changes) if change < 0]
    avg_change = sum(c.r_factor_change for c in results) / len(results) if results else 0.0

    top_gainers = sorted(gains, key=lambda c: c.r_factor_change, reverse=True)[:top_n]
    top_losers = sorted(losses, key=lambda c: c.r_factor_change)[:top_n]

    return ImpactSummary(
        rating_type=impact.rating_type,
        current_thresholds=impact.current_thresholds,
        projected_thresholds=impact.projected_thresholds,
        threshold_changes=impact.threshold_changes,
        official_comparison=compare_with_official(
            impact.current_thresholds,
            impact.rating_type,
            improvement_measures_included,
            new_measures_included,
            star_year,
        ),
        total_contracts=len(results),
        contracts_gaining_r_factor=len(gains),
        contracts_losing_r_factor=len(losses),
        contracts_unchanged=len(results) - len(gains) - len(losses),
        avg_r_factor_change=avg_change,
        excluded_contracts=len(impact.excluded_contracts),
        distribution=_distribution(changes),
        top_gainers=[_mover(c) for c in top_gainers],
        top_losers=[_mover(c) for c in top_losers],
    )


def round_to_half(rating: float) -> float:
    """Round a rating to the nearest half star (halves round up)."""
    return math.floor(rating * 2 + 0.5) / 2


def final_adjusted_ratings(impact: RewardFactorImpact) -> List[AdjustedRatingChange]:
    """Current and projected mean-plus-r-Factor ratings for each contract."""
    changes = []
    for c in impact.contract_results:
        current = c.current.adjusted_rating
        projected = c.projected.adjusted_rating
        changes.append(AdjustedRatingChange(
            contract_id=c.contract_id,
            current_adjusted_rating=current,
            projected_adjusted_rating=projected,
            change=projected - current,
            star_bracket_change=(round_to_half(projected) - round_to_half(current)) * 2,
        ))
    return changes
