"""
Example usage of the CMS reward factor calculator.

This script demonstrates the reward factor pipeline on a small synthetic
contract population.
"""

from reward_factor import (
    CMS_REMOVED_MEASURE_CODES,
    ContractMeasure,
    RatingType,
    analyze_reward_factor_impact,
    calculate_contract_stats,
    calculate_reward_factor,
    compare_with_official,
    compute_percentile_thresholds,
    final_adjusted_ratings,
    summarize_impact,
)

# Measure code -> weight (subset of the 2026 Star Ratings measures)
WEIGHTS = {
    "C01": 1.0, "C07": 1.0, "C11": 1.0, "C19": 1.0, "C24": 2.0,
    "C25": 2.0, "C28": 2.0, "D01": 2.0, "D02": 2.0, "D08": 3.0,
}

# Contract -> measure code -> star rating
STARS = {
    "H0001": {"C01": 5, "C07": 5, "C11": 4, "C19": 5, "C24": 4, "C25": 5, "C28": 5, "D01": 5, "D02": 5, "D08": 4},
    "H0002": {"C01": 4, "C07": 3, "C11": 4, "C19": 4, "C24": 3, "C25": 4, "C28": 4, "D01": 5, "D02": 4, "D08": 4},
    "H0003": {"C01": 3, "C07": 2, "C11": 5, "C19": 4, "C24": 3, "C25": 3, "C28": 4, "D01": 3, "D02": 3, "D08": 5},
    "H0004": {"C01": 2, "C07": 4, "C11": 3, "C19": 3, "C24": 4, "C25": 3, "C28": 2, "D01": 4, "D02": 2, "D08": 3},
    "H0005": {"C01": 4, "C07": 5, "C11": 2, "C19": 5, "C24": 5, "C25": 4, "C28": 5, "D01": 2, "D02": 5, "D08": 4},
    "H0006": {"C01": 3, "C07": 3, "C11": 3, "C19": 4, "C24": 4, "C25": 4, "C28": 3, "D01": 4, "D02": 3, "D08": 3},
    "H0007": {"C01": 5, "C07": 4, "C11": 5, "C19": 5, "C24": 3, "C25": 4, "C28": 4, "D01": 3, "D02": 4, "D08": 5},
}


def build_contracts_data():
    return {
        contract_id: [
            ContractMeasure(
                code=code,
                star_value=star,
                weight=WEIGHTS[code],
                category="Part D" if code.startswith("D") else "Part C",
            )
            for code, star in stars.items()
        ]
        for contract_id, stars in STARS.items()
    }


def example_1_reward_factors():
    """Example 1: Reward factors for a contract population."""
    print("=" * 80)
    print("Example 1: Reward Factors")
    print("=" * 80)

    contracts_data = build_contracts_data()
    stats = [calculate_contract_stats(cid, measures) for cid, measures in contracts_data.items()]
    thresholds = compute_percentile_thresholds(stats)

    print(f"\nMean 65th/85th:     {thresholds.mean_65th:.4f} / {thresholds.mean_85th:.4f}")
    print(f"Variance 30th/70th: {thresholds.variance_30th:.4f} / {thresholds.variance_70th:.4f}")
    print()
    print(f"{'Contract':<10} {'Mean':>7} {'Variance':>9} {'Mean Cat':<16} {'Var Cat':<8} {'r-Factor':>8} {'Adjusted':>9}")
    print("-" * 80)

    for s in stats:
        result = calculate_reward_factor(s, thresholds, RatingType.OVERALL_MAPD)
        print(
            f"{result.contract_id:<10} {result.weighted_mean:>7.3f} {result.weighted_variance:>9.3f} "
            f"{result.mean_category.value:<16} {result.variance_category.value:<8} "
            f"{result.r_factor:>8.1f} {result.adjusted_rating:>9.3f}"
        )

    comparison = compare_with_official(thresholds, RatingType.OVERALL_MAPD)
    print(f"\nMean 85th vs official CMS 2026: {comparison.percent_differences.mean_85th:+.2f}%")
    print()


def example_2_measure_removal():
    """Example 2: Impact of the announced CMS measure removals."""
    print("=" * 80)
    print("Example 2: Measure Removal Impact")
    print("=" * 80)

    impact = analyze_reward_factor_impact(
        build_contracts_data(), CMS_REMOVED_MEASURE_CODES, RatingType.OVERALL_MAPD
    )
    summary = summarize_impact(impact)

    changes = impact.threshold_changes
    print(f"\nMean 85th change:     {changes.mean_85th_change:+.4f}")
    print(f"Variance 70th change: {changes.variance_70th_change:+.4f}")
    print(f"\nGaining: {summary.contracts_gaining_r_factor}  "
          f"Losing: {summary.contracts_losing_r_factor}  "
          f"Unchanged: {summary.contracts_unchanged}")
    print()
    print(f"{'Contract':<10} {'Current r':>10} {'Projected r':>12} {'Current':>8} {'Projected':>10}")
    print("-" * 80)

    ratings = {r.contract_id: r for r in final_adjusted_ratings(impact)}
    for c in impact.contract_results:
        r = ratings[c.contract_id]
        print(
            f"{c.contract_id:<10} {c.current.r_factor:>10.1f} {c.projected.r_factor:>12.1f} "
            f"{r.current_adjusted_rating:>8.3f} {r.projected_adjusted_rating:>10.3f}"
        )
    print()


def main():
    """Run all examples."""
    print("\n")
    print("=" * 80)
    print("CMS REWARD FACTOR - EXAMPLE USAGE")
    print("=" * 80)
    print()

    example_1_reward_factors()
    example_2_measure_removal()

    print("=" * 80)
    print("All examples completed successfully!")
    print("=" * 80)
    print()


if __name__ == "__main__":
    main()
