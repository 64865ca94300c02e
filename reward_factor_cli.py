#!/usr/bin/env python
"""
Command-line interface for CMS reward factor analysis.

Quick tool for computing reward factor thresholds from Star Ratings data
tables and projecting the effect of removing measures.
"""

import argparse
import logging
import sys
from reward_factor import (
    CMS_REMOVED_MEASURE_CODES,
    RatingType,
    analyze_reward_factor_impact,
    calculate_contract_stats,
    compare_with_official,
    compute_percentile_thresholds,
    get_official_thresholds,
    load_contracts_data,
    official_to_percentile_thresholds,
    summarize_impact,
)

THRESHOLD_FIELDS = (
    ("mean_65th", "Mean 65th"),
    ("mean_85th", "Mean 85th"),
    ("variance_30th", "Variance 30th"),
    ("variance_70th", "Variance 70th"),
)


def _print_thresholds(title, thresholds):
    print(f"{title}:")
    for field, label in THRESHOLD_FIELDS:
        print(f"  {label + ':':<16} {getattr(thresholds, field):.6f}")


def _print_comparison(comparison):
    print(f"  {'':<16} {'Official':>10} {'Diff':>10} {'Diff %':>9}")
    for field, label in THRESHOLD_FIELDS:
        print(
            f"  {label + ':':<16} {getattr(comparison.official, field):>10.6f} "
            f"{getattr(comparison.differences, field):>+10.6f} "
            f"{getattr(comparison.percent_differences, field):>+8.2f}%"
        )


def _non_negative_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def _load(args):
    try:
        return load_contracts_data(args.metrics, args.measures, args.year)
    except (ValueError, FileNotFoundError) as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)


def run_impact(args):
    """Project reward factors with measures removed."""
    contracts_data = _load(args)
    removed = args.remove.split(",") if args.remove else sorted(CMS_REMOVED_MEASURE_CODES)

    impact = analyze_reward_factor_impact(
        contracts_data, removed, RatingType(args.rating_type), args.category
    )
    summary = summarize_impact(
        impact,
        improvement_measures_included=args.improvement,
        new_measures_included=args.new_measures,
        top_n=args.top,
    )

    print("\n" + "=" * 60)
    print("REWARD FACTOR IMPACT")
    print("=" * 60)
    print(f"Rating Type:     {summary.rating_type.value}")
    if args.category:
        print(f"Category:        {args.category}")
    if args.year is not None:
        print(f"Year:            {args.year}")
    print(f"Removed Codes:   {', '.join(impact.removed_codes)}")
    print()
    _print_thresholds("Current Thresholds", summary.current_thresholds)
    print()
    _print_thresholds("Projected Thresholds", summary.projected_thresholds)
    print()
    print("Threshold Changes:")
    changes = summary.threshold_changes
    print(f"  Mean 65th:      {changes.mean_65th_change:+.6f}")
    print(f"  Mean 85th:      {changes.mean_85th_change:+.6f}")
    print(f"  Variance 30th:  {changes.variance_30th_change:+.6f}")
    print(f"  Variance 70th:  {changes.variance_70th_change:+.6f}")

    if summary.official_comparison:
        print()
        print("Current vs Official CMS:")
        _print_comparison(summary.official_comparison)

    print()
    print(f"Contracts Compared:  {summary.total_contracts}")
    print(f"  Gaining r-Factor:  {summary.contracts_gaining_r_factor}")
    print(f"  Losing r-Factor:   {summary.contracts_losing_r_factor}")
    print(f"  Unchanged:         {summary.contracts_unchanged}")
    print(f"  Avg Change:        {summary.avg_r_factor_change:+.4f}")
    if summary.excluded_contracts:
        print(f"Excluded (<2 measures): {summary.excluded_contracts}")

    for title, movers in (("Top Gainers", summary.top_gainers), ("Top Losers", summary.top_losers)):
        if not movers:
            continue
        print()
        print(f"{title}:")
        print(f"  {'Contract':<10} {'Current':>8} {'Projected':>10} {'Change':>8}")
        for m in movers:
            print(f"  {m.contract_id:<10} {m.current_r_factor:>8.1f} {m.projected_r_factor:>10.1f} {m.change:>+8.1f}")

    print("=" * 60)
    print()


def run_thresholds(args):
    """Compute population thresholds and compare with official values."""
    contracts_data = _load(args)
    stats = [
        calculate_contract_stats(contract_id, measures, args.category)
        for contract_id, measures in contracts_data.items()
    ]
    thresholds = compute_percentile_thresholds(stats)

    print("\n" + "=" * 60)
    print("REWARD FACTOR THRESHOLDS")
    print("=" * 60)
    if args.year is not None:
        print(f"Year:            {args.year}")
    print(f"Contracts:       {sum(1 for s in stats if s.measure_count > 1)} of {len(stats)} with 2+ measures")
    print()
    _print_thresholds("Calculated", thresholds)

    comparison = compare_with_official(
        thresholds, RatingType(args.rating_type), args.improvement, args.new_measures
    )
    print()
    if comparison is None:
        print("No official thresholds published for this scenario")
    else:
        print(f"Official CMS ({args.rating_type}):")
        _print_comparison(comparison)
    print("=" * 60)
    print()


def show_official(args):
    """Print official thresholds for a scenario."""
    official = get_official_thresholds(args.improvement, args.new_measures, args.year)

    if official is None:
        print(f"\nERROR: No official thresholds for {args.year} scenario", file=sys.stderr)
        sys.exit(1)

    thresholds = official_to_percentile_thresholds(official, RatingType(args.rating_type))

    print("\n" + "=" * 60)
    print(f"OFFICIAL CMS {args.year} REWARD FACTOR THRESHOLDS")
    print("=" * 60)
    print(f"Rating Type:           {args.rating_type}")
    print(f"Improvement Measures:  {'included' if args.improvement else 'excluded'}")
    print(f"New Measures:          {'included' if args.new_measures else 'excluded'}")
    print()
    _print_thresholds("Thresholds", thresholds)
    print("=" * 60)
    print()


def _add_scenario_arguments(parser):
    parser.add_argument('--rating-type', default=RatingType.OVERALL_MAPD.value,
                        choices=[t.value for t in RatingType],
                        help='Rating type (default: overall_mapd)')
    parser.add_argument('--no-improvement', dest='improvement', action='store_false',
                        help='Use the scenario without improvement measures')
    parser.add_argument('--no-new-measures', dest='new_measures', action='store_false',
                        help='Use the scenario without new measures')


def _add_data_arguments(parser):
    parser.add_argument('metrics', help='CSV of contract_id, metric_code, metric_category, star_rating')
    parser.add_argument('measures', help='CSV of code, weight')
    parser.add_argument('--category', choices=['Part C', 'Part D'],
                        help='Restrict to Part C or Part D measures')
    parser.add_argument('--year', type=int,
                        help='Reporting year to use when the CSVs have a year column')


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="CMS Star Ratings Reward Factor CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Project reward factors with the announced CMS measure removals
  %(prog)s impact metrics.csv measures.csv

  # Part C only, removing specific measures
  %(prog)s impact metrics.csv measures.csv --category "Part C" --rating-type part_c --remove C07,C11

  # Compare calculated thresholds with the published values
  %(prog)s thresholds metrics.csv measures.csv --rating-type part_c --category "Part C" --year 2026

  # Show published thresholds
  %(prog)s official --rating-type part_d_pdp --no-improvement
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    impact_parser = subparsers.add_parser('impact', help='Project reward factors with measures removed')
    _add_data_arguments(impact_parser)
    _add_scenario_arguments(impact_parser)
    impact_parser.add_argument('--remove', help='Comma-separated measure codes (default: CMS announced removals)')
    impact_parser.add_argument('--top', type=_non_negative_int, default=10, help='Number of top movers to show (default: 10)')
    impact_parser.set_defaults(func=run_impact)

    thresholds_parser = subparsers.add_parser('thresholds', help='Compute population thresholds')
    _add_data_arguments(thresholds_parser)
    _add_scenario_arguments(thresholds_parser)
    thresholds_parser.set_defaults(func=run_thresholds)

    official_parser = subparsers.add_parser('official', help='Show official CMS thresholds')
    _add_scenario_arguments(official_parser)
    official_parser.add_argument('--year', type=int, default=2026, help='Star Ratings year (default: 2026)')
    official_parser.set_defaults(func=show_official)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    args.func(args)


if __name__ == '__main__':
    main()
