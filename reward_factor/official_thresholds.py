"""
Official CMS reward factor thresholds.

Published percentile cut points from the CMS Star Ratings Technical Notes,
used to validate thresholds calculated from a contract population.

2026 values: CMS 2026 Star Ratings Technical Notes (last updated 09/04/2025).
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .models import OfficialComparison, PercentileThresholds, RatingType

DEFAULT_STAR_YEAR = 2026


@dataclass(frozen=True)
class ScenarioConfig:
    """Which measure groups were included when CMS computed the thresholds."""

    improvement_measures_included: bool
    new_measures_included: bool


@dataclass(frozen=True)
class RatingTypeValues:
    """One published threshold across the four rating types."""

    part_c: float
    part_d_mapd: float
    part_d_pdp: float
    overall_mapd: float

    def for_rating_type(self, rating_type: RatingType) -> float:
        return getattr(self, RatingType(rating_type).value)


@dataclass(frozen=True)
class OfficialThresholds:
    """Published thresholds for a single inclusion scenario."""

    scenario: ScenarioConfig
    performance_65th: RatingTypeValues
    performance_85th: RatingTypeValues
    variance_30th: RatingTypeValues
    variance_70th: RatingTypeValues


OFFICIAL_THRESHOLDS_2026: Tuple[OfficialThresholds, ...] = (
    OfficialThresholds(
        scenario=ScenarioConfig(improvement_measures_included=True, new_measures_included=True),
        performance_65th=RatingTypeValues(3.695652, 3.740741, 3.385522, 3.649351),
        performance_85th=RatingTypeValues(4.0, 4.0, 3.9133, 3.932432),
        variance_30th=RatingTypeValues(0.918435, 0.754209, 0.869005, 0.91485),
        variance_70th=RatingTypeValues(1.28517, 1.268986, 1.747939, 1.263462),
    ),
    OfficialThresholds(
        scenario=ScenarioConfig(improvement_measures_included=True, new_measures_included=False),
        performance_65th=RatingTypeValues(3.708333, 3.740741, 3.385522, 3.656716),
        performance_85th=RatingTypeValues(4.019608, 4.0, 3.9133, 3.943662),
        variance_30th=RatingTypeValues(0.909844, 0.754209, 0.869005, 0.905154),
        variance_70th=RatingTypeValues(1.281071, 1.268986, 1.747939, 1.272639),
    ),
    OfficialThresholds(
        scenario=ScenarioConfig(improvement_measures_included=False, new_measures_included=True),
        performance_65th=RatingTypeValues(3.717391, 3.769231, 3.318182, 3.686567),
        performance_85th=RatingTypeValues(4.020408, 4.136364, 4.117647, 3.953125),
        variance_30th=RatingTypeValues(0.914326, 0.736111, 0.74918, 0.908919),
        variance_70th=RatingTypeValues(1.328432, 1.318182, 1.814773, 1.26961),
    ),
    OfficialThresholds(
        scenario=ScenarioConfig(improvement_measures_included=False, new_measures_included=False),
        performance_65th=RatingTypeValues(3.736842, 3.769231, 3.318182, 3.7),
        performance_85th=RatingTypeValues(4.02381, 4.136364, 4.117647, 3.966667),
        variance_30th=RatingTypeValues(0.908942, 0.736111, 0.74918, 0.915156),
        variance_70th=RatingTypeValues(1.310167, 1.318182, 1.814773, 1.289063),
    ),
)

# Star Ratings year -> published scenarios
OFFICIAL_THRESHOLDS: Dict[int, Tuple[OfficialThresholds, ...]] = {
    2026: OFFICIAL_THRESHOLDS_2026,
}


def get_official_thresholds(
    improvement_measures_included: bool,
    new_measures_included: bool,
    star_year: int = DEFAULT_STAR_YEAR
) -> Optional[OfficialThresholds]:
    """
    Find the published thresholds for a scenario.

    Returns:
        OfficialThresholds, or None if the year or scenario is not published
    """
    for official in OFFICIAL_THRESHOLDS.get(star_year, ()):
        if (official.scenario.improvement_measures_included == improvement_measures_included
                and official.scenario.new_measures_included == new_measures_included):
            return official
    return None


def official_to_percentile_thresholds(
    official: OfficialThresholds,
    rating_type: RatingType
) -> PercentileThresholds:
    """Project a scenario's thresholds down to one rating type."""
    return PercentileThresholds(
        mean_65th=official.performance_65th.for_rating_type(rating_type),
        mean_85th=official.performance_85th.for_rating_type(rating_type),
        variance_30th=official.variance_30th.for_rating_type(rating_type),
        variance_70th=official.variance_70th.for_rating_type(rating_type),
    )


def _percent_difference(calculated: float, official: float) -> float:
    if official == 0:
        return 0.0
    return (calculated - official) / official * 100


def compare_with_official(
    calculated: PercentileThresholds,
    rating_type: RatingType,
    improvement_measures_included: bool = True,
    new_measures_included: bool = True,
    star_year: int = DEFAULT_STAR_YEAR
) -> Optional[OfficialComparison]:
    """
    Compare calculated thresholds against the published ones.

    Args:
        calculated: Thresholds computed from a contract population
        rating_type: Rating type column to compare against
        improvement_measures_included: Scenario flag
        new_measures_included: Scenario flag
        star_year: Star Ratings year of the published table

    Returns:
        OfficialComparison with absolute and percentage differences,
        or None when no published scenario matches
    """
    official = get_official_thresholds(
        improvement_measures_included, new_measures_included, star_year
    )
    if official is None:
        return None

    reference = official_to_percentile_thresholds(official, rating_type)
    fields = ("mean_65th", "mean_85th", "variance_30th", "variance_70th")

    return OfficialComparison(
        official=reference,
        differences=PercentileThresholds(**{
            f: getattr(calculated, f) - getattr(reference, f) for f in fields
        }),
        percent_differences=PercentileThresholds(**{
            f: _percent_difference(getattr(calculated, f), getattr(reference, f)) for f in fields
        }),
    )
