"""
Data models for CMS Star Ratings reward factor calculations.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RatingType(str, Enum):
    """Star Rating summary the reward factor is applied to."""

    PART_C = "part_c"
    PART_D_MAPD = "part_d_mapd"
    PART_D_PDP = "part_d_pdp"
    OVERALL_MAPD = "overall_mapd"


class MeanCategory(str, Enum):
    """Performance bucket of a contract's weighted mean."""

    HIGH = "high"
    RELATIVELY_HIGH = "relatively_high"
    BELOW_THRESHOLD = "below_threshold"


class VarianceCategory(str, Enum):
    """Consistency bucket of a contract's weighted variance."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExclusionSide(str, Enum):
    """Side of an impact comparison a contract lacked measures on."""

    CURRENT = "current"
    PROJECTED = "projected"
    BOTH = "both"


class ContractMeasure(BaseModel):
    """One measure's star performance for one contract."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Measure identifier, e.g. 'C01' or 'D03'")
    star_value: float = Field(..., description="Measure star rating (1-5)")
    weight: float = Field(..., description="Measure weight in the summary rating")
    category: str = Field("", description="Measure category, e.g. 'Part C' or 'Part D'")

    @field_validator('code')
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Normalize measure code."""
        if not v or not v.strip():
            raise ValueError("Measure code cannot be empty")
        return v.strip()

    @field_validator('category')
    @classmethod
    def validate_category(cls, v: str) -> str:
        return v.strip()


class ContractRatingStats(BaseModel):
    """Weighted mean and variance of a contract's valid measure stars."""

    contract_id: str
    weighted_mean: float
    weighted_variance: float
    measure_count: int = Field(..., description="Number of valid measures used", ge=0)
    total_weight: float


class PercentileThresholds(BaseModel):
    """Population cut points used to classify mean and variance."""

    mean_65th: float = 0.0
    mean_85th: float = 0.0
    variance_30th: float = 0.0
    variance_70th: float = 0.0


class ThresholdChanges(BaseModel):
    """Projected minus current thresholds."""

    mean_65th_change: float
    mean_85th_change: float
    variance_30th_change: float
    variance_70th_change: float


class RewardFactorResult(BaseModel):
    """Reward factor classification for a single contract."""

    contract_id: str
    rating_type: RatingType
    weighted_mean: float
    weighted_variance: float
    mean_category: MeanCategory
    variance_category: VarianceCategory
    r_factor: float = Field(..., description="Reward factor (0.0 - 0.4)")
    base_rating: float = Field(..., description="Rating before the reward factor")
    adjusted_rating: float = Field(..., description="Base rating plus reward factor, clamped to 1-5")


class ContractImpact(BaseModel):
    """Current versus projected reward factor for one contract."""

    contract_id: str
    current: RewardFactorResult
    projected: RewardFactorResult
    r_factor_change: float


class ExcludedContract(BaseModel):
    """A contract left out of the impact comparison for lack of measures."""

    contract_id: str
    current_measure_count: int
    projected_measure_count: int
    side: ExclusionSide = Field(..., description="Which side fell below two measures")


class RewardFactorImpact(BaseModel):
    """Result of re-running the reward factor with a set of measures removed."""

    rating_type: RatingType
    removed_codes: List[str] = Field(default_factory=list)
    current_thresholds: PercentileThresholds
    projected_thresholds: PercentileThresholds
    threshold_changes: ThresholdChanges
    contract_results: List[ContractImpact] = Field(default_factory=list)
    excluded_contracts: List[ExcludedContract] = Field(default_factory=list)


class OfficialComparison(BaseModel):
    """Calculated thresholds diffed against the CMS published values."""

    official: PercentileThresholds
    differences: PercentileThresholds
    percent_differences: PercentileThresholds


class RFactorDistribution(BaseModel):
    """Counts of contracts by size of reward factor change."""

    gains_by_0_4: int = 0
    gains_by_0_3: int = 0
    gains_by_0_2: int = 0
    gains_by_0_1: int = 0
    losses_by_0_1: int = 0
    losses_by_0_2: int = 0
    losses_by_0_3: int = 0
    losses_by_0_4: int = 0


class ContractMover(BaseModel):
    """A contract whose reward factor moved under the projection."""

    contract_id: str
    current_r_factor: float
    projected_r_factor: float
    change: float
    current_mean: float
    projected_mean: float
    current_variance: float
    projected_variance: float


class ImpactSummary(BaseModel):
    """Aggregate view of a reward factor impact analysis."""

    rating_type: RatingType
    current_thresholds: PercentileThresholds
    projected_thresholds: PercentileThresholds
    threshold_changes: ThresholdChanges
    official_comparison: Optional[OfficialComparison] = None

    total_contracts: int
    contracts_gaining_r_factor: int
    contracts_losing_r_factor: int
    contracts_unchanged: int
    avg_r_factor_change: float
    excluded_contracts: int = 0

    distribution: RFactorDistribution
    top_gainers: List[ContractMover] = Field(default_factory=list)
    top_losers: List[ContractMover] = Field(default_factory=list)


class AdjustedRatingChange(BaseModel):
    """Final rating (mean plus reward factor) before and after a projection."""

    contract_id: str
    current_adjusted_rating: float
    projected_adjusted_rating: float
    change: float
    star_bracket_change: float = Field(
        ...,
        description="Change in half-star brackets (positive = moved up)"
    )
