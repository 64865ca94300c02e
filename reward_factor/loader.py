"""
Build per-contract measure lists from star rating and measure weight tables.

Expected inputs mirror the Star Ratings data tables:

- metrics: one row per contract and measure with columns
  contract_id, metric_code, metric_category, star_rating and optionally year
- measures: one row per measure with columns code, weight and optionally year

Star ratings may be numbers or text such as "4 out of 5 stars"; the leading
number is used and anything else ("Plan too small to be measured") is skipped.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from .models import ContractMeasure

logger = logging.getLogger(__name__)

METRIC_COLUMNS = ("contract_id", "metric_code", "star_rating")
MEASURE_COLUMNS = ("code", "weight")
YEAR_COLUMN = "year"

LEADING_NUMBER = r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))"


def _require_columns(df: pd.DataFrame, columns, table: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{table} table is missing required columns: {', '.join(missing)}")


def _clean_str(series: pd.Series) -> pd.Series:
    return series.astype("string").str.strip()


def _for_year(df: pd.DataFrame, year: Optional[int], table: str) -> pd.DataFrame:
    """Restrict a table to one reporting year when it carries a year column."""
    if YEAR_COLUMN not in df.columns:
        return df
    years = pd.to_numeric(df[YEAR_COLUMN], errors="coerce")
    if year is None:
        if years.nunique() > 1:
            logger.warning(
                "%s table holds %d reporting years and no year was selected; rows are pooled",
                table, years.nunique()
            )
        return df
    return df[years == year]


def parse_star_ratings(series: pd.Series) -> pd.Series:
    """
    Parse star ratings to floats using the leading number of each value.

    "4 out of 5 stars" -> 4.0, "3.5" -> 3.5, "Plan too small to be measured" -> NaN
    """
    leading = series.astype("string").str.extract(LEADING_NUMBER, expand=False)
    return pd.to_numeric(leading, errors="coerce").astype(float)


def build_measure_weights(measures: pd.DataFrame, year: Optional[int] = None) -> Dict[str, float]:
    """
    Map measure code to weight, keeping only positive finite weights.

    Raises:
        ValueError: If code or weight columns are missing
    """
    _require_columns(measures, MEASURE_COLUMNS, "measures")
    measures = _for_year(measures, year, "measures")

    codes = _clean_str(measures["code"])
    weights = pd.to_numeric(measures["weight"], errors="coerce")

    keep = codes.notna() & (codes != "") & np.isfinite(weights.astype(float))
    keep &= weights > 0

    return dict(zip(codes[keep].tolist(), weights[keep].astype(float).tolist()))


def build_contracts_data(
    metrics: pd.DataFrame,
    measures: pd.DataFrame,
    year: Optional[int] = None
) -> Dict[str, List[ContractMeasure]]:
    """
    Group star ratings by contract and attach measure weights.

    Rows without a contract, code or parseable positive star rating are
    skipped, as are rows for measures with no positive weight. Contracts
    left with no measures are omitted.

    Args:
        metrics: Contract/measure star ratings
        measures: Measure weights
        year: Reporting year to keep from tables that have a year column

    Returns:
        Contract ID (upper-cased) -> list of ContractMeasure

    Raises:
        ValueError: If either table is missing required columns
    """
    _require_columns(metrics, METRIC_COLUMNS, "metrics")
    weights = build_measure_weights(measures, year)
    metrics = _for_year(metrics, year, "metrics")

    contract_ids = _clean_str(metrics["contract_id"]).str.upper()
    codes = _clean_str(metrics["metric_code"])
    if "metric_category" in metrics.columns:
        categories = _clean_str(metrics["metric_category"]).fillna("")
    else:
        categories = pd.Series("", index=metrics.index, dtype="string")
    stars = parse_star_ratings(metrics["star_rating"])

    valid = (
        contract_ids.notna() & (contract_ids != "")
        & codes.notna() & (codes != "")
        & np.isfinite(stars)
        & (stars > 0)
    )
    valid &= codes.isin(list(weights))

    skipped = int((~valid).sum())
    if skipped:
        logger.debug("Skipped %d of %d metric rows without usable star or weight", skipped, len(metrics))

    contracts_data: Dict[str, List[ContractMeasure]] = {}
    for contract_id, code, category, star in zip(
        contract_ids[valid], codes[valid], categories[valid], stars[valid]
    ):
        contracts_data.setdefault(str(contract_id), []).append(
            ContractMeasure(
                code=str(code),
                star_value=float(star),
                weight=weights[str(code)],
                category=str(category),
            )
        )

    logger.info("Loaded %d measures for %d contracts", int(valid.sum()), len(contracts_data))
    return contracts_data


def load_contracts_data(
    metrics_csv: Union[str, Path],
    measures_csv: Union[str, Path],
    year: Optional[int] = None
) -> Dict[str, List[ContractMeasure]]:
    """Read metrics and measures CSV files and build contract measure lists."""
    metrics = pd.read_csv(metrics_csv, dtype={"contract_id": str, "metric_code": str, "star_rating": str})
    measures = pd.read_csv(measures_csv, dtype={"code": str})
    return build_contracts_data(metrics, measures, year)
