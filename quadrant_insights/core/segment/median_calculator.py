# core/segment/median_calculator.py

import logging
from typing import Dict, Iterable

import numpy as np # type: ignore
import pandas as pd # type: ignore

logger = logging.getLogger(__name__)

INACTIVE_COLUMN = "avg_inactive_days"
DAYS_AGO_COLUMN = "avg_days_ago"

MEDIAN_INACTIVE = "median_inactive"
MEDIAN_DAYS_AGO = "median_days_ago"

# statistic name -> metric column
MEDIAN_DEFINITIONS = {
    MEDIAN_INACTIVE: INACTIVE_COLUMN,
    MEDIAN_DAYS_AGO: DAYS_AGO_COLUMN,
}


def compute_median(values: Iterable[float]) -> float:
    """
    Median of a numeric sample.

    The input is copied before sorting. Odd counts return the middle
    element, even counts the mean of the two middle elements. An empty
    sample (or one made only of NaN) has a median of 0.
    """
    data = np.array(list(values), dtype=float)
    data = data[~np.isnan(data)]
    if data.size == 0:
        return 0.0

    ordered = np.sort(data)
    mid = ordered.size // 2
    if ordered.size % 2 == 1:
        return float(ordered[mid])
    return float((ordered[mid - 1] + ordered[mid]) / 2)


def zero_medians() -> Dict[str, float]:
    """Baseline used when no collection is available."""
    return {name: 0.0 for name in MEDIAN_DEFINITIONS}


class MedianCalculator:
    """
    Computes the collection-wide reference medians used for classification.
    """

    def __init__(self, df: pd.DataFrame):
        """
        Initialize median calculator.

        Parameters
        ----------
        df : pd.DataFrame
            Entity collection with normalized metric columns
        """
        self.df = df
        self.medians: Dict[str, float] = {}

    def compute_medians(self) -> Dict[str, float]:
        """
        Compute both reference medians in a single pass over the collection.

        Returns
        -------
        Dict[str, float]
            ``median_inactive`` and ``median_days_ago``
        """
        logger.info("[STEP 2] Calculating collection medians over %s entities...", len(self.df))

        for name, column in MEDIAN_DEFINITIONS.items():
            self._compute_single_median(name, column)

        logger.info("✅ Medians computed")
        return self.medians

    def _compute_single_median(self, name: str, column: str) -> None:
        if column in self.df.columns:
            value = compute_median(pd.to_numeric(self.df[column], errors="coerce"))
            self.medians[name] = value
            logger.info("   ➡️ %s: %.3f", name, value)
        else:
            self.medians[name] = 0.0
            logger.warning("   ⚠️ %s: 0.000 (fallback - column '%s' missing)", name, column)

    def get_medians(self) -> Dict[str, float]:
        """Return computed medians"""
        return dict(self.medians)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert medians to DataFrame for easy export"""
        return pd.DataFrame([
            {'statistic': k, 'value': v}
            for k, v in self.medians.items()
        ])
