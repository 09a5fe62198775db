# core/segment/quadrant_classifier.py

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np # type: ignore
import pandas as pd # type: ignore

from quadrant_insights.utils import get_section
from .median_calculator import (
    DAYS_AGO_COLUMN,
    INACTIVE_COLUMN,
    MEDIAN_DAYS_AGO,
    MEDIAN_INACTIVE,
)

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.0001

INACTIVE_AND_DORMANT = "Inactive & Dormant"   # Q-I
AT_RISK = "At Risk"                           # Q-II
HEALTHY = "Healthy"                           # Q-III
ACTIVE_BUT_DORMANT = "Active but Dormant"     # Q-IV

UNKNOWN_QUADRANT = "Unknown"

# Order matches the condition list built in _build_quadrant_conditions
QUADRANT_LABELS: List[str] = [
    INACTIVE_AND_DORMANT,
    AT_RISK,
    HEALTHY,
    ACTIVE_BUT_DORMANT,
]

AT_RISK_QUADRANTS = (AT_RISK, INACTIVE_AND_DORMANT)


def quadrant_offsets(
    avg_inactive_days: float,
    avg_days_ago: float,
    median_inactive: float,
    median_days_ago: float,
) -> Tuple[float, float]:
    """Median-adjusted coordinates ``(dx, dy)`` of one entity."""
    return avg_inactive_days - median_inactive, avg_days_ago - median_days_ago


def classify_offsets(dx: float, dy: float, tolerance: float = DEFAULT_TOLERANCE) -> str:
    """
    Assign a quadrant from median-adjusted coordinates.

    Values inside the tolerance band count as non-negative, so boundary
    points fall on the higher side of each median.
    """
    below_inactive = dx < -tolerance
    below_days_ago = dy < -tolerance

    if not below_inactive and not below_days_ago:
        return INACTIVE_AND_DORMANT
    if below_inactive and not below_days_ago:
        return AT_RISK
    if below_inactive and below_days_ago:
        return HEALTHY
    return ACTIVE_BUT_DORMANT


def classify_quadrant(
    avg_inactive_days: float,
    avg_days_ago: float,
    median_inactive: float,
    median_days_ago: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> str:
    """Quadrant label for one entity relative to the collection medians."""
    dx, dy = quadrant_offsets(avg_inactive_days, avg_days_ago, median_inactive, median_days_ago)
    return classify_offsets(dx, dy, tolerance)


class QuadrantClassifier:
    """
    Assigns every entity of a collection to exactly one engagement quadrant.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        medians: Dict[str, float],
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize quadrant classifier.

        Parameters
        ----------
        df : pd.DataFrame
            Normalized entities with metric columns
        medians : Dict[str, float]
            Collection medians from MedianCalculator
        config : Dict[str, Any], optional
            Configuration with the ``classification`` section
        """
        self.df = df.copy()
        self.medians = medians
        self.tolerance = float(
            get_section(config, "classification").get("tolerance", DEFAULT_TOLERANCE)
        )

    def assign_quadrants(self) -> pd.DataFrame:
        """
        Assign quadrants using mutually exclusive median-relative rules.

        Returns
        -------
        pd.DataFrame
            Copy of the collection with a fresh ``quadrant`` column
        """
        logger.info("[STEP 3] Assigning quadrants...")

        conditions = self._build_quadrant_conditions()
        self.df["quadrant"] = np.select(conditions, QUADRANT_LABELS, default=UNKNOWN_QUADRANT)
        self.validate_assignments(conditions)

        logger.info("✅ Quadrants assigned (tolerance=%s)", self.tolerance)
        return self.df

    def offsets(self) -> Tuple[pd.Series, pd.Series]:
        """Median-adjusted ``(dx, dy)`` series for the whole collection."""
        dx = self.df[INACTIVE_COLUMN].astype(float) - self.medians.get(MEDIAN_INACTIVE, 0.0)
        dy = self.df[DAYS_AGO_COLUMN].astype(float) - self.medians.get(MEDIAN_DAYS_AGO, 0.0)
        return dx, dy

    def _build_quadrant_conditions(self) -> List[np.ndarray]:
        """
        Build mutually exclusive quadrant conditions.

        Returns
        -------
        List[np.ndarray]
            Boolean masks in QUADRANT_LABELS order
        """
        dx, dy = self.offsets()

        below_inactive = (dx < -self.tolerance).to_numpy()
        below_days_ago = (dy < -self.tolerance).to_numpy()

        # Q-I: at or above both medians
        inactive_dormant = ~below_inactive & ~below_days_ago
        # Q-II: chat inactivity below median, days since login at or above
        at_risk = below_inactive & ~below_days_ago
        # Q-III: below both medians
        healthy = below_inactive & below_days_ago
        # Q-IV: chat inactivity at or above median, days since login below
        active_dormant = ~below_inactive & below_days_ago

        return [inactive_dormant, at_risk, healthy, active_dormant]

    def validate_assignments(self, conditions: Optional[List[np.ndarray]] = None) -> None:
        """Verify that every entity matched exactly one quadrant condition"""
        if conditions is None:
            conditions = self._build_quadrant_conditions()

        if not conditions or len(conditions[0]) == 0:
            return

        matches = np.sum(np.vstack(conditions).astype(int), axis=0)
        if not np.all(matches == 1):
            raise AssertionError(
                f"❌ {int(np.sum(matches != 1))} entities matched zero or several quadrants"
            )

    def get_dataframe(self) -> pd.DataFrame:
        """Return dataframe with assignments"""
        return self.df
