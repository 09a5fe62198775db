# core/segment/risk_mapper.py

import logging
from typing import Any, Dict

import pandas as pd # type: ignore

from .quadrant_classifier import (
    ACTIVE_BUT_DORMANT,
    AT_RISK,
    HEALTHY,
    INACTIVE_AND_DORMANT,
)

logger = logging.getLogger(__name__)

LOW = "Low"
MEDIUM = "Medium"
HIGH = "High"
CRITICAL = "Critical"
UNKNOWN_RISK = "Unknown"

RISK_BY_QUADRANT: Dict[str, str] = {
    HEALTHY: LOW,
    ACTIVE_BUT_DORMANT: MEDIUM,
    AT_RISK: HIGH,
    INACTIVE_AND_DORMANT: CRITICAL,
}

RISK_LEVELS = [LOW, MEDIUM, HIGH, CRITICAL]


def map_risk(quadrant: Any) -> str:
    """Risk level for a quadrant label; anything unrecognised is ``Unknown``."""
    if not isinstance(quadrant, str):
        return UNKNOWN_RISK
    return RISK_BY_QUADRANT.get(quadrant, UNKNOWN_RISK)


class RiskMapper:
    """
    Derives the risk level column from the quadrant column.
    """

    def __init__(self, df: pd.DataFrame):
        self.df = df.copy()

    def assign_risk_levels(self) -> pd.DataFrame:
        """Attach a fresh ``risk_level`` column derived only from ``quadrant``."""
        logger.info("[STEP 4] Mapping quadrants to risk levels...")

        if "quadrant" in self.df.columns:
            self.df["risk_level"] = self.df["quadrant"].map(map_risk).astype(object)
        else:
            logger.warning("   ⚠️ Missing quadrant column, risk set to %s", UNKNOWN_RISK)
            self.df["risk_level"] = UNKNOWN_RISK

        logger.info("✅ Risk levels assigned")
        return self.df
