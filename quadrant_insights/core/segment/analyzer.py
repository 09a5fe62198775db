# core/segment/analyzer.py

import logging
from typing import Any, Dict, Optional

import pandas as pd # type: ignore

from quadrant_insights.utils import get_section
from quadrant_insights.core.processing.record_normalizer import (
    ACCOUNT,
    id_column,
    name_column,
    resolve_kind,
)
from .median_calculator import MEDIAN_DAYS_AGO, MEDIAN_INACTIVE
from .quadrant_classifier import (
    ACTIVE_BUT_DORMANT,
    AT_RISK,
    AT_RISK_QUADRANTS,
    HEALTHY,
    INACTIVE_AND_DORMANT,
    QUADRANT_LABELS,
)
from .risk_mapper import RISK_BY_QUADRANT

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "Active"
CHURNED_STATUS = "Churned"

# dashboard metric card -> quadrant it focuses the table on
DASHBOARD_CARD_QUADRANTS: Dict[str, str] = {
    "total_active": HEALTHY,
    "total_churned": INACTIVE_AND_DORMANT,
    "total_at_risk": AT_RISK,
}


def card_quadrant(card: str) -> Optional[str]:
    """Quadrant a metric card filters on, ``None`` for cards without one."""
    return DASHBOARD_CARD_QUADRANTS.get(card)


class QuadrantAnalyzer:
    """
    Provides summary and explanation tools for classified collections.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        kind: str = ACCOUNT,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize analyzer.

        Parameters
        ----------
        df : pd.DataFrame
            Classified entities (``quadrant`` and ``risk_level`` present)
        kind : str
            ``"account"`` or ``"workspace"``
        config : Dict[str, Any], optional
            Configuration with the ``analysis`` section
        """
        self.df = df
        self.kind = resolve_kind(kind)
        self.config = config
        self.top_limit = int(get_section(config, "analysis").get("top_at_risk_limit", 5))

    def quadrant_distribution(self) -> pd.DataFrame:
        """
        Count and share of entities per quadrant.

        Returns
        -------
        pd.DataFrame
            One row per quadrant label (zero-filled) with risk, count and percentage
        """
        total = len(self.df)
        counts = (
            self.df["quadrant"].value_counts()
            if "quadrant" in self.df.columns else pd.Series(dtype="int64")
        )

        rows = []
        for label in QUADRANT_LABELS:
            count = int(counts.get(label, 0))
            rows.append({
                "quadrant": label,
                "risk_level": RISK_BY_QUADRANT[label],
                "Count": count,
                "Percentage": (count / total * 100) if total else 0.0,
            })

        return pd.DataFrame(rows)

    def dashboard_metrics(self) -> Dict[str, Any]:
        """Headline counts shown above the quadrant chart."""
        total = len(self.df)
        statuses = self.df.get("account_status", pd.Series(dtype=object))
        chats = self.df.get("chat_count", pd.Series(dtype="int64"))

        avg_chat = float(chats.sum()) / total if total else 0.0

        return {
            "total": total,
            "total_active": int((statuses == ACTIVE_STATUS).sum()),
            "total_churned": int((statuses == CHURNED_STATUS).sum()),
            "total_at_risk": int(self._at_risk_mask().sum()),
            "avg_chat_count": round(avg_chat, 1),
        }

    def _at_risk_mask(self) -> pd.Series:
        if "quadrant" not in self.df.columns:
            return pd.Series(False, index=self.df.index)
        return self.df["quadrant"].isin(AT_RISK_QUADRANTS)

    def top_at_risk(self, limit: Optional[int] = None) -> pd.DataFrame:
        """
        At-risk entities with the most inactive days first.

        Parameters
        ----------
        limit : int, optional
            Number of rows to return (config ``top_at_risk_limit`` by default)
        """
        limit = self.top_limit if limit is None else max(int(limit), 0)
        at_risk = self.df[self._at_risk_mask()]
        ranked = at_risk.sort_values("avg_inactive_days", ascending=False, kind="mergesort")
        return ranked.head(limit).reset_index(drop=True)

    def workspace_summary(self) -> Dict[str, Any]:
        """
        Health summary of one account's workspaces.

        Ties keep the last workspace in collection order.
        """
        names = name_column(self.kind)
        total = len(self.df)
        if total == 0:
            return {
                "most_active": None,
                "most_inactive": None,
                "total": 0,
                "at_risk": 0,
            }

        most_active = self.df[names].iloc[_last_argmax(self.df["chat_count"])]
        most_inactive = self.df[names].iloc[_last_argmax(self.df["avg_inactive_days"])]

        return {
            "most_active": most_active,
            "most_inactive": most_inactive,
            "total": total,
            "at_risk": int(self._at_risk_mask().sum()),
        }

    def explain_assignments(self, medians: Dict[str, float]) -> pd.DataFrame:
        """
        Explain why entities landed in each quadrant.

        Returns
        -------
        pd.DataFrame
            Quadrant, count, percentage and assignment reason
        """
        logger.info("[ANALYSIS] Explaining quadrant assignments...")

        distribution = self.quadrant_distribution()
        distribution["Assignment Reason"] = [
            self._get_assignment_reason(label, medians) for label in distribution["quadrant"]
        ]

        logger.info("✅ Quadrant assignment analysis complete")
        return distribution

    def _get_assignment_reason(self, quadrant: str, medians: Dict[str, float]) -> str:
        """Generate explanation for a quadrant"""
        inactive = medians.get(MEDIAN_INACTIVE, 0.0)
        days_ago = medians.get(MEDIAN_DAYS_AGO, 0.0)

        if quadrant == INACTIVE_AND_DORMANT:
            return (
                f"Inactive days ≥ median ({inactive:.1f}) and "
                f"days since login ≥ median ({days_ago:.1f})"
            )
        elif quadrant == AT_RISK:
            return (
                f"Inactive days < median ({inactive:.1f}) but "
                f"days since login ≥ median ({days_ago:.1f})"
            )
        elif quadrant == HEALTHY:
            return (
                f"Inactive days < median ({inactive:.1f}) and "
                f"days since login < median ({days_ago:.1f})"
            )
        elif quadrant == ACTIVE_BUT_DORMANT:
            return (
                f"Inactive days ≥ median ({inactive:.1f}) but "
                f"days since login < median ({days_ago:.1f})"
            )
        return "Not classified"

    def find(self, entity_id: str) -> Optional[Dict[str, Any]]:
        """Return one entity as a dict, or ``None`` when the id is unknown."""
        matches = self.df[self.df[id_column(self.kind)] == entity_id]
        if matches.empty:
            return None
        return matches.iloc[0].to_dict()


def _last_argmax(values: pd.Series) -> int:
    """Position of the maximum; the last one wins ties."""
    reversed_values = values.to_numpy()[::-1]
    return len(reversed_values) - 1 - int(reversed_values.argmax())
