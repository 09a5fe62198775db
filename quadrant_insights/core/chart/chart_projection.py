# core/chart/chart_projection.py

import math
import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np # type: ignore
import pandas as pd # type: ignore

from quadrant_insights.utils import get_section
from quadrant_insights.core.processing.record_normalizer import (
    ACCOUNT,
    id_column,
    name_column,
    resolve_kind,
)
from quadrant_insights.core.segment.median_calculator import (
    MEDIAN_DAYS_AGO,
    MEDIAN_INACTIVE,
    MedianCalculator,
)
from quadrant_insights.core.segment.quadrant_classifier import (
    ACTIVE_BUT_DORMANT,
    AT_RISK,
    HEALTHY,
    INACTIVE_AND_DORMANT,
)

logger = logging.getLogger(__name__)

LEGEND_ORDER = [HEALTHY, ACTIVE_BUT_DORMANT, AT_RISK, INACTIVE_AND_DORMANT]

# (upper bound of range, tick interval), first match wins
TICK_STEPS: List[Tuple[float, float]] = [
    (5, 0.5),
    (10, 1),
    (20, 2),
    (50, 5),
]


class ChartProjection:
    """
    Median-centred, zoomable scatter coordinates for a classified collection.

    Account charts recompute their medians from the collection. Workspace
    charts take the medians of the owning account's workspaces; without
    them the given frame is assumed to hold exactly that sibling set.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        kind: str = ACCOUNT,
        medians: Optional[Dict[str, float]] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.df = df
        self.kind = resolve_kind(kind)

        chart_config = get_section(config, "chart")
        self.colors: Dict[str, str] = chart_config.get("colors", {})
        self.zoom_min = float(chart_config.get("zoom_min", 0.5))
        self.zoom_max = float(chart_config.get("zoom_max", 10.0))
        self.zoom_step = float(chart_config.get("zoom_step", 1.5))
        self.default_range = float(chart_config.get("default_range", 10.0))
        self.padding = float(chart_config.get("padding", 1.2))
        self.zoom = 1.0

        if medians is None or self.kind == ACCOUNT:
            medians = MedianCalculator(df).compute_medians()
        self.medians = medians

        self._points = self._project()

    # ---------------- Projection ----------------

    def _project(self) -> pd.DataFrame:
        ids = id_column(self.kind)
        names = name_column(self.kind)

        inactive = self.df["avg_inactive_days"].astype(float).reset_index(drop=True)
        days_ago = self.df["avg_days_ago"].astype(float).reset_index(drop=True)
        quadrants = (
            self.df["quadrant"].reset_index(drop=True)
            if "quadrant" in self.df.columns
            else pd.Series([None] * len(self.df), dtype=object)
        )

        return pd.DataFrame({
            "id": self.df[ids].reset_index(drop=True),
            "name": self.df[names].reset_index(drop=True),
            "x": inactive - self.medians.get(MEDIAN_INACTIVE, 0.0),
            "y": days_ago - self.medians.get(MEDIAN_DAYS_AGO, 0.0),
            "avg_inactive_days": inactive,
            "avg_days_ago": days_ago,
            "quadrant": quadrants,
            "color": quadrants.map(self.color_for),
        })

    def points(self) -> pd.DataFrame:
        """Projected points (copy)."""
        return self._points.copy()

    def color_for(self, quadrant: Any) -> str:
        """Fixed colour for a quadrant; grey for anything unclassified."""
        fallback = self.colors.get("Unknown", "#94A3B8")
        if not isinstance(quadrant, str):
            return fallback
        return self.colors.get(quadrant, fallback)

    # ---------------- Zoom ----------------

    def zoom_in(self) -> float:
        self.zoom = min(self.zoom * self.zoom_step, self.zoom_max)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = max(self.zoom / self.zoom_step, self.zoom_min)
        return self.zoom

    def reset_zoom(self) -> float:
        self.zoom = 1.0
        return self.zoom

    def base_range(self) -> float:
        """Half-width at zoom 1: padded max absolute offset, rounded up."""
        if self._points.empty:
            return self.default_range

        extent = float(np.nanmax(np.abs(self._points[["x", "y"]].to_numpy())))
        if not math.isfinite(extent):
            return self.default_range

        base = math.ceil(self.padding * extent)
        return float(base) if base > 0 else self.default_range

    def axis_range(self) -> float:
        return self.base_range() / self.zoom

    def domain(self) -> Tuple[float, float]:
        r = self.axis_range()
        return -r, r

    def tick_interval(self) -> float:
        r = self.axis_range()
        for upper, step in TICK_STEPS:
            if r <= upper:
                return step
        return r / 10

    def ticks(self) -> List[float]:
        """Symmetric ticks from ``-range`` to ``range`` through 0."""
        r = self.axis_range()
        step = self.tick_interval()
        count = int(math.floor(r / step + 1e-9))
        return [round(i * step, 6) for i in range(-count, count + 1)]

    # ---------------- Presentation helpers ----------------

    def legend(self) -> List[Dict[str, str]]:
        labels = {HEALTHY: "Healthy Accounts" if self.kind == ACCOUNT else "Healthy Workspaces"}
        return [
            {"quadrant": q, "label": labels.get(q, q), "color": self.color_for(q)}
            for q in LEGEND_ORDER
        ]

    def tooltip(self, entity_id: str) -> Optional[Dict[str, str]]:
        point = self._find(entity_id)
        if point is None:
            return None
        quadrant = point["quadrant"] if isinstance(point["quadrant"], str) else "Unknown"
        return {
            "name": str(point["name"]),
            "inactive_days": f"Inactive Days: {point['avg_inactive_days']:.1f}",
            "days_ago": f"Days Ago: {point['avg_days_ago']:.1f}",
            "quadrant": quadrant,
            "color": self.color_for(point["quadrant"]),
        }

    def select(self, entity_id: str) -> Optional[str]:
        """
        Navigation target for a clicked point.

        Account points yield the account id the router uses to open the
        workspace view; workspace points are not navigable.
        """
        if self.kind != ACCOUNT or self._find(entity_id) is None:
            return None
        return entity_id

    def _find(self, entity_id: str) -> Optional[pd.Series]:
        matches = self._points[self._points["id"] == entity_id]
        if matches.empty:
            return None
        return matches.iloc[0]
