# core/segment/__init__.py

"""
Engagement Quadrant Segmentation Module
=======================================

Median-relative classification of accounts and workspaces into four
engagement quadrants, each carrying a risk level.

Main Components:
----------------
- QuadrantSegment: Main orchestrator class
- MedianCalculator: Collection medians of both engagement metrics
- QuadrantClassifier: Median-relative quadrant assignment
- RiskMapper: Quadrant to risk level mapping
- QuadrantAnalyzer: Dashboard metrics and assignment explanations

Usage:
------
    from quadrant_insights.core.segment import QuadrantSegment

    segmenter = QuadrantSegment(account_records, workspace_records)
    accounts_df, workspaces_df = segmenter.run()

Individual Operations:
----------------------
    # Step by step
    frame, medians = classify_collection(normalized_df)
    workspaces_df, medians_by_account = classify_workspaces_by_account(normalized_ws)
    scoped_df, ws_medians = segmenter.workspaces_for("acc-1")
    metrics = segmenter.analyzer().dashboard_metrics()
"""

from .median_calculator import MedianCalculator, compute_median
from .quadrant_classifier import (
    ACTIVE_BUT_DORMANT,
    AT_RISK,
    HEALTHY,
    INACTIVE_AND_DORMANT,
    QUADRANT_LABELS,
    QuadrantClassifier,
    classify_quadrant,
)
from .risk_mapper import RiskMapper, map_risk
from .analyzer import QuadrantAnalyzer, card_quadrant, DASHBOARD_CARD_QUADRANTS
from .quadrant_segment import (
    QuadrantSegment,
    classify_collection,
    classify_workspaces_by_account,
    normalize_and_classify,
)

__all__ = [
    'MedianCalculator',
    'compute_median',
    'QuadrantClassifier',
    'classify_quadrant',
    'QUADRANT_LABELS',
    'HEALTHY',
    'ACTIVE_BUT_DORMANT',
    'AT_RISK',
    'INACTIVE_AND_DORMANT',
    'RiskMapper',
    'map_risk',
    'QuadrantAnalyzer',
    'card_quadrant',
    'DASHBOARD_CARD_QUADRANTS',
    'QuadrantSegment',
    'classify_collection',
    'classify_workspaces_by_account',
    'normalize_and_classify',
]
