# quadrant_insights/core/__init__.py
"""
Core module initializer for Quadrant Insights.

Provides record normalization, quadrant segmentation, querying, export and
chart components.
"""

from .processing import RecordNormalizer

from .segment import (
    MedianCalculator,
    QuadrantClassifier,
    RiskMapper,
    QuadrantAnalyzer,
    QuadrantSegment,
)

from .query import QueryEngine, QueryParameters, QueryResult

from .export import CsvExporter, ExportResult, ChartImageExporter

from .chart import ChartProjection, QuadrantChartVisualizer

__all__ = [
    # Preparing Data
    "RecordNormalizer",

    # Quadrant segmentation
    "MedianCalculator",
    "QuadrantClassifier",
    "RiskMapper",
    "QuadrantAnalyzer",
    "QuadrantSegment",

    # Query
    "QueryEngine",
    "QueryParameters",
    "QueryResult",

    # Export
    "CsvExporter",
    "ExportResult",
    "ChartImageExporter",

    # Chart
    "ChartProjection",
    "QuadrantChartVisualizer",
]
