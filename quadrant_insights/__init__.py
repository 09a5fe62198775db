# quadrant_insights/__init__.py
"""
Quadrant Insights Package
"""
__version__ = "0.1.0"

from .utils import (
    # Directory paths
    package_root,
    config_path,

    # Config
    load_config,
    load_yaml,

    # Logging
    configure_logging,
)

from .core import (
    # Preparing data
    RecordNormalizer,

    # Quadrant segmentation
    MedianCalculator,
    QuadrantClassifier,
    RiskMapper,
    QuadrantAnalyzer,
    QuadrantSegment,

    # Query
    QueryEngine,
    QueryParameters,
    QueryResult,

    # Export
    CsvExporter,
    ExportResult,
    ChartImageExporter,

    # Chart
    ChartProjection,
    QuadrantChartVisualizer,
)


__all__ = [
    # Paths
    "package_root",
    "config_path",

    # Config
    "load_config",
    "load_yaml",

    # Logging
    "configure_logging",

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
