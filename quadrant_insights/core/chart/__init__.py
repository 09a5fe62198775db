# core/chart/__init__.py

from .chart_projection import ChartProjection
from .visualizer import QuadrantChartVisualizer

__all__ = [
    'ChartProjection',
    'QuadrantChartVisualizer',
]
