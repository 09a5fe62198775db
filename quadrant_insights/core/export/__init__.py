# core/export/__init__.py

from .csv_exporter import CsvExporter, ExportResult
from .image_exporter import ChartImageExporter, chart_image_filename

__all__ = [
    'CsvExporter',
    'ExportResult',
    'ChartImageExporter',
    'chart_image_filename',
]
