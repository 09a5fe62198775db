# core/export/image_exporter.py

import re
import logging
from typing import Any, Callable, Optional

from quadrant_insights.core.chart.visualizer import QuadrantChartVisualizer
from .csv_exporter import EXPORT_FAILED, EXPORT_OK, ExportResult

logger = logging.getLogger(__name__)

Renderer = Callable[[Any], bytes]


def chart_image_filename(title: str) -> str:
    """``<title with whitespace runs as underscores>_Chart.png``"""
    safe_title = re.sub(r"\s+", "_", (title or "").strip())
    return f"{safe_title}_Chart.png"


class ChartImageExporter:
    """
    Exports a chart surface as a PNG payload.

    Rendering belongs to the renderer callable; this class only names the
    file and turns renderer failures into a failed ExportResult.
    """

    def __init__(self, renderer: Optional[Renderer] = None):
        self.renderer = renderer

    def export(self, surface: Any, title: str, renderer: Optional[Renderer] = None) -> ExportResult:
        """
        Render ``surface`` and wrap the PNG bytes.

        Parameters
        ----------
        surface : Any
            Renderable chart (a ChartProjection for the default renderer)
        title : str
            Chart title the filename derives from
        renderer : Callable, optional
            Overrides the exporter's renderer for this call
        """
        filename = chart_image_filename(title)
        render = renderer or self.renderer or QuadrantChartVisualizer(title).render_png

        logger.info("[EXPORT] Rendering chart '%s'...", title)
        try:
            payload = render(surface)
            if not isinstance(payload, (bytes, bytearray)) or not payload:
                raise ValueError("renderer returned no image data")
        except Exception as e:
            logger.warning("   ⚠ PNG export failed for '%s': %s", title, e)
            return ExportResult(status=EXPORT_FAILED, filename=filename, message=f"PNG export failed: {e}")

        logger.info("   🖼 PNG ready: %s", filename)
        return ExportResult(
            status=EXPORT_OK,
            filename=filename,
            content=bytes(payload),
            message="Chart exported",
        )
