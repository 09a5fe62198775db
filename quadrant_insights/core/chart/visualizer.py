# core/chart/visualizer.py

import io
import logging
from typing import Optional

import matplotlib # type: ignore
matplotlib.use("Agg")
import matplotlib.pyplot as plt # type: ignore  # noqa: E402
import seaborn as sns # type: ignore  # noqa: E402
import plotly.graph_objects as go # type: ignore  # noqa: E402

from .chart_projection import ChartProjection  # noqa: E402

logger = logging.getLogger(__name__)

X_LABEL = "Avg Inactive Days (Chat)"
Y_LABEL = "Avg Days Ago (Login)"


class QuadrantChartVisualizer:
    """
    Renders a ChartProjection as a static matplotlib figure or an
    interactive plotly figure.
    """

    def __init__(self, title: str = "Engagement Quadrant Analysis"):
        self.title = title
        sns.set_style("whitegrid")

    def draw(self, projection: ChartProjection) -> plt.Figure:
        """
        Draw the median-centred scatter.

        Parameters
        ----------
        projection : ChartProjection
            Points, colours and the current zoom domain

        Returns
        -------
        plt.Figure
            Figure object (caller closes it)
        """
        points = projection.points()
        low, high = projection.domain()

        fig, ax = plt.subplots(figsize=(10, 8))
        ax.scatter(points["x"], points["y"], c=list(points["color"]), alpha=0.8, s=60)

        # median cross
        ax.axhline(0, color="#64748B", linewidth=1, linestyle="--")
        ax.axvline(0, color="#64748B", linewidth=1, linestyle="--")

        ax.set_xlim(low, high)
        ax.set_ylim(low, high)
        ax.set_xticks(projection.ticks())
        ax.set_yticks(projection.ticks())
        ax.set_xlabel(X_LABEL, fontsize=12)
        ax.set_ylabel(Y_LABEL, fontsize=12)
        ax.set_title(self.title, fontsize=14, fontweight="bold")

        for entry in projection.legend():
            ax.scatter([], [], c=entry["color"], label=entry["label"])
        ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.08), ncol=4, frameon=False)

        fig.tight_layout()
        return fig

    def render_png(self, projection: ChartProjection, dpi: Optional[int] = 150) -> bytes:
        """Render the chart to PNG bytes."""
        fig = self.draw(projection)
        try:
            buffer = io.BytesIO()
            fig.savefig(buffer, format="png", dpi=dpi, bbox_inches="tight")
            return buffer.getvalue()
        finally:
            plt.close(fig)

    def build_interactive(self, projection: ChartProjection) -> go.Figure:
        """Interactive scatter with hover text matching the dashboard tooltip."""
        points = projection.points()
        low, high = projection.domain()

        hover = [
            f"{row.name}<br>Inactive Days: {row.avg_inactive_days:.1f}"
            f"<br>Days Ago: {row.avg_days_ago:.1f}<br>{row.quadrant}"
            for row in points.itertuples(index=False)
        ]

        fig = go.Figure(
            data=go.Scatter(
                x=points["x"],
                y=points["y"],
                mode="markers",
                marker=dict(color=list(points["color"]), opacity=0.8, size=10),
                text=hover,
                hoverinfo="text",
                customdata=points["id"],
            )
        )
        fig.update_layout(
            title=self.title,
            xaxis=dict(title=X_LABEL, range=[low, high], dtick=projection.tick_interval(), zeroline=True),
            yaxis=dict(title=Y_LABEL, range=[low, high], dtick=projection.tick_interval(), zeroline=True),
            margin=dict(l=40, r=20, t=50, b=40),
        )
        return fig
