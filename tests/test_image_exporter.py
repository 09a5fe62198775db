from quadrant_insights.core.chart.chart_projection import ChartProjection
from quadrant_insights.core.export.csv_exporter import EXPORT_FAILED
from quadrant_insights.core.export.image_exporter import ChartImageExporter, chart_image_filename

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_filename_replaces_whitespace_runs():
    assert chart_image_filename("Engagement Quadrant Analysis") == "Engagement_Quadrant_Analysis_Chart.png"
    assert chart_image_filename("  Acme   Corp\tWorkspaces ") == "Acme_Corp_Workspaces_Chart.png"


def test_successful_render_is_wrapped():
    exporter = ChartImageExporter(renderer=lambda surface: PNG_SIGNATURE + b"data")
    result = exporter.export(object(), "Account Overview")

    assert result.ok
    assert result.filename == "Account_Overview_Chart.png"
    assert result.content.startswith(PNG_SIGNATURE)


def test_renderer_failure_is_reported():
    def broken(surface):
        raise RuntimeError("surface detached")

    result = ChartImageExporter().export(object(), "Broken", renderer=broken)

    assert result.status == EXPORT_FAILED
    assert result.content is None
    assert result.message.startswith("PNG export failed")
    assert "surface detached" in result.message


def test_empty_payload_is_a_failure():
    result = ChartImageExporter(renderer=lambda surface: b"").export(object(), "Blank")
    assert result.status == EXPORT_FAILED


def test_default_renderer_produces_png(accounts_df):
    projection = ChartProjection(accounts_df, "account")
    result = ChartImageExporter().export(projection, "Engagement Quadrant Analysis")

    assert result.ok
    assert result.content.startswith(PNG_SIGNATURE)
