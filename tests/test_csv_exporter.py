import csv
import io
from datetime import datetime

import pandas as pd

from quadrant_insights.core.export.csv_exporter import (
    EXPORT_EMPTY,
    NO_DATA_MESSAGE,
    CsvExporter,
)
from quadrant_insights.core.query.query_engine import QueryEngine, QueryParameters
from quadrant_insights.core.segment.quadrant_classifier import INACTIVE_AND_DORMANT

ACCOUNT_HEADER = (
    "Account Name,Account ID,Avg Days Ago,Avg Inactive Days,"
    "Workspaces,Chat Count,Status,Quadrant,Risk Level"
)


def test_header_and_one_line_per_row(accounts_df):
    view = QueryEngine(accounts_df).view()
    result = CsvExporter("account").export(view)

    lines = result.content.split("\n")
    assert result.ok
    assert lines[0] == ACCOUNT_HEADER
    assert len(lines) == len(view) + 1
    assert result.row_count == 5
    assert not result.content.endswith("\n")


def test_row_formatting(accounts_df):
    view = QueryEngine(accounts_df).view(QueryParameters(search="acc-1"))
    text = CsvExporter("account").to_csv_text(view)

    assert text.split("\n")[1] == '"Acme Corp","acc-1",3.0,2.0,2,10,"Active","Healthy","Low"'


def test_export_reflects_filtered_view(accounts_df):
    view = QueryEngine(accounts_df).view(QueryParameters(quadrant=INACTIVE_AND_DORMANT))
    result = CsvExporter("account").export(view)

    rows = list(csv.reader(io.StringIO(result.content)))
    assert len(rows) == 3
    assert {row[1] for row in rows[1:]} == {"acc-4", "acc-5"}


def test_metrics_are_rounded_to_one_decimal():
    view = pd.DataFrame([{
        "account_id": "a", "account_name": "A", "avg_days_ago": 3.456, "avg_inactive_days": 0.04,
        "workspace_count": 1, "chat_count": 2, "account_status": "Active",
        "quadrant": "Healthy", "risk_level": "Low",
    }])
    row = CsvExporter("account").to_csv_text(view).split("\n")[1]
    assert ',3.5,0.0,' in row


def test_quotes_and_commas_survive_a_reparse():
    view = pd.DataFrame([{
        "workspace_id": "w1", "workspace_name": 'Sales, "North"', "account_id": "a1",
        "avg_days_ago": 1.0, "avg_inactive_days": 2.0, "chat_count": 3,
        "account_status": "Active", "quadrant": "Healthy", "risk_level": "Low",
    }])
    text = CsvExporter("workspace").to_csv_text(view)
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0][0] == "Workspace Name"
    assert rows[1][0] == 'Sales, "North"'
    assert rows[1][2] == "a1"


def test_empty_view_is_not_exported(accounts_df):
    exporter = CsvExporter("account")
    empty = exporter.export(accounts_df.iloc[0:0])

    assert empty.status == EXPORT_EMPTY
    assert empty.message == NO_DATA_MESSAGE
    assert empty.content is None
    assert exporter.export(None).status == EXPORT_EMPTY


def test_filename_uses_kind_prefix_and_timestamp():
    now = datetime(2024, 1, 2, 3, 4, 5)
    assert CsvExporter("account").filename(now) == "account_data_2024-01-02T03:04:05.csv"
    assert CsvExporter("workspace").filename(now) == "workspace_data_2024-01-02T03:04:05.csv"


def test_prefix_comes_from_config(config):
    config["export"]["account_prefix"] = "portfolio"
    name = CsvExporter("account", config).filename(datetime(2024, 1, 1))
    assert name.startswith("portfolio_")


def test_to_bytes(accounts_df):
    result = CsvExporter("account").export(QueryEngine(accounts_df).view())
    assert result.to_bytes().decode("utf-8") == result.content


def test_large_metrics_keep_fixed_point_notation():
    view = pd.DataFrame([{
        "account_id": "a", "account_name": "Big", "avg_days_ago": 1e17, "avg_inactive_days": 123456789012.34,
        "workspace_count": 0, "chat_count": 0, "account_status": "Active",
        "quadrant": "Healthy", "risk_level": "Low",
    }])
    row = CsvExporter("account").to_csv_text(view).split("\n")[1]

    assert row == '"Big","a",100000000000000000.0,123456789012.3,0,0,"Active","Healthy","Low"'
    assert "e+" not in row


def test_missing_text_is_written_as_unknown():
    view = pd.DataFrame([{
        "account_id": "a", "account_name": None, "avg_days_ago": 1.0, "avg_inactive_days": 1.0,
        "workspace_count": 1, "chat_count": 1, "account_status": "Active",
        "quadrant": "Healthy", "risk_level": "Low",
    }])
    row = CsvExporter("account").to_csv_text(view).split("\n")[1]
    assert row.startswith('"Unknown","a",')
