# core/export/csv_exporter.py

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import pandas as pd # type: ignore

from quadrant_insights.utils import get_section, timestamp
from quadrant_insights.core.processing.record_normalizer import (
    ACCOUNT,
    WORKSPACE,
    resolve_kind,
)

logger = logging.getLogger(__name__)

EXPORT_OK = "ok"
EXPORT_EMPTY = "empty"
EXPORT_FAILED = "failed"

NO_DATA_MESSAGE = "No data to export"

# kind -> ordered (header, column) pairs
EXPORT_COLUMNS: Dict[str, List[tuple]] = {
    ACCOUNT: [
        ("Account Name", "account_name"),
        ("Account ID", "account_id"),
        ("Avg Days Ago", "avg_days_ago"),
        ("Avg Inactive Days", "avg_inactive_days"),
        ("Workspaces", "workspace_count"),
        ("Chat Count", "chat_count"),
        ("Status", "account_status"),
        ("Quadrant", "quadrant"),
        ("Risk Level", "risk_level"),
    ],
    WORKSPACE: [
        ("Workspace Name", "workspace_name"),
        ("Workspace ID", "workspace_id"),
        ("Account ID", "account_id"),
        ("Avg Days Ago", "avg_days_ago"),
        ("Avg Inactive Days", "avg_inactive_days"),
        ("Chat Count", "chat_count"),
        ("Status", "account_status"),
        ("Quadrant", "quadrant"),
        ("Risk Level", "risk_level"),
    ],
}

METRIC_COLUMNS = ["avg_days_ago", "avg_inactive_days"]
COUNT_COLUMNS = ["workspace_count", "chat_count"]


@dataclass
class ExportResult:
    """
    Outcome of one export action.

    ``content`` is the payload to hand to whatever saves or downloads it;
    it is ``None`` unless ``status`` is ``ok``.
    """
    status: str
    filename: Optional[str] = None
    content: Optional[Union[str, bytes]] = None
    message: str = ""
    row_count: int = 0

    @property
    def ok(self) -> bool:
        return self.status == EXPORT_OK

    def to_bytes(self, encoding: str = "utf-8") -> bytes:
        if self.content is None:
            return b""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode(encoding)


class CsvExporter:
    """
    Serializes the current filtered view to CSV text.
    """

    def __init__(self, kind: str = ACCOUNT, config: Optional[Dict[str, Any]] = None):
        """
        Initialize CSV exporter.

        Parameters
        ----------
        kind : str
            ``"account"`` or ``"workspace"``
        config : Dict[str, Any], optional
            Configuration with the ``export`` section
        """
        self.kind = resolve_kind(kind)
        self.columns = EXPORT_COLUMNS[self.kind]
        export_config = get_section(config, "export")
        self.prefix = export_config.get(f"{self.kind}_prefix", f"{self.kind}_data")

    @property
    def headers(self) -> List[str]:
        return [header for header, _ in self.columns]

    def filename(self, now: Optional[datetime] = None) -> str:
        """``<prefix>_<ISO8601 timestamp>.csv``"""
        return f"{self.prefix}_{timestamp(now)}.csv"

    def export(self, view: pd.DataFrame, now: Optional[datetime] = None) -> ExportResult:
        """
        Render the filtered view as CSV.

        Parameters
        ----------
        view : pd.DataFrame
            Rows currently shown (already filtered and sorted)
        now : datetime, optional
            Timestamp used for the filename

        Returns
        -------
        ExportResult
            ``empty`` when there is nothing to export, ``ok`` otherwise
        """
        logger.info("[EXPORT] Saving %s view as CSV...", self.kind)

        if view is None or view.empty:
            logger.info("   ⚠️ %s", NO_DATA_MESSAGE)
            return ExportResult(status=EXPORT_EMPTY, message=NO_DATA_MESSAGE)

        content = self.to_csv_text(view)
        filename = self.filename(now)

        logger.info("   📄 %s: %s rows, %s columns", filename, len(view), len(self.columns))
        return ExportResult(
            status=EXPORT_OK,
            filename=filename,
            content=content,
            message=f"Exported {len(view)} rows",
            row_count=len(view),
        )

    def to_csv_text(self, view: pd.DataFrame) -> str:
        """
        Header plus one line per row, joined by newlines (no trailing newline).

        The header is plain. Text fields are double-quoted with inner quotes
        doubled, the two metrics carry exactly one decimal and counts are
        written as plain integers.
        """
        export_df = self._build_export_frame(view)
        lines = [",".join(self.headers)]
        lines.extend(",".join(row) for row in export_df.itertuples(index=False, name=None))
        return "\n".join(lines)

    def _build_export_frame(self, view: pd.DataFrame) -> pd.DataFrame:
        """Every cell rendered to its final CSV token."""
        export_df = pd.DataFrame(index=range(len(view)))

        for header, column in self.columns:
            values = view[column] if column in view.columns else pd.Series([None] * len(view))
            values = values.reset_index(drop=True)

            if column in METRIC_COLUMNS:
                numbers = pd.to_numeric(values, errors="coerce").fillna(0.0).astype(float)
                export_df[header] = numbers.map(lambda v: f"{v:.1f}")
            elif column in COUNT_COLUMNS:
                counts = pd.to_numeric(values, errors="coerce").fillna(0).astype("int64")
                export_df[header] = counts.map(str)
            else:
                export_df[header] = values.map(_quoted)

        return export_df


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "Unknown"
    return str(value)


def _quoted(value: Any) -> str:
    return '"' + _text(value).replace('"', '""') + '"'
