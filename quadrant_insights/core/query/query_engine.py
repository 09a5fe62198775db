# core/query/query_engine.py
"""
Interactive search, filter, sort and pagination over classified entities.

Every filter is a boolean mask over the same source frame and masks are
combined with AND, so the order in which filters are applied never changes
the result. The source frame is never modified.
"""

from __future__ import annotations

import math
import logging
import unicodedata
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

import pandas as pd # type: ignore

from quadrant_insights.core.processing.record_normalizer import (
    ACCOUNT,
    id_column,
    name_column,
    resolve_kind,
)
from quadrant_insights.core.segment.quadrant_classifier import QUADRANT_LABELS

logger = logging.getLogger(__name__)

ALL = "all"

ASCENDING = "asc"
DESCENDING = "desc"

# bucket name -> predicate over avg_inactive_days, tested in this order
INACTIVE_DAY_BUCKETS: Dict[str, Callable[[pd.Series], pd.Series]] = {
    "0-5": lambda days: days <= 5,
    "6-10": lambda days: (days > 5) & (days <= 10),
    "11-20": lambda days: (days > 10) & (days <= 20),
    "20+": lambda days: days > 20,
}

NUMERIC_SORT_FIELDS = ["avg_days_ago", "avg_inactive_days", "workspace_count", "chat_count"]


@dataclass(frozen=True)
class QueryParameters:
    """
    Table state driving one query.

    ``quadrant`` is the dropdown filter and ``focus_quadrant`` the filter
    set by clicking a dashboard card; both must match when both are set.
    ``sort_field=None`` sorts by the entity name column.
    """
    search: str = ""
    quadrant: str = ALL
    focus_quadrant: Optional[str] = None
    inactive_days: str = ALL
    sort_field: Optional[str] = None
    sort_direction: str = ASCENDING
    page: Optional[int] = None
    page_size: Optional[int] = None


@dataclass
class QueryResult:
    params: QueryParameters
    rows: pd.DataFrame
    total_count: int
    filtered_count: int
    page: int
    page_count: int
    summary: str


def toggle_sort(params: QueryParameters, field: str) -> QueryParameters:
    """Clicking the active column flips direction; a new column starts ascending."""
    if params.sort_field == field:
        direction = DESCENDING if params.sort_direction == ASCENDING else ASCENDING
        return replace(params, sort_direction=direction)
    return replace(params, sort_field=field, sort_direction=ASCENDING)


def collation_key(value: Any) -> str:
    """
    Locale-style sort key: accents and case are ignored first, the raw
    string breaks ties so distinct strings never compare equal.
    """
    text = "" if value is None else str(value)
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return f"{base}\x00{text}"


class QueryEngine:
    """
    Applies search, categorical filter, bucket filter, sort and pagination.
    """

    def __init__(self, df: pd.DataFrame, kind: str = ACCOUNT):
        """
        Initialize query engine.

        Parameters
        ----------
        df : pd.DataFrame
            Classified entities (treated as read-only)
        kind : str
            ``"account"`` or ``"workspace"``
        """
        self.df = df
        self.kind = resolve_kind(kind)
        self.id_column = id_column(self.kind)
        self.name_column = name_column(self.kind)

    # ---------------- Filters ----------------

    def search_mask(self, search: Optional[str]) -> pd.Series:
        """Case-insensitive substring match on name and id."""
        needle = (search or "").lower()
        if not needle:
            return self._all_rows()

        mask = self._all_rows(False)
        for column in (self.name_column, self.id_column):
            if column in self.df.columns:
                haystack = self.df[column].astype(str).str.lower()
                mask = mask | haystack.str.contains(needle, regex=False)
        return mask

    def quadrant_mask(self, quadrant: Optional[str]) -> pd.Series:
        """Exact quadrant match; ``all`` (or nothing) matches every row."""
        if quadrant is None or quadrant == ALL or quadrant == "":
            return self._all_rows()
        if quadrant not in QUADRANT_LABELS:
            logger.warning("⚠️ Unknown quadrant filter %r, matching nothing", quadrant)
        if "quadrant" not in self.df.columns:
            return self._all_rows(False)
        return self.df["quadrant"] == quadrant

    def inactive_days_mask(self, bucket: Optional[str]) -> pd.Series:
        """Named bucket over ``avg_inactive_days``."""
        if bucket is None or bucket == ALL:
            return self._all_rows()
        predicate = INACTIVE_DAY_BUCKETS.get(bucket)
        if predicate is None:
            logger.warning("⚠️ Unknown inactive-days bucket %r, using '%s'", bucket, ALL)
            return self._all_rows()
        return predicate(self.df["avg_inactive_days"].astype(float))

    def _all_rows(self, value: bool = True) -> pd.Series:
        return pd.Series(value, index=self.df.index, dtype=bool)

    def mask(self, params: QueryParameters) -> pd.Series:
        """Combined (AND) mask of every active filter."""
        return (
            self.search_mask(params.search)
            & self.quadrant_mask(params.quadrant)
            & self.quadrant_mask(params.focus_quadrant)
            & self.inactive_days_mask(params.inactive_days)
        )

    def filter(self, params: QueryParameters) -> pd.DataFrame:
        """Rows matching every active filter, in source order."""
        return self.df[self.mask(params)].copy()

    # ---------------- Sort ----------------

    def sortable_fields(self) -> List[str]:
        fields = [self.name_column, self.id_column]
        fields.extend(f for f in NUMERIC_SORT_FIELDS if f in self.df.columns)
        return fields

    def sort(self, frame: pd.DataFrame, params: QueryParameters) -> pd.DataFrame:
        """
        Stable sort by one field.

        Unknown fields fall back to the name column and unknown directions
        to ascending. Equal keys keep their relative order.
        """
        field = params.sort_field or self.name_column
        if field not in frame.columns:
            logger.warning("⚠️ Unknown sort field %r, sorting by '%s'", field, self.name_column)
            field = self.name_column

        direction = params.sort_direction
        if direction not in (ASCENDING, DESCENDING):
            logger.warning("⚠️ Unknown sort direction %r, using '%s'", direction, ASCENDING)
            direction = ASCENDING

        if frame.empty or field not in frame.columns:
            return frame.copy()

        key = None
        if not pd.api.types.is_numeric_dtype(frame[field]):
            key = lambda column: column.map(collation_key)  # noqa: E731

        return frame.sort_values(
            field,
            ascending=(direction == ASCENDING),
            kind="mergesort",
            key=key,
        )

    # ---------------- Pagination ----------------

    def paginate(self, frame: pd.DataFrame, params: QueryParameters) -> tuple:
        """Slice one page; no ``page_size`` means a single page with every row."""
        if not params.page_size or params.page_size <= 0:
            return frame, 1, 1

        page_count = max(1, math.ceil(len(frame) / params.page_size))
        page = min(max(params.page or 1, 1), page_count)
        start = (page - 1) * params.page_size
        return frame.iloc[start:start + params.page_size], page, page_count

    # ---------------- Query ----------------

    def run(self, params: Optional[QueryParameters] = None) -> QueryResult:
        """
        Execute one query.

        Returns
        -------
        QueryResult
            The current page plus counts for the "Showing X of Y" footer
        """
        params = params or QueryParameters()

        filtered = self.filter(params)
        ordered = self.sort(filtered, params)
        page_rows, page, page_count = self.paginate(ordered, params)

        total = len(self.df)
        summary = f"Showing {len(filtered)} of {total} {self.kind}s"
        logger.debug("Query %s -> %s", params, summary)

        return QueryResult(
            params=params,
            rows=page_rows.reset_index(drop=True),
            total_count=total,
            filtered_count=len(filtered),
            page=page,
            page_count=page_count,
            summary=summary,
        )

    def view(self, params: Optional[QueryParameters] = None) -> pd.DataFrame:
        """Filtered and sorted rows without pagination (the export view)."""
        params = params or QueryParameters()
        return self.sort(self.filter(params), params).reset_index(drop=True)
