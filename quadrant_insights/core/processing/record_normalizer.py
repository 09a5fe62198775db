# core/processing/record_normalizer.py
"""
Normalization of raw account and workspace records.

Upstream exports disagree on field naming (``account_id``, ``AccountId``,
``Account ID`` ...). Each canonical field owns an ordered alias list and the
first alias present in a record wins. Missing or malformed values are
replaced by defaults instead of raising: numbers become 0 and strings become
``"Unknown"``.
"""

import math
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np # type: ignore
import pandas as pd # type: ignore

logger = logging.getLogger(__name__)

ACCOUNT = "account"
WORKSPACE = "workspace"
ENTITY_KINDS = (ACCOUNT, WORKSPACE)

UNKNOWN = "Unknown"

# largest value an int64 count column can hold
MAX_COUNT = int(np.iinfo(np.int64).max)

STRING_FIELD = "string"
FLOAT_FIELD = "float"
COUNT_FIELD = "count"

# canonical field -> ordered aliases (first match wins)
FIELD_ALIASES: Dict[str, List[str]] = {
    "account_id": ["account_id", "AccountId", "accountId", "Account ID", "AccountID", "account id"],
    "account_name": ["account_name", "AccountName", "accountName", "Account Name", "account name"],
    "workspace_id": ["workspace_id", "WorkspaceId", "workspaceId", "Workspace ID", "WorkspaceID", "workspace id"],
    "workspace_name": ["workspace_name", "WorkspaceName", "workspaceName", "Workspace Name", "workspace name"],
    "avg_days_ago": ["avg_days_ago", "AvgDaysAgo", "avgDaysAgo", "Avg Days Ago", "avg days ago"],
    "avg_inactive_days": [
        "avg_inactive_days", "AvgInactiveDays", "avgInactiveDays", "Avg Inactive Days", "avg inactive days",
    ],
    "workspace_count": [
        "workspace_count", "WorkspaceCount", "workspaceCount", "Workspace Count", "Workspaces", "workspaces",
    ],
    "chat_count": ["chat_count", "ChatCount", "chatCount", "Chat Count", "chats"],
    "account_status": [
        "account_status", "AccountStatus", "accountStatus", "Account Status", "status", "Status",
    ],
}

FIELD_TYPES: Dict[str, str] = {
    "account_id": STRING_FIELD,
    "account_name": STRING_FIELD,
    "workspace_id": STRING_FIELD,
    "workspace_name": STRING_FIELD,
    "avg_days_ago": FLOAT_FIELD,
    "avg_inactive_days": FLOAT_FIELD,
    "workspace_count": COUNT_FIELD,
    "chat_count": COUNT_FIELD,
    "account_status": STRING_FIELD,
}

CANONICAL_FIELDS: Dict[str, List[str]] = {
    ACCOUNT: [
        "account_id", "account_name", "avg_days_ago", "avg_inactive_days",
        "workspace_count", "chat_count", "account_status",
    ],
    WORKSPACE: [
        "workspace_id", "workspace_name", "account_id", "account_name",
        "avg_days_ago", "avg_inactive_days", "chat_count", "account_status",
    ],
}

DERIVED_FIELDS = ["quadrant", "risk_level"]


def id_column(kind: str) -> str:
    """Identity column of an entity kind."""
    return f"{resolve_kind(kind)}_id"


def name_column(kind: str) -> str:
    """Display name column of an entity kind."""
    return f"{resolve_kind(kind)}_name"


def resolve_kind(kind: Any) -> str:
    """Return a valid entity kind, treating anything unrecognised as ``account``."""
    if isinstance(kind, str) and kind.strip().lower() in ENTITY_KINDS:
        return kind.strip().lower()
    logger.warning("⚠️ Unknown entity kind %r, using '%s'", kind, ACCOUNT)
    return ACCOUNT


def empty_frame(kind: str) -> pd.DataFrame:
    """Zero-row frame with the canonical columns and dtypes of ``kind``."""
    kind = resolve_kind(kind)
    columns = CANONICAL_FIELDS[kind]
    frame = pd.DataFrame({column: pd.Series(dtype=_dtype_for(column)) for column in columns})
    return frame


def _dtype_for(field: str) -> str:
    field_type = FIELD_TYPES[field]
    if field_type == FLOAT_FIELD:
        return "float64"
    if field_type == COUNT_FIELD:
        return "int64"
    return "object"


def _lookup(record: Mapping[str, Any], field: str) -> Tuple[bool, Any]:
    for alias in FIELD_ALIASES[field]:
        if alias in record:
            return True, record[alias]
    return False, None


def _to_float(value: Any) -> Optional[float]:
    # bool is an int subclass but never a meaningful metric
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_float(value: Any) -> float:
    """Non-negative float, 0.0 when absent or not numeric."""
    number = _to_float(value)
    if number is None or number < 0:
        return 0.0
    return number


def _to_count(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None:
        return None
    count = int(number)
    if count > MAX_COUNT:
        return None
    return count


def coerce_count(value: Any) -> int:
    """Non-negative int64-sized int, 0 when absent, not numeric or out of range."""
    count = _to_count(value)
    if count is None or count < 0:
        return 0
    return count


def coerce_string(value: Any) -> str:
    """Stripped string, ``"Unknown"`` when absent or blank."""
    if value is None:
        return UNKNOWN
    if isinstance(value, float) and math.isnan(value):
        return UNKNOWN
    text = str(value).strip()
    return text if text else UNKNOWN


COERCERS = {
    STRING_FIELD: coerce_string,
    FLOAT_FIELD: coerce_float,
    COUNT_FIELD: coerce_count,
}


class RecordNormalizer:
    """
    Converts heterogeneous raw records into canonical entity rows.
    """

    def __init__(self, kind: str = ACCOUNT):
        """
        Initialize normalizer.

        Parameters
        ----------
        kind : str
            ``"account"`` or ``"workspace"``
        """
        self.kind = resolve_kind(kind)
        self.fields = CANONICAL_FIELDS[self.kind]
        self.defaulted: Dict[str, int] = {field: 0 for field in self.fields}

    def normalize_record(self, raw: Any) -> Dict[str, Any]:
        """
        Normalize one raw record. Never raises.

        Incoming ``quadrant``/``risk_level`` values are dropped; they are
        always recomputed by a classification pass.
        """
        record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
        entity: Dict[str, Any] = {}

        for field in self.fields:
            found, value = _lookup(record, field)
            coerced = COERCERS[FIELD_TYPES[field]](value)
            if not found or self._was_defaulted(field, value, coerced):
                self.defaulted[field] += 1
                logger.debug("Field '%s' defaulted to %r (raw value %r)", field, coerced, value)
            entity[field] = coerced

        return entity

    def _was_defaulted(self, field: str, raw_value: Any, coerced: Any) -> bool:
        if FIELD_TYPES[field] == STRING_FIELD:
            explicit = isinstance(raw_value, str) and raw_value.strip() == UNKNOWN
            return coerced == UNKNOWN and not explicit
        if FIELD_TYPES[field] == COUNT_FIELD:
            return _to_count(raw_value) is None
        return _to_float(raw_value) is None

    def normalize_records(self, records: Optional[Iterable[Any]]) -> pd.DataFrame:
        """
        Normalize a batch of raw records into a canonical DataFrame.

        Parameters
        ----------
        records : Iterable[Any]
            Raw key-mapping records (anything else becomes an all-default row)

        Returns
        -------
        pd.DataFrame
            One row per record with canonical columns and dtypes
        """
        logger.info("[STEP 1] Normalizing %s records...", self.kind)
        self.defaulted = {field: 0 for field in self.fields}

        rows = [self.normalize_record(raw) for raw in (records if records is not None else [])]
        if not rows:
            logger.info("   ⚠️ No %s records supplied", self.kind)
            return empty_frame(self.kind)

        df = pd.DataFrame(rows, columns=self.fields)
        for field in self.fields:
            df[field] = df[field].astype(_dtype_for(field))

        self._log_defaults(len(df))
        logger.info("✅ Normalized %s %s records", len(df), self.kind)
        return df

    def _log_defaults(self, total: int) -> None:
        for field, count in self.defaulted.items():
            if count:
                logger.info("   ⚠️ %s: %s/%s values defaulted", field, count, total)
