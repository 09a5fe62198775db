# core/segment/quadrant_segment.py

import logging
from datetime import datetime
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Tuple

import pandas as pd # type: ignore

from quadrant_insights.utils import load_config
from quadrant_insights.core.processing.record_normalizer import (
    ACCOUNT,
    DERIVED_FIELDS,
    WORKSPACE,
    RecordNormalizer,
    resolve_kind,
)
from quadrant_insights.core.query.query_engine import QueryEngine, QueryParameters, QueryResult
from quadrant_insights.core.export.csv_exporter import CsvExporter, ExportResult
from quadrant_insights.core.chart.chart_projection import ChartProjection
from .median_calculator import MedianCalculator, zero_medians
from .quadrant_classifier import QuadrantClassifier
from .risk_mapper import RiskMapper
from .analyzer import QuadrantAnalyzer, card_quadrant

logger = logging.getLogger(__name__)


def classify_collection(
    df: pd.DataFrame,
    config: Optional[Dict[str, Any]] = None
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """
    One classification pass: medians once, then quadrant and risk for every row.

    Stale ``quadrant``/``risk_level`` columns are discarded first.

    Returns
    -------
    Tuple[pd.DataFrame, Dict[str, float]]
        New classified frame and the medians it was classified against
    """
    base = df.drop(columns=[c for c in DERIVED_FIELDS if c in df.columns])
    medians = MedianCalculator(base).compute_medians()
    classified = QuadrantClassifier(base, medians, config).assign_quadrants()
    classified = RiskMapper(classified).assign_risk_levels()
    return classified, medians


def normalize_and_classify(
    records: Optional[Iterable[Any]],
    kind: str = ACCOUNT,
    config: Optional[Dict[str, Any]] = None
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """Normalize a raw batch and classify it against that batch's own medians."""
    df = RecordNormalizer(kind).normalize_records(records)
    return classify_collection(df, config)


def classify_workspaces_by_account(
    workspaces: pd.DataFrame,
    config: Optional[Dict[str, Any]] = None
) -> Tuple[pd.DataFrame, Dict[str, Dict[str, float]]]:
    """
    Classify workspaces against their siblings only.

    Each owning account gets its own median pass; no workspace is compared
    with workspaces of another account.

    Returns
    -------
    Tuple[pd.DataFrame, Dict[str, Dict[str, float]]]
        Classified workspaces in original row order and medians per account id
    """
    if workspaces.empty:
        classified, _ = classify_collection(workspaces, config)
        return classified, {}

    medians_by_account: Dict[str, Dict[str, float]] = {}
    parts = []
    for account_id, group in workspaces.groupby("account_id", sort=False):
        classified, medians = classify_collection(group, config)
        medians_by_account[account_id] = medians
        parts.append(classified)

    combined = pd.concat(parts).loc[workspaces.index]
    return combined, medians_by_account


class QuadrantSegment:
    """
    Engagement quadrant orchestrator for accounts and their workspaces.
    Coordinates:
    - Record normalization
    - Median computation
    - Quadrant and risk assignment
    - Querying, export and chart projection
    """

    def __init__(
        self,
        accounts: Optional[Iterable[Any]] = None,
        workspaces: Optional[Iterable[Any]] = None,
        config: Optional[Dict[str, Any]] = None
    ) -> None:
        self.config = config if config is not None else load_config()

        self.raw_accounts = list(accounts) if accounts is not None else []
        self.raw_workspaces = list(workspaces) if workspaces is not None else []

        self.accounts = pd.DataFrame()
        self.workspaces = pd.DataFrame()
        self.account_medians: Dict[str, float] = zero_medians()
        self.workspace_medians: Dict[str, Dict[str, float]] = {}
        self._classified = False

        logger.info("✅ QuadrantSegment initialized")
        logger.info("   - Accounts: %s", len(self.raw_accounts))
        logger.info("   - Workspaces: %s", len(self.raw_workspaces))

    # ---------------- Pipeline ----------------

    def run(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Execute the complete classification pipeline."""
        logger.info("=" * 80)
        logger.info("🚀 ENGAGEMENT QUADRANT PIPELINE")
        logger.info("=" * 80)

        self.classify_accounts()
        self.classify_workspaces()
        self._classified = True

        self._log_final_summary()
        return self.accounts, self.workspaces

    def _log_final_summary(self) -> None:
        distribution = QuadrantAnalyzer(self.accounts, ACCOUNT, self.config).quadrant_distribution()
        logger.info("🎉 PIPELINE COMPLETE!")
        for _, row in distribution.iterrows():
            logger.info(
                "   - %s: %s accounts (%.1f%%)", row["quadrant"], row["Count"], row["Percentage"]
            )

    def _ensure_classified(self) -> None:
        if not self._classified:
            self.run()

    # ---------------- Convenience ----------------

    def classify_accounts(self) -> pd.DataFrame:
        self.accounts, self.account_medians = normalize_and_classify(
            self.raw_accounts, ACCOUNT, self.config
        )
        return self.accounts

    def classify_workspaces(self) -> pd.DataFrame:
        normalized = RecordNormalizer(WORKSPACE).normalize_records(self.raw_workspaces)
        self.workspaces, self.workspace_medians = classify_workspaces_by_account(
            normalized, self.config
        )
        return self.workspaces

    def frame(self, kind: str) -> pd.DataFrame:
        self._ensure_classified()
        return self.workspaces if resolve_kind(kind) == WORKSPACE else self.accounts

    def account(self, account_id: str) -> Optional[Dict[str, Any]]:
        """Classified account record, or ``None`` when the id is unknown."""
        self._ensure_classified()
        return QuadrantAnalyzer(self.accounts, ACCOUNT, self.config).find(account_id)

    def workspaces_for(self, account_id: str) -> Optional[Tuple[pd.DataFrame, Dict[str, float]]]:
        """
        Classified workspaces of one account and the medians they were
        classified against. ``None`` when the account does not exist.
        """
        self._ensure_classified()
        if self.account(account_id) is None:
            logger.warning("⚠️ Account not found: %s", account_id)
            return None

        scoped = self.workspaces[self.workspaces["account_id"] == account_id].reset_index(drop=True)
        medians = self.workspace_medians.get(account_id, zero_medians())
        return scoped, medians

    # ---------------- Presentation-facing outputs ----------------

    def query(self, kind: str = ACCOUNT, params: Optional[QueryParameters] = None,
              account_id: Optional[str] = None) -> QueryResult:
        return QueryEngine(self._scoped(kind, account_id), kind).run(params)

    def focus_card(self, card: str, params: Optional[QueryParameters] = None) -> QueryParameters:
        """
        Table parameters after clicking a dashboard metric card.

        Cards without a quadrant (e.g. ``total``) leave ``params`` unchanged.
        """
        params = params or QueryParameters()
        quadrant = card_quadrant(card)
        if quadrant is None:
            logger.warning("⚠️ Metric card %r has no quadrant filter", card)
            return params
        return replace(params, focus_quadrant=quadrant)

    def export_csv(self, kind: str = ACCOUNT, params: Optional[QueryParameters] = None,
                   account_id: Optional[str] = None, now: Optional[datetime] = None) -> ExportResult:
        """Export the filtered (unpaginated) view currently described by ``params``."""
        view = QueryEngine(self._scoped(kind, account_id), kind).view(params)
        return CsvExporter(kind, self.config).export(view, now)

    def chart(self, kind: str = ACCOUNT, account_id: Optional[str] = None) -> Optional[ChartProjection]:
        """
        Chart projection for all accounts, or for one account's workspaces.
        ``None`` when a workspace chart is requested for an unknown account.
        """
        if resolve_kind(kind) == ACCOUNT:
            return ChartProjection(self.frame(ACCOUNT), ACCOUNT, config=self.config)

        scoped = self.workspaces_for(account_id) if account_id is not None else None
        if scoped is None:
            return None
        frame, medians = scoped
        return ChartProjection(frame, WORKSPACE, medians=medians, config=self.config)

    def analyzer(self, kind: str = ACCOUNT, account_id: Optional[str] = None) -> QuadrantAnalyzer:
        return QuadrantAnalyzer(self._scoped(kind, account_id), kind, self.config)

    def _scoped(self, kind: str, account_id: Optional[str]) -> pd.DataFrame:
        frame = self.frame(kind)
        if resolve_kind(kind) == WORKSPACE and account_id is not None:
            frame = frame[frame["account_id"] == account_id].reset_index(drop=True)
        return frame
