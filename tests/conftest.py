"""
Shared fixtures: a small account portfolio and the workspaces of two of
its accounts.
"""

import copy
import sys
from pathlib import Path

import pytest

# Add project root to path so tests can import the package without installing it
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from quadrant_insights.utils import DEFAULT_CONFIG  # noqa: E402
from quadrant_insights.core.segment.quadrant_segment import normalize_and_classify  # noqa: E402


# Medians of this portfolio: inactive 8.0, days ago 8.0
ACCOUNT_RECORDS = [
    {"account_id": "acc-1", "account_name": "Acme Corp", "avg_inactive_days": 2, "avg_days_ago": 3,
     "workspace_count": 2, "chat_count": 10, "account_status": "Active"},
    {"account_id": "acc-2", "account_name": "beta labs", "avg_inactive_days": 5.0, "avg_days_ago": 12,
     "workspace_count": 1, "chat_count": 4, "account_status": "Active"},
    {"account_id": "acc-3", "account_name": "Émile Co", "avg_inactive_days": 8, "avg_days_ago": 1,
     "workspace_count": 3, "chat_count": 0, "account_status": "Churned"},
    {"account_id": "acc-4", "account_name": "Delta", "avg_inactive_days": 25, "avg_days_ago": 30,
     "workspace_count": 5, "chat_count": 2, "account_status": "Churned"},
    {"account_id": "acc-5", "account_name": "Acme East", "avg_inactive_days": 15, "avg_days_ago": 8,
     "workspace_count": 1, "chat_count": 7, "account_status": "Trial"},
]

# Interleaved on purpose: acc-1 owns w1/w2, acc-2 owns w3/w4
WORKSPACE_RECORDS = [
    {"workspace_id": "w1", "workspace_name": "Alpha", "account_id": "acc-1", "account_name": "Acme Corp",
     "avg_inactive_days": 1, "avg_days_ago": 1, "chat_count": 5, "account_status": "Active"},
    {"workspace_id": "w3", "workspace_name": "Gamma", "account_id": "acc-2", "account_name": "beta labs",
     "avg_inactive_days": 100, "avg_days_ago": 100, "chat_count": 1, "account_status": "Active"},
    {"workspace_id": "w2", "workspace_name": "Bravo", "account_id": "acc-1", "account_name": "Acme Corp",
     "avg_inactive_days": 3, "avg_days_ago": 5, "chat_count": 9, "account_status": "Active"},
    {"workspace_id": "w4", "workspace_name": "Omega", "account_id": "acc-2", "account_name": "beta labs",
     "avg_inactive_days": 200, "avg_days_ago": 300, "chat_count": 1, "account_status": "Active"},
]


@pytest.fixture()
def config():
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture()
def account_records():
    return copy.deepcopy(ACCOUNT_RECORDS)


@pytest.fixture()
def workspace_records():
    return copy.deepcopy(WORKSPACE_RECORDS)


@pytest.fixture()
def accounts_df(account_records, config):
    frame, _ = normalize_and_classify(account_records, "account", config)
    return frame
