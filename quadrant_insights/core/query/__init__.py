# core/query/__init__.py

from .query_engine import (
    QueryEngine,
    QueryParameters,
    QueryResult,
    toggle_sort,
)

__all__ = [
    'QueryEngine',
    'QueryParameters',
    'QueryResult',
    'toggle_sort',
]
