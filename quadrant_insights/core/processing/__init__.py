# core/processing/__init__.py

from .record_normalizer import (
    ACCOUNT,
    WORKSPACE,
    RecordNormalizer,
    empty_frame,
    id_column,
    name_column,
)

__all__ = [

    # Entity kinds
    'ACCOUNT',
    'WORKSPACE',

    # Raw record normalization
    'RecordNormalizer',
    'empty_frame',
    'id_column',
    'name_column',

]
