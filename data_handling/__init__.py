"""
Data handling module for CSV Join.

This module provides the join engine: header reconciliation, join key
derivation, per-source grouping, cross-product expansion and row
projection, plus the pipeline that ties them together.
"""

from .headers import (
    HeaderReconciliation,
    OrderedColumnSet,
    identify_join_columns,
    identify_output_columns,
    reconcile_headers,
)
from .join import build_key_universe, expand_join, project_row
from .join_keys import DEFAULT_KEY_SEPARATOR, JoinKeys
from .loader import KeyedCollection, Record, load_source, make_record
from .pipeline import JoinSummary, PreparedJoin, iter_joined_rows, prepare_join, run_join, write_join

__all__ = [
    # Headers
    'HeaderReconciliation',
    'OrderedColumnSet',
    'identify_join_columns',
    'identify_output_columns',
    'reconcile_headers',

    # Keys and loading
    'DEFAULT_KEY_SEPARATOR',
    'JoinKeys',
    'KeyedCollection',
    'Record',
    'load_source',
    'make_record',

    # Expansion
    'build_key_universe',
    'expand_join',
    'project_row',

    # Pipeline
    'JoinSummary',
    'PreparedJoin',
    'iter_joined_rows',
    'prepare_join',
    'run_join',
    'write_join',
]

# Version info
__version__ = "1.0.0"
