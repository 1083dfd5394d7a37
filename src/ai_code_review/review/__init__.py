"""
Diff Review Policy

Exclusion filtering and aggregation of parsed diffs into the
artifact the review prompt is built from.
"""

from .filter import parse_exclude_patterns, matches_glob, filter_files
from .aggregator import aggregate_diff, truncate_diff

__all__ = [
    'parse_exclude_patterns',
    'matches_glob',
    'filter_files',
    'aggregate_diff',
    'truncate_diff',
]
