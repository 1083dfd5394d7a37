"""
Exclusion Filter

Drops changed files whose destination path matches any of the
configured exclusion globs before the diff is aggregated.

Matching follows minimatch defaults (wcmatch flags below):
- ``*`` and ``?`` never cross a ``/``; ``**`` spans path segments
- ``[...]``, ``[!...]`` and POSIX ``[[:alpha:]]`` classes
- brace expansion, e.g. ``*.{js,ts}``
- extglobs, e.g. ``@(foo|bar).ts`` or ``!(*.md)``
- a leading ``!`` negates the pattern
- wildcards do not match a leading ``.`` in a segment
"""

import logging
from typing import List, Optional, Sequence

from wcmatch import glob

from ..models.pr_diff import FileChange

logger = logging.getLogger(__name__)

GLOB_FLAGS = (
    glob.GLOBSTAR
    | glob.BRACE
    | glob.EXTGLOB
    | glob.NEGATE
    | glob.NEGATEALL
    | glob.FORCEUNIX
)


def parse_exclude_patterns(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated exclusion setting into patterns.

    Args:
        raw: Value such as "*.md, dist/**, "

    Returns:
        Trimmed, non-empty patterns in configured order
    """
    if not raw:
        return []
    return [p.strip() for p in raw.split(',') if p.strip()]


def matches_glob(path: str, pattern: str) -> bool:
    """Check whether a path matches a glob pattern."""
    return glob.globmatch(path, pattern, flags=GLOB_FLAGS)


def filter_files(files: Sequence[FileChange], patterns: Sequence[str]) -> List[FileChange]:
    """
    Remove files whose destination path matches any exclusion pattern.

    Args:
        files: Parsed file changes
        patterns: Exclusion globs (already split and trimmed)

    Returns:
        Surviving file changes, in their original order
    """
    if not patterns:
        return list(files)

    kept = []
    for file_change in files:
        path = file_change.path
        matched = next((p for p in patterns if matches_glob(path, p)), None)
        if matched is not None:
            logger.debug(f"Excluding {path} (matched '{matched}')")
            continue
        kept.append(file_change)

    logger.info(f"Exclusion filter kept {len(kept)} of {len(files)} files")
    return kept
