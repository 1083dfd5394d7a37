"""
Diff Aggregator

Flattens the filtered file changes into the single text artifact
embedded in the review prompt: one synthetic header per file followed
by that file's added lines only.
"""

import re
import logging
from typing import List, Optional, Sequence

from ..models.pr_diff import FileChange


logger = logging.getLogger(__name__)

TRAILING_NEWLINE = re.compile(r'\r?\n\Z')
TRUNCATION_MARKER = "... (diff truncated: {shown} of {total} characters shown)"


def _render_path(path: Optional[str]) -> str:
    return "null" if path is None else path


def aggregate_diff(files: Sequence[FileChange], max_chars: Optional[int] = None) -> str:
    """
    Aggregate added lines of all non-deleted files.

    Args:
        files: File changes that survived exclusion filtering
        max_chars: Optional size cap; None or 0 disables truncation

    Returns:
        Aggregated diff text, or "" when there are no added lines
    """
    lines: List[str] = []
    added_count = 0

    for file_change in files:
        if file_change.is_deleted:
            continue

        lines.append(
            f"diff --git a/{_render_path(file_change.source_path)} "
            f"b/{_render_path(file_change.destination_path)}"
        )

        for hunk in file_change.hunks:
            for change in hunk.changes:
                if change.is_addition:
                    lines.append(f"+ {TRAILING_NEWLINE.sub('', change.content, count=1)}")
                    added_count += 1

    if added_count == 0:
        logger.info("No added lines to review")
        return ""

    aggregated = "\n".join(lines)
    logger.info(f"Aggregated {added_count} added lines ({len(aggregated)} characters)")

    if max_chars:
        return truncate_diff(aggregated, max_chars)
    return aggregated


def truncate_diff(aggregated: str, max_chars: int) -> str:
    """
    Cut the aggregated diff at the last whole line within ``max_chars``
    and append a marker line stating how much was kept.
    """
    if max_chars <= 0 or len(aggregated) <= max_chars:
        return aggregated

    cut = aggregated.rfind("\n", 0, max_chars + 1)
    shown = aggregated[:cut] if cut > 0 else aggregated[:max_chars]

    logger.warning(f"Aggregated diff truncated from {len(aggregated)} to {len(shown)} characters")
    marker = TRUNCATION_MARKER.format(shown=len(shown), total=len(aggregated))
    return f"{shown}\n{marker}"
