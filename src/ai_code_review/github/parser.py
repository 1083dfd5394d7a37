"""
Unified Diff Parser

Parses unified diff text (as returned by GitHub's diff media type for
pull requests and commit comparisons) into structured file changes.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models.pr_diff import DEV_NULL, ChangeKind, FileChange, Hunk, LineChange


logger = logging.getLogger(__name__)


@dataclass
class _HunkState:
    """Mutable hunk under construction."""
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    old_remaining: int
    new_remaining: int
    changes: List[LineChange] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return self.old_remaining > 0 or self.new_remaining > 0

    def freeze(self) -> Hunk:
        return Hunk(
            changes=list(self.changes),
            old_start=self.old_start,
            old_lines=self.old_lines,
            new_start=self.new_start,
            new_lines=self.new_lines,
        )


@dataclass
class _FileState:
    """Mutable file change under construction."""
    source_path: Optional[str] = None
    destination_path: Optional[str] = None
    new_file: bool = False
    deleted_file: bool = False
    hunks: List[_HunkState] = field(default_factory=list)

    def freeze(self) -> FileChange:
        source = None if self.new_file else self.source_path
        destination = DEV_NULL if self.deleted_file else self.destination_path
        return FileChange(
            source_path=source,
            destination_path=destination,
            hunks=[h.freeze() for h in self.hunks],
        )


class UnifiedDiffParser:
    """
    Parser for unified diff text.

    Produces FileChange objects in the order files appear in the diff.
    A file created by the diff has no source path; a file removed by
    the diff has "/dev/null" as its destination path.
    """

    def __init__(self):
        """Initialize unified diff parser."""
        self.git_header_pattern = re.compile(r'^diff --git a/(.*) b/(.*)$')
        self.hunk_header_pattern = re.compile(r'^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@(.*)$')
        self.binary_file_pattern = re.compile(r'^Binary files? .* differ')

    def parse(self, diff_text: Optional[str]) -> List[FileChange]:
        """
        Parse a unified diff into file changes.

        Args:
            diff_text: Raw unified diff text

        Returns:
            List of FileChange objects in diff order
        """
        if not diff_text:
            return []

        files: List[_FileState] = []
        current: Optional[_FileState] = None
        hunk: Optional[_HunkState] = None

        for line in diff_text.split('\n'):
            # Hunk body lines are consumed by count so that content such as
            # "--- x" inside a hunk is never mistaken for a file header.
            if hunk is not None and hunk.is_open:
                self._consume_hunk_line(hunk, line)
                continue

            git_match = self.git_header_pattern.match(line)
            if git_match:
                current = _FileState(
                    source_path=git_match.group(1),
                    destination_path=git_match.group(2),
                )
                files.append(current)
                hunk = None
                continue

            if line.startswith('--- '):
                # Plain unified diffs have no "diff --git" line
                if current is None or current.hunks:
                    current = _FileState()
                    files.append(current)
                    hunk = None
                path = self._parse_path(line[4:])
                if path is None:
                    current.new_file = True
                else:
                    current.source_path = path
                continue

            if current is None:
                continue

            if line.startswith('+++ '):
                path = self._parse_path(line[4:])
                if path is None:
                    current.deleted_file = True
                else:
                    current.destination_path = path
            elif line.startswith('new file mode'):
                current.new_file = True
            elif line.startswith('deleted file mode'):
                current.deleted_file = True
            elif line.startswith('rename from '):
                current.source_path = line[len('rename from '):]
            elif line.startswith('rename to '):
                current.destination_path = line[len('rename to '):]
            elif self.binary_file_pattern.match(line):
                logger.debug(f"Skipping binary file diff: {current.destination_path}")
            else:
                header_match = self.hunk_header_pattern.match(line)
                if header_match:
                    hunk = self._start_hunk(header_match)
                    current.hunks.append(hunk)

        parsed = [f.freeze() for f in files]
        logger.debug(f"Parsed {len(parsed)} files from diff")
        return parsed

    def _start_hunk(self, header_match: re.Match) -> _HunkState:
        old_start = int(header_match.group(1))
        old_lines = int(header_match.group(2) if header_match.group(2) is not None else 1)
        new_start = int(header_match.group(3))
        new_lines = int(header_match.group(4) if header_match.group(4) is not None else 1)

        return _HunkState(
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
            old_remaining=old_lines,
            new_remaining=new_lines,
        )

    def _consume_hunk_line(self, hunk: _HunkState, line: str) -> None:
        if line.startswith('\\'):
            # "\ No newline at end of file"
            return

        marker, content = line[:1], line[1:]
        if marker == '+':
            hunk.changes.append(LineChange(ChangeKind.ADDITION, content))
            hunk.new_remaining -= 1
        elif marker == '-':
            hunk.changes.append(LineChange(ChangeKind.DELETION, content))
            hunk.old_remaining -= 1
        else:
            # Some tools strip the leading space of empty context lines
            hunk.changes.append(LineChange(ChangeKind.CONTEXT, content))
            hunk.old_remaining -= 1
            hunk.new_remaining -= 1

    def _parse_path(self, raw: str) -> Optional[str]:
        """
        Normalize a path from a ---/+++ header line.

        Returns:
            Path without the a/ or b/ prefix, or None for /dev/null
        """
        path = raw.split('\t', 1)[0].rstrip('\r')
        if path.startswith('"') and path.endswith('"') and len(path) >= 2:
            path = path[1:-1]
        if path == DEV_NULL:
            return None
        if path.startswith(('a/', 'b/')):
            return path[2:]
        return path

    def summarize(self, files: List[FileChange]) -> Tuple[int, int]:
        """Return (total_additions, total_deletions) across files."""
        return (
            sum(f.additions for f in files),
            sum(f.deletions for f in files),
        )
