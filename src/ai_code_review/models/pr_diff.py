"""
PR Diff Data Models

Unified diff를 파싱한 결과를 담는 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


DEV_NULL = "/dev/null"


class ChangeKind(str, Enum):
    """diff 라인 종류"""
    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"


@dataclass(frozen=True)
class LineChange:
    """hunk 안의 개별 라인 변경 (diff 마커 제외한 내용)"""
    kind: ChangeKind
    content: str

    @property
    def is_addition(self) -> bool:
        return self.kind is ChangeKind.ADDITION


@dataclass(frozen=True)
class Hunk:
    """파일 diff의 개별 hunk"""
    changes: List[LineChange] = field(default_factory=list)
    old_start: int = 0
    old_lines: int = 0
    new_start: int = 0
    new_lines: int = 0

    def __post_init__(self):
        """데이터 검증"""
        if self.old_start < 0 or self.new_start < 0:
            raise ValueError("Line numbers must be non-negative")
        if self.old_lines < 0 or self.new_lines < 0:
            raise ValueError("Line counts must be non-negative")

    @property
    def added_lines(self) -> List[str]:
        return [c.content for c in self.changes if c.is_addition]


@dataclass(frozen=True)
class FileChange:
    """파일 변경사항

    destination_path가 "/dev/null"이면 삭제된 파일이고,
    source_path가 None이면 새로 추가된 파일이다.
    """
    source_path: Optional[str]
    destination_path: Optional[str]
    hunks: List[Hunk] = field(default_factory=list)

    @property
    def path(self) -> str:
        """exclude 패턴 매칭에 쓰이는 경로"""
        return self.destination_path or ""

    @property
    def is_deleted(self) -> bool:
        return self.destination_path == DEV_NULL

    @property
    def is_new(self) -> bool:
        return self.source_path is None

    @property
    def additions(self) -> int:
        return sum(len(h.added_lines) for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(
            1 for h in self.hunks for c in h.changes
            if c.kind is ChangeKind.DELETION
        )
