"""
Data Models

AI Code Review 시스템의 핵심 데이터 모델들
"""

from .pr_diff import DEV_NULL, ChangeKind, LineChange, Hunk, FileChange
from .pull_request import PullRequestDetails
from .events import (
    OpenedEvent,
    SynchronizeEvent,
    TriggerEvent,
    UnsupportedEventError,
    parse_trigger,
)
from .review import ReviewStatus, ReviewResult

__all__ = [
    "DEV_NULL",
    "ChangeKind",
    "LineChange",
    "Hunk",
    "FileChange",
    "PullRequestDetails",
    "OpenedEvent",
    "SynchronizeEvent",
    "TriggerEvent",
    "UnsupportedEventError",
    "parse_trigger",
    "ReviewStatus",
    "ReviewResult",
]
