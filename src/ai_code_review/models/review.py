"""
Review Data Models

리뷰 실행 결과 모델
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReviewStatus(str, Enum):
    """호출 한 번의 결과 상태"""
    UNSUPPORTED = "unsupported"
    NO_DIFF = "no_diff"
    NO_REVIEW = "no_review"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ReviewResult:
    """리뷰 파이프라인 실행 결과"""
    status: ReviewStatus
    message: str
    review_text: str = ""
    comment_posted: bool = False

    def __post_init__(self):
        """데이터 검증"""
        if self.comment_posted and not self.review_text:
            raise ValueError("A posted comment must have a body")

    @property
    def has_review(self) -> bool:
        return bool(self.review_text)

    def to_dict(self, include_text: bool = False) -> dict:
        data = {
            "status": self.status.value,
            "message": self.message,
            "comment_posted": self.comment_posted,
        }
        if include_text:
            data["review_text"] = self.review_text
        return data


def completed(review_text: str, comment_posted: bool) -> ReviewResult:
    return ReviewResult(
        status=ReviewStatus.COMPLETED,
        message="Review completed successfully",
        review_text=review_text,
        comment_posted=comment_posted,
    )


def skipped(status: ReviewStatus, message: Optional[str] = None) -> ReviewResult:
    default_messages = {
        ReviewStatus.UNSUPPORTED: "Unsupported event type",
        ReviewStatus.NO_DIFF: "No diff found",
        ReviewStatus.NO_REVIEW: "No comments generated by AI",
    }
    return ReviewResult(status=status, message=message or default_messages[status])
