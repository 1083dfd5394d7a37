"""
Pull Request Data Models

리뷰 대상 Pull Request 정보
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class PullRequestDetails:
    """호출마다 한 번 조회되는 Pull Request 스냅샷"""
    owner: str
    repo: str
    pull_number: int
    title: str
    description: str = ""

    def __post_init__(self):
        """데이터 검증"""
        if self.pull_number <= 0:
            raise ValueError("Pull request number must be positive")
        if not self.owner or not self.repo:
            raise ValueError("Repository owner and name are required")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_api(cls, owner: str, repo: str, pr_data: Dict[str, Any]) -> "PullRequestDetails":
        """GitHub pulls API 응답(또는 webhook의 pull_request 객체)에서 생성"""
        return cls(
            owner=owner,
            repo=repo,
            pull_number=int(pr_data["number"]),
            title=pr_data.get("title") or "",
            description=pr_data.get("body") or "",
        )
