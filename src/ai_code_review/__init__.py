"""
AI Code Review

GitHub Pull Request 변경분을 LLM으로 리뷰하고 결과를 PR 코멘트로 남기는 도구
"""

__version__ = "1.0.0"

from .api import ReviewOrchestrator
from .pipeline import ReviewPipeline

__all__ = ["ReviewOrchestrator", "ReviewPipeline"]
