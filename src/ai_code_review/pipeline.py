"""
Review Pipeline

Shared diff-to-review pipeline used by every entry point:
parse → exclude → aggregate → build prompt → complete → sanitize.
"""

import logging
from typing import List, Optional, Sequence

from .github.parser import UnifiedDiffParser
from .llm.generator import ReviewGenerator
from .llm.prompts import PromptBuilder
from .models.pr_diff import FileChange
from .models.pull_request import PullRequestDetails
from .review.aggregator import aggregate_diff
from .review.filter import filter_files


logger = logging.getLogger(__name__)


class ReviewPipeline:
    """
    Turns a unified diff into review text.

    Holds no per-invocation state, so one instance can serve any
    number of sequential invocations.
    """

    def __init__(
        self,
        generator: ReviewGenerator,
        exclude_patterns: Sequence[str] = (),
        prompt_builder: Optional[PromptBuilder] = None,
        parser: Optional[UnifiedDiffParser] = None,
        max_diff_chars: Optional[int] = None
    ):
        """
        Initialize review pipeline.

        Args:
            generator: Completion client wrapper
            exclude_patterns: Globs of destination paths to skip
            prompt_builder: Prompt builder (default: PromptBuilder())
            parser: Diff parser (default: UnifiedDiffParser())
            max_diff_chars: Optional cap on the aggregated diff size
        """
        self.generator = generator
        self.exclude_patterns = list(exclude_patterns)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.parser = parser or UnifiedDiffParser()
        self.max_diff_chars = max_diff_chars

    def prepare(self, diff_text: str) -> str:
        """Parse, filter and aggregate a diff; "" means nothing to review."""
        files: List[FileChange] = self.parser.parse(diff_text)
        filtered = filter_files(files, self.exclude_patterns)
        return aggregate_diff(filtered, max_chars=self.max_diff_chars)

    def build_prompt(self, diff_text: str, pr: PullRequestDetails) -> Optional[str]:
        """Return the prompt for a diff, or None when there is nothing to review."""
        aggregated = self.prepare(diff_text)
        if not aggregated:
            return None
        return self.prompt_builder.build(aggregated, pr)

    def review_diff(self, diff_text: str, pr: PullRequestDetails) -> str:
        """
        Produce review text for a diff.

        Args:
            diff_text: Unified diff fetched for the PR
            pr: Pull request being reviewed

        Returns:
            Sanitized review text, or "" if there were no added lines
            or the completion call failed
        """
        prompt = self.build_prompt(diff_text, pr)
        if prompt is None:
            return ""

        return self.generator.generate(prompt)
