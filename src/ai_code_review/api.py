"""
Main AI Review API

Orchestrates one review invocation from the parsed trigger to the
published comment. Entry points parse the event and supply how the
diff is fetched and how the comment is published.
"""

import logging
from typing import Any, Callable, Optional, Union

from .config import AppConfig
from .github.client import GitHubClient
from .llm.generator import ReviewGenerator, create_review_generator
from .models.events import OpenedEvent, SynchronizeEvent
from .models.pull_request import PullRequestDetails
from .models.review import ReviewResult, ReviewStatus, completed, skipped
from .pipeline import ReviewPipeline


logger = logging.getLogger(__name__)

Trigger = Union[OpenedEvent, SynchronizeEvent]
DiffFetcher = Callable[[PullRequestDetails, Trigger], Optional[str]]
CommentPublisher = Callable[[PullRequestDetails, str], Any]


class ReviewOrchestrator:
    """
    Runs the review steps strictly in sequence:
    1. Fetch the diff for the trigger (opened / synchronize)
    2. Run the shared review pipeline
    3. Publish the review as one comment
    """

    def __init__(
        self,
        pipeline: ReviewPipeline,
        fetch_diff: DiffFetcher,
        publish: CommentPublisher
    ):
        """
        Initialize review orchestrator.

        Args:
            pipeline: Shared diff-to-review pipeline
            fetch_diff: Returns the diff for a PR and trigger
            publish: Posts the review body on the PR
        """
        self.pipeline = pipeline
        self.fetch_diff = fetch_diff
        self.publish = publish

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        github_client: Optional[GitHubClient] = None,
        generator: Optional[ReviewGenerator] = None
    ) -> "ReviewOrchestrator":
        """Build an orchestrator wired to GitHub and the configured model."""
        github_client = github_client or GitHubClient(
            config.github.token,
            base_url=config.github.api_base_url,
            timeout=config.github.timeout_seconds,
        )
        generator = generator or create_review_generator(config.llm)

        pipeline = ReviewPipeline(
            generator=generator,
            exclude_patterns=config.review.exclude_patterns,
            max_diff_chars=config.review.max_diff_chars,
        )
        return cls(
            pipeline=pipeline,
            fetch_diff=github_client.fetch_diff,
            publish=github_client.publish_review,
        )

    def review(self, trigger: Trigger, pr: PullRequestDetails) -> ReviewResult:
        """
        Review a pull request for an already parsed trigger.

        Args:
            trigger: OpenedEvent or SynchronizeEvent
            pr: Pull request details

        Returns:
            ReviewResult describing what happened
        """
        logger.info(f"Starting review for {pr.full_name}#{pr.pull_number} ({trigger.action})")

        diff = self.fetch_diff(pr, trigger)
        if not diff:
            logger.info("No diff found.")
            return skipped(ReviewStatus.NO_DIFF)

        review_text = self.pipeline.review_diff(diff, pr)
        if not review_text:
            logger.info("No comments generated by AI.")
            return skipped(ReviewStatus.NO_REVIEW)

        posted = self._publish(pr, review_text)
        return completed(review_text, comment_posted=posted)

    def _publish(self, pr: PullRequestDetails, review_text: str) -> bool:
        try:
            self.publish(pr, review_text)
        except Exception as e:
            logger.error(f"Failed to create issue comment: {e}")
            return False
        return True
