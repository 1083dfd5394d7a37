"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides methods for pull request lookup, diff retrieval and
posting the review comment.
"""

import time
import logging
from typing import Dict, Optional, Union
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter

from ..models.events import OpenedEvent, SynchronizeEvent
from ..models.pull_request import PullRequestDetails


logger = logging.getLogger(__name__)

DIFF_MEDIA_TYPE = 'application/vnd.github.v3.diff'


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    Provides methods for:
    - Pull request details lookup
    - Diff retrieval for a whole PR or a commit range
    - Issue comment creation on the PR
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub token (GITHUB_TOKEN or a personal access token)
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication."""
        session = requests.Session()

        # Every request is sent once; a transient failure aborts the invocation
        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'AI-Code-Review/1.0'
        })

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 10 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            if wait_time > 0:
                logger.warning(f"Rate limit low ({self.rate_limit_remaining}), resets in {wait_time:.1f}s")
                raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429 or (
            response.status_code == 403 and self.rate_limit_remaining == 0
        ):
            reset_time = datetime.fromtimestamp(
                int(response.headers.get('X-RateLimit-Reset', time.time() + 3600))
            )
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            error_data = self._error_payload(response)
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _error_payload(self, response: requests.Response) -> Dict:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {'message': response.text}

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict:
        """
        Get pull request information.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Pull request data
        """
        logger.info(f"Fetching PR {owner}/{repo}#{pr_number}")

        response = self._make_request('GET', f'/repos/{owner}/{repo}/pulls/{pr_number}')
        return response.json()

    def get_pull_request_details(self, owner: str, repo: str, pr_number: int) -> PullRequestDetails:
        """Look up title and description of a pull request."""
        pr_data = self.get_pull_request(owner, repo, pr_number)
        return PullRequestDetails.from_api(owner, repo, pr_data)

    def get_pull_request_diff(self, owner: str, repo: str, pr_number: int) -> str:
        """
        Get the full unified diff of a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Unified diff text
        """
        logger.info(f"Fetching diff for {owner}/{repo}#{pr_number}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/pulls/{pr_number}',
            headers={'Accept': DIFF_MEDIA_TYPE}
        )
        return response.text

    def compare_commits_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        """
        Get the unified diff between two commits.

        Args:
            owner: Repository owner
            repo: Repository name
            base: Base commit SHA (event "before")
            head: Head commit SHA (event "after")

        Returns:
            Unified diff text
        """
        logger.info(f"Fetching diff for {owner}/{repo} {base[:7]}...{head[:7]}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/compare/{base}...{head}',
            headers={'Accept': DIFF_MEDIA_TYPE}
        )
        return response.text

    def fetch_diff(
        self,
        pr: PullRequestDetails,
        trigger: Union[OpenedEvent, SynchronizeEvent]
    ) -> Optional[str]:
        """
        Fetch the diff to review for a trigger.

        opened fetches the whole PR diff, synchronize fetches only the
        range pushed by the event.
        """
        if isinstance(trigger, OpenedEvent):
            return self.get_pull_request_diff(pr.owner, pr.repo, pr.pull_number)
        if isinstance(trigger, SynchronizeEvent):
            return self.compare_commits_diff(pr.owner, pr.repo, trigger.before, trigger.after)

        logger.info(f"Unsupported event: {getattr(trigger, 'action', trigger)}")
        return None

    def create_issue_comment(self, owner: str, repo: str, pr_number: int, body: str) -> Dict:
        """
        Create a single issue comment on the pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            body: Comment body (markdown)

        Returns:
            Created comment data
        """
        logger.info(f"Creating single issue comment for PR #{pr_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{pr_number}/comments',
            json={'body': body}
        )
        if response.status_code == 201:
            logger.info("Issue comment created successfully.")
        return response.json()

    def publish_review(self, pr: PullRequestDetails, body: str) -> Dict:
        return self.create_issue_comment(pr.owner, pr.repo, pr.pull_number, body)
