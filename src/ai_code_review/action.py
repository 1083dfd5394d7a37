"""
GitHub Actions Entry Point

Reviews the pull request that triggered the workflow run.

Inputs are read from INPUT_* variables (GITHUB_TOKEN, OPENAI_API_KEY,
OPENAI_API_MODEL, EXCLUDE) and the event payload from GITHUB_EVENT_PATH.
"""

import os
import sys
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .api import ReviewOrchestrator
from .config import AppConfig, setup_logging
from .github.client import GitHubClient
from .llm.generator import ReviewGenerator
from .models.events import UnsupportedEventError, parse_trigger
from .models.pull_request import PullRequestDetails
from .models.review import ReviewResult, ReviewStatus, skipped


logger = logging.getLogger(__name__)


def load_event(event_path: Optional[str]) -> Optional[Dict[str, Any]]:
    """Read the workflow event payload; None if there is no event file."""
    if not event_path or not Path(event_path).is_file():
        return None

    with open(event_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def resolve_pull_request(event: Mapping[str, Any], github_client: GitHubClient) -> PullRequestDetails:
    """Look up the PR named by the event to get its title and description."""
    repository = event["repository"]
    number = event.get("number") or event["pull_request"]["number"]

    return github_client.get_pull_request_details(
        repository["owner"]["login"],
        repository["name"],
        int(number),
    )


def run(
    config: AppConfig,
    environ: Optional[Mapping[str, str]] = None,
    github_client: Optional[GitHubClient] = None,
    generator: Optional[ReviewGenerator] = None
) -> Optional[ReviewResult]:
    """
    Run one review for the current workflow event.

    Returns:
        ReviewResult, or None when there was no event to process
    """
    env = os.environ if environ is None else environ

    event = load_event(env.get("GITHUB_EVENT_PATH"))
    if event is None:
        logger.info("No event file found.")
        return None

    try:
        trigger = parse_trigger(event)
    except UnsupportedEventError as e:
        logger.info(str(e))
        return skipped(ReviewStatus.UNSUPPORTED)

    config.validate()

    github_client = github_client or GitHubClient(
        config.github.token,
        base_url=config.github.api_base_url,
        timeout=config.github.timeout_seconds,
    )
    orchestrator = ReviewOrchestrator.from_config(config, github_client, generator)

    result = orchestrator.review(trigger, resolve_pull_request(event, github_client))
    logger.info(f"Review finished: {result.status.value}")
    return result


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """Console entry point; returns the process exit code."""
    config = AppConfig.from_action_inputs(environ)
    setup_logging(config.logging)

    try:
        run(config, environ)
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
