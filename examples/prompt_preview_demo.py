#!/usr/bin/env python3
"""
Prompt Preview Demo

Fetches a PR diff, runs it through the exclusion filter and the
aggregator, and prints the prompt that would be sent to the model.
No completion request is made and nothing is posted.

Usage:
    python examples/prompt_preview_demo.py <owner> <repo> <pr_number> [exclude]

Example:
    python examples/prompt_preview_demo.py octocat hello-world 42 "*.md,dist/**"
"""

import sys
import os
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from ai_code_review.github.client import GitHubClient, GitHubAPIError
from ai_code_review.github.parser import UnifiedDiffParser
from ai_code_review.llm.prompts import PromptBuilder
from ai_code_review.review.aggregator import aggregate_diff
from ai_code_review.review.filter import filter_files, parse_exclude_patterns


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main():
    """Main demo function."""
    setup_logging()
    logger = logging.getLogger(__name__)

    if len(sys.argv) not in (4, 5):
        print("Usage: python prompt_preview_demo.py <owner> <repo> <pr_number> [exclude]")
        sys.exit(1)

    owner, repo = sys.argv[1], sys.argv[2]
    try:
        pr_number = int(sys.argv[3])
    except ValueError:
        print("Error: PR number must be an integer")
        sys.exit(1)
    patterns = parse_exclude_patterns(sys.argv[4] if len(sys.argv) == 5 else "")

    token = os.getenv('GITHUB_TOKEN')
    if not token:
        print("Error: GitHub token not found. Set GITHUB_TOKEN environment variable.")
        sys.exit(1)

    try:
        client = GitHubClient(token)
        parser = UnifiedDiffParser()

        pr = client.get_pull_request_details(owner, repo, pr_number)
        print(f"\n📋 PR: {pr.full_name}#{pr.pull_number} - {pr.title}")

        files = parser.parse(client.get_pull_request_diff(owner, repo, pr_number))
        additions, deletions = parser.summarize(files)
        print(f"\n📊 Diff Summary: {len(files)} files, +{additions}/-{deletions}")

        kept = filter_files(files, patterns)
        print(f"🔍 After exclusion ({', '.join(patterns) or 'none'}): {len(kept)} files")

        aggregated = aggregate_diff(kept)
        if not aggregated:
            print("\nNo added lines to review.")
            return

        print("\n" + "=" * 60)
        print(PromptBuilder().build(aggregated, pr))
        print("=" * 60)

    except GitHubAPIError as e:
        logger.error(f"GitHub API error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
