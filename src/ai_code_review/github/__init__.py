"""
GitHub Integration Layer

This module provides GitHub API integration for PR lookup, diff
retrieval, unified diff parsing and review comment publication.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .parser import UnifiedDiffParser

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'UnifiedDiffParser']
