"""
Response Sanitizer

Cleans up completion output before it is posted as a comment.
"""

import re


# Matches ``` with an optional language tag, e.g. ```markdown
CODE_FENCE = re.compile(r'```(\w+)?', re.ASCII)


def sanitize(raw: str) -> str:
    """
    Remove every code fence token and surrounding whitespace.

    The model is told not to wrap its answer in a fence but sometimes
    does anyway. Fences inside before/after examples are removed too,
    which flattens those samples into plain text.
    """
    if not raw:
        return ""
    return CODE_FENCE.sub('', raw).strip()
