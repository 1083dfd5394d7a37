"""
LLM Review Engine

This module provides the fixed review prompt, the completion call
and cleanup of the model's response.
"""

from .prompts import PromptBuilder
from .generator import GenerationConfig, ReviewGenerator, create_review_generator
from .sanitizer import sanitize

__all__ = [
    'PromptBuilder',
    'GenerationConfig',
    'ReviewGenerator',
    'create_review_generator',
    'sanitize',
]
