"""
Review Generator

Sends the review prompt to a chat completion endpoint and returns
the sanitized review text. Completion failures never propagate:
they are logged and reported as an empty review.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from openai import OpenAI

from .sanitizer import sanitize


logger = logging.getLogger(__name__)


@dataclass
class GenerationConfig:
    """Configuration for LLM generation."""
    max_tokens: int = 1000
    temperature: float = 0.2


class ReviewGenerator:
    """
    Generates the review text with an OpenAI-compatible chat completion API.

    The prompt is sent as the only (system) message of a single request.
    """

    def __init__(
        self,
        client: Any,
        model_name: str,
        generation_config: Optional[GenerationConfig] = None
    ):
        """
        Initialize review generator.

        Args:
            client: OpenAI client instance (or a test double exposing
                chat.completions.create)
            model_name: Completion model identifier
            generation_config: Token bound and sampling temperature
        """
        self.client = client
        self.model_name = model_name
        self.generation_config = generation_config or GenerationConfig()

    def generate(self, prompt: str) -> str:
        """
        Generate review text for a prompt.

        Args:
            prompt: Complete review prompt

        Returns:
            Sanitized review text, or "" if the call failed or
            returned no content
        """
        logger.info(f"Requesting review from {self.model_name}")

        try:
            content = self._complete(prompt)
        except Exception as e:
            logger.error(f"Error getting AI response: {e}")
            return ""

        review = sanitize(content or "")
        if not review:
            logger.warning("Completion returned no content")
        return review

    def _complete(self, prompt: str) -> Optional[str]:
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "system", "content": prompt}],
            max_tokens=self.generation_config.max_tokens,
            temperature=self.generation_config.temperature,
        )
        if not response.choices:
            return None
        message = response.choices[0].message
        return message.content if message else None

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the configured model."""
        return {
            'model_name': self.model_name,
            'provider': 'openai',
            'generation_config': {
                'max_tokens': self.generation_config.max_tokens,
                'temperature': self.generation_config.temperature,
            }
        }


def create_review_generator(llm_config) -> ReviewGenerator:
    """
    Build the generator for the configured provider.

    Args:
        llm_config: LLMConfig section of the application config

    Returns:
        ReviewGenerator for "openai", LocalReviewGenerator for "transformers"
    """
    generation_config = GenerationConfig(
        max_tokens=llm_config.max_tokens,
        temperature=llm_config.temperature,
    )

    if llm_config.provider == "transformers":
        # Local models need the optional torch/transformers stack
        from .local import LocalReviewGenerator

        return LocalReviewGenerator(
            model_name=llm_config.model,
            device=llm_config.device,
            generation_config=generation_config,
        )

    if llm_config.provider != "openai":
        raise ValueError(f"Unknown LLM provider: {llm_config.provider}")

    client = OpenAI(api_key=llm_config.api_key, base_url=llm_config.base_url)
    return ReviewGenerator(client, llm_config.model, generation_config)
