"""
Local Review Generator

Runs the review prompt through a Hugging Face causal language model
on the local machine instead of a hosted completion endpoint.
"""

import logging
from typing import Any, Dict, Mapping, Optional

try:
    from transformers import AutoTokenizer, AutoModelForCausalLM
    import torch
except ImportError as e:
    logger = logging.getLogger(__name__)
    logger.error(f"Required ML dependencies not installed: {e}")
    logger.error("Install with: pip install 'ai-code-review[local]'")
    raise

from .generator import GenerationConfig, ReviewGenerator


logger = logging.getLogger(__name__)


class LocalReviewGenerator(ReviewGenerator):
    """
    Generates the review text with a local transformers model.

    Error handling and sanitizing are inherited; only the completion
    call differs.
    """

    def __init__(
        self,
        model_name: str,
        device: Optional[str] = None,
        generation_config: Optional[GenerationConfig] = None
    ):
        """
        Initialize local review generator.

        Args:
            model_name: Hugging Face model id or local path
            device: Device to run model on ('cpu', 'cuda', etc.)
            generation_config: Token bound and sampling temperature
        """
        super().__init__(client=None, model_name=model_name, generation_config=generation_config)
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")

        logger.info(f"Loading LLM model: {model_name}")
        try:
            self.tokenizer = AutoTokenizer.from_pretrained(model_name)
            self.model = AutoModelForCausalLM.from_pretrained(model_name)

            if self.tokenizer.pad_token is None:
                self.tokenizer.pad_token = self.tokenizer.eos_token

            self.model.to(self.device)
            logger.info(f"Model loaded successfully on {self.device}")

        except Exception as e:
            logger.error(f"Failed to load model {model_name}: {e}")
            raise

    def _complete(self, prompt: str) -> Optional[str]:
        if getattr(self.tokenizer, "chat_template", None):
            encoded = self.tokenizer.apply_chat_template(
                [{"role": "system", "content": prompt}],
                add_generation_prompt=True,
                return_tensors="pt",
            )
        else:
            encoded = self.tokenizer.encode(prompt, return_tensors="pt")

        # Some tokenizer versions return a BatchEncoding instead of the ids tensor
        if isinstance(encoded, Mapping):
            encoded = encoded["input_ids"]
        inputs = encoded.to(self.device)

        with torch.no_grad():
            outputs = self.model.generate(
                inputs,
                max_new_tokens=self.generation_config.max_tokens,
                temperature=self.generation_config.temperature,
                do_sample=True,
                pad_token_id=self.tokenizer.pad_token_id,
                eos_token_id=self.tokenizer.eos_token_id,
                num_return_sequences=1
            )

        # Decode only the generated continuation
        generated = outputs[0][inputs.shape[1]:]
        return self.tokenizer.decode(generated, skip_special_tokens=True)

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the loaded model."""
        info = super().get_model_info()
        info.update({
            'provider': 'transformers',
            'device': self.device,
            'vocab_size': self.tokenizer.vocab_size,
        })
        return info
