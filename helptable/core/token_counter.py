"""
Token counting and usage tracking.

Counts prompt tokens with tiktoken and carries usage figures for cost
calculation. Nothing in the main flow enforces a token budget; these helpers
exist for reporting and for callers that want to check a prompt up front.
"""

from dataclasses import dataclass
from typing import Iterable

import tiktoken

DEFAULT_ENCODING = "cl100k_base"


@dataclass(frozen=True)
class TokenUsage:
    """Token usage data for cost calculation."""
    prompt_tokens: int
    completion_tokens: int

    def __post_init__(self):
        """Validate token counts are non-negative."""
        if self.prompt_tokens < 0:
            raise ValueError("prompt_tokens must be >= 0")
        if self.completion_tokens < 0:
            raise ValueError("completion_tokens must be >= 0")

    @property
    def total_tokens(self) -> int:
        """Total tokens used (prompt + completion)."""
        return self.prompt_tokens + self.completion_tokens


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Count the tokens in a piece of text.

    Special tokens are encoded as ordinary tokens, so help output that happens
    to contain something like ``<|endoftext|>`` is counted rather than rejected.

    Args:
        text: Text to count
        encoding_name: tiktoken encoding to use

    Returns:
        Number of tokens
    """
    encoding = tiktoken.get_encoding(encoding_name)
    return len(encoding.encode(text, allowed_special="all"))


def count_message_tokens(messages: Iterable, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Sum the content tokens of a message sequence."""
    return sum(count_tokens(message.content, encoding_name) for message in messages)


def fits_context(messages: Iterable, model) -> bool:
    """Check whether the messages' content fits into the model's context window."""
    return count_message_tokens(messages) <= model.context_size()
