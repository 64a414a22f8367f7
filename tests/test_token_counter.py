"""
Unit tests for token counting.
"""

from unittest.mock import Mock, patch

import pytest

from helptable.core.messages import Message
from helptable.core.models import Model
from helptable.core.token_counter import (
    TokenUsage,
    count_message_tokens,
    count_tokens,
    fits_context,
)


@pytest.fixture
def mock_encoding():
    """Encoding that yields one token per whitespace-separated word."""
    encoding = Mock()
    encoding.encode.side_effect = lambda text, allowed_special: text.split()
    with patch('helptable.core.token_counter.tiktoken.get_encoding', return_value=encoding) as get_encoding:
        yield get_encoding


class TestTokenUsage:
    """Test TokenUsage dataclass."""

    def test_total_tokens_calculation(self):
        """Verify total_tokens is computed correctly."""
        usage = TokenUsage(prompt_tokens=100, completion_tokens=50)
        assert usage.total_tokens == 150

    def test_zero_tokens(self):
        """Verify zero token handling."""
        usage = TokenUsage(prompt_tokens=0, completion_tokens=0)
        assert usage.total_tokens == 0

    def test_negative_tokens_rejected(self):
        """Verify negative counts are invalid."""
        with pytest.raises(ValueError, match="prompt_tokens must be >= 0"):
            TokenUsage(prompt_tokens=-1, completion_tokens=0)
        with pytest.raises(ValueError, match="completion_tokens must be >= 0"):
            TokenUsage(prompt_tokens=0, completion_tokens=-1)


class TestCounting:
    """Test tiktoken-backed counting."""

    def test_count_tokens_uses_cl100k(self, mock_encoding):
        """Verify the default encoding and special-token handling."""
        assert count_tokens("usage: git [--version]") == 3
        mock_encoding.assert_called_once_with("cl100k_base")
        mock_encoding.return_value.encode.assert_called_once_with(
            "usage: git [--version]", allowed_special="all"
        )

    def test_count_message_tokens_sums_content(self, mock_encoding):
        """Verify only message content is counted."""
        messages = [Message.system("one two"), Message.user("three four five")]
        assert count_message_tokens(messages) == 5

    def test_fits_context(self, mock_encoding):
        """Verify the context window check."""
        small = [Message.user("word " * 10)]
        large = [Message.user("word " * 5000)]
        assert fits_context(small, Model.GPT_35_TURBO)
        assert not fits_context(large, Model.GPT_35_TURBO)
        assert fits_context(large, Model.GPT_4)
