"""
SDK for helptable.

Provides programmatic access to the chat completions endpoint.
"""

from .openai_client import CompletionClient, DEFAULT_API_URL

__all__ = ["CompletionClient", "DEFAULT_API_URL"]
