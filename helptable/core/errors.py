"""
Error types for helptable.

Every failure in a run maps to exactly one of these classes. All of them are
fatal: the CLI reports the message and exits non-zero.
"""

from typing import Optional


class HelpTableError(Exception):
    """Base class for all helptable failures."""


class ConfigError(HelpTableError):
    """Invalid or incomplete configuration."""


class MissingApiKeyError(ConfigError):
    """OPENAI_API_KEY is not set."""


class CommandError(HelpTableError):
    """The help command could not be run or its output could not be decoded."""


class SerializationError(HelpTableError):
    """The completion request could not be encoded."""


class TransportError(HelpTableError):
    """The completion request could not be sent or the body not received."""


class ResponseParseError(HelpTableError):
    """The response body matched neither the success nor the error shape."""

    def __init__(self, message: str, body: str = "", status_code: Optional[int] = None):
        self.body = body
        self.status_code = status_code
        super().__init__(message)


class ApiResponseError(HelpTableError):
    """The API answered with an error envelope."""

    def __init__(self, error):
        self.error = error
        super().__init__(str(error))


class EmptyResponseError(HelpTableError):
    """The API returned a response without any choices."""
