"""
Chat completion HTTP client.

Sends a single request to an OpenAI-compatible chat completions endpoint and
decodes the answer. No retries, no streaming.
"""

import logging
from typing import Optional

import httpx

from ..core.errors import ApiResponseError, TransportError
from ..core.messages import ApiError, Request, Response, encode_request, parse_response

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"


class CompletionClient:
    """Bearer-authenticated chat completions client."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: API key sent as bearer token (required)
            api_url: Chat completions endpoint
            timeout: Seconds before giving up; None waits indefinitely
            transport: Custom httpx transport, used by tests

        Raises:
            ValueError: If api_key is missing/empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("api_key is required and cannot be empty")

        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def complete(self, request: Request) -> Response:
        """Send a completion request.

        Args:
            request: Request to send

        Returns:
            Parsed success response

        Raises:
            SerializationError: If the request cannot be encoded
            TransportError: If the request cannot be sent or the body read
            ApiResponseError: If the API answered with an error envelope
            ResponseParseError: If the body has neither expected shape
        """
        body = encode_request(request)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    content=body.encode("utf-8"),
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                )
                text = response.text
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {self.api_url} failed: {e}") from e

        logger.debug("HTTP %s from %s (%d bytes)", response.status_code, self.api_url, len(text))

        result = parse_response(text, response.status_code)
        if isinstance(result, ApiError):
            raise ApiResponseError(result)
        return result
