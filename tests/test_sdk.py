"""
Unit tests for the completion client.

HTTP is served by httpx.MockTransport; no network access is needed.
"""

import json

import httpx
import pytest

from helptable.core.errors import ApiResponseError, ResponseParseError, TransportError
from helptable.core.messages import Message, Request
from helptable.sdk.openai_client import DEFAULT_API_URL, CompletionClient


def _request(content="usage: tool [-h]"):
    return Request("gpt-3.5-turbo", [Message.system("S"), Message.user(content)])


class TestCompletionClient:
    """Test CompletionClient request and response handling."""

    def test_init_missing_api_key(self):
        """Test initialization fails with missing key."""
        with pytest.raises(ValueError, match="api_key is required"):
            CompletionClient("")

        with pytest.raises(ValueError, match="api_key is required"):
            CompletionClient("   ")

    def test_init_defaults(self):
        """Test default endpoint and timeout."""
        client = CompletionClient("sk-test")
        assert client.api_url == DEFAULT_API_URL == "https://api.openai.com/v1/chat/completions"
        assert client.timeout is None

    @pytest.mark.asyncio
    async def test_request_format(self, completion_body):
        """Test method, headers and JSON body of the outbound request."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=completion_body())

        client = CompletionClient("sk-test", transport=httpx.MockTransport(handler))
        await client.complete(_request('quote " and unicode ☃'))

        assert len(seen) == 1
        sent = seen[0]
        assert sent.method == "POST"
        assert str(sent.url) == DEFAULT_API_URL
        assert sent.headers["Authorization"] == "Bearer sk-test"
        assert sent.headers["Content-Type"] == "application/json"
        assert json.loads(sent.content.decode("utf-8")) == {
            "model": "gpt-3.5-turbo",
            "messages": [
                {"role": "system", "content": "S"},
                {"role": "user", "content": 'quote " and unicode ☃'},
            ],
        }

    @pytest.mark.asyncio
    async def test_custom_api_url(self, completion_body):
        """Test requests go to the configured endpoint."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text=completion_body())

        client = CompletionClient(
            "sk-test",
            api_url="http://localhost:8080/v1/chat/completions",
            transport=httpx.MockTransport(handler),
        )
        await client.complete(_request())

        assert seen == ["http://localhost:8080/v1/chat/completions"]

    @pytest.mark.asyncio
    async def test_success_response(self, completion_body):
        """Test a success body is returned as a Response."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text=completion_body("| a |")))
        client = CompletionClient("sk-test", transport=transport)

        response = await client.complete(_request())

        assert response.first_content() == "| a |"
        assert response.usage.prompt_tokens == 200

    @pytest.mark.asyncio
    async def test_api_error_envelope(self):
        """Test API errors surface the envelope's message."""
        body = json.dumps({
            "error": {
                "message": "You exceeded your current quota",
                "type": "insufficient_quota",
                "param": None,
                "code": "insufficient_quota",
            }
        })
        transport = httpx.MockTransport(lambda request: httpx.Response(429, text=body))
        client = CompletionClient("sk-test", transport=transport)

        with pytest.raises(ApiResponseError, match="You exceeded your current quota") as exc_info:
            await client.complete(_request())

        assert exc_info.value.error.type == "insufficient_quota"
        assert exc_info.value.error.code == "insufficient_quota"

    @pytest.mark.asyncio
    async def test_unparseable_body(self):
        """Test bodies of neither shape raise a parse error."""
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
        client = CompletionClient("sk-test", transport=transport)

        with pytest.raises(ResponseParseError, match="HTTP 502") as exc_info:
            await client.complete(_request())

        assert exc_info.value.body == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        """Test transport errors become TransportError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = CompletionClient("sk-test", transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError, match="Connection refused"):
            await client.complete(_request())
