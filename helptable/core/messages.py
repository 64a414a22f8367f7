"""
Chat completion data model and its JSON codec.

Requests are encoded once per run; response bodies are decoded into either a
success Response or the API's error envelope.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .errors import EmptyResponseError, ResponseParseError, SerializationError
from .token_counter import TokenUsage

# How much of an unparseable body to keep for the error message
RAW_BODY_PREVIEW = 200


class Role(str, Enum):
    """Author of a chat message."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single chat message."""
    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(Role.ASSISTANT, content)

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        content = data["content"]
        if not isinstance(content, str):
            raise TypeError("message content must be a string")
        return cls(Role(data["role"]), content)


@dataclass(frozen=True)
class Request:
    """Chat completion request. ``model`` is the wire name."""
    model: str
    messages: Tuple[Message, ...]

    def __post_init__(self):
        # Accept any sequence but store a tuple
        object.__setattr__(self, "messages", tuple(self.messages))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
        }


@dataclass(frozen=True)
class Usage:
    """Token accounting reported by the API."""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    def __post_init__(self):
        for name in ("prompt_tokens", "completion_tokens", "total_tokens"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Usage":
        return cls(
            prompt_tokens=data["prompt_tokens"],
            completion_tokens=data["completion_tokens"],
            total_tokens=data["total_tokens"],
        )

    def to_token_usage(self) -> TokenUsage:
        return TokenUsage(self.prompt_tokens, self.completion_tokens)


@dataclass(frozen=True)
class Choice:
    """One candidate completion."""
    message: Message
    finish_reason: Optional[str]
    index: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Choice":
        return cls(
            message=Message.from_dict(data["message"]),
            finish_reason=data.get("finish_reason"),
            index=int(data["index"]),
        )


@dataclass(frozen=True)
class Response:
    """Successful chat completion response."""
    id: str
    object: str
    created: int
    model: str
    choices: Tuple[Choice, ...]
    usage: Optional[Usage] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Response":
        usage = data.get("usage")
        return cls(
            id=str(data["id"]),
            object=str(data["object"]),
            created=int(data["created"]),
            model=str(data["model"]),
            choices=tuple(Choice.from_dict(choice) for choice in data["choices"]),
            usage=Usage.from_dict(usage) if usage is not None else None,
        )

    def first_content(self) -> str:
        """Content of the first choice.

        Raises:
            EmptyResponseError: If the response has no choices
        """
        if not self.choices:
            raise EmptyResponseError("The API returned no choices")
        return self.choices[0].message.content


@dataclass(frozen=True)
class ApiError:
    """Error envelope returned by the API instead of a response."""
    message: str
    type: str
    param: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiError":
        error = data["error"]
        message = error["message"]
        if not isinstance(message, str):
            raise TypeError("error message must be a string")
        code = error.get("code")
        return cls(
            message=message,
            type=str(error["type"]),
            param=error.get("param"),
            code=str(code) if code is not None else None,
        )

    def __str__(self) -> str:
        if self.code:
            return f"{self.type} ({self.code}): {self.message}"
        return f"{self.type}: {self.message}"


def encode_request(request: Request) -> str:
    """Serialize a request to its JSON body.

    Raises:
        SerializationError: If the request cannot be encoded
    """
    try:
        return json.dumps(request.to_dict(), ensure_ascii=False)
    except (TypeError, ValueError, AttributeError) as e:
        raise SerializationError(f"Failed to serialize request: {e}") from e


def decode_request(text: str) -> Request:
    """Parse a JSON request body back into a Request."""
    data = json.loads(text)
    return Request(
        model=data["model"],
        messages=[Message.from_dict(message) for message in data["messages"]],
    )


def parse_response(text: str, status_code: Optional[int] = None) -> Union[Response, ApiError]:
    """Decode a response body.

    The body is tried as a success response first, then as an error envelope.

    Args:
        text: Raw response body
        status_code: HTTP status, only used in error messages

    Returns:
        Response on success, ApiError if the API reported an error

    Raises:
        ResponseParseError: If the body matches neither shape
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise _parse_error(f"Response is not valid JSON: {e}", text, status_code) from e

    if not isinstance(data, dict):
        raise _parse_error("Response is not a JSON object", text, status_code)

    try:
        return Response.from_dict(data)
    except (KeyError, TypeError, ValueError):
        pass

    try:
        return ApiError.from_dict(data)
    except (KeyError, TypeError, ValueError):
        pass

    raise _parse_error("Unexpected response shape", text, status_code)


def _parse_error(reason: str, body: str, status_code: Optional[int]) -> ResponseParseError:
    preview = body[:RAW_BODY_PREVIEW]
    status = f" (HTTP {status_code})" if status_code is not None else ""
    return ResponseParseError(f"{reason}{status}: {preview!r}", body=body, status_code=status_code)
