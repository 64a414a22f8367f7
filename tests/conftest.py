"""
Shared fixtures for the helptable test suite.
"""

import json

import pytest


def make_completion_body(content="| Short | Long | Description | Default |", choices=None, usage=True):
    """Build a chat completion success body."""
    body = {
        "id": "chatcmpl-abc",
        "object": "chat.completion",
        "created": 1680000000,
        "model": "gpt-3.5-turbo-0301",
        "choices": choices if choices is not None else [
            {
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
                "index": 0,
            }
        ],
    }
    if usage:
        body["usage"] = {"prompt_tokens": 200, "completion_tokens": 100, "total_tokens": 300}
    return json.dumps(body)


@pytest.fixture
def completion_body():
    return make_completion_body
