"""
Prompt construction for the help-to-table completion.
"""

from typing import Tuple

from .messages import Message, Request
from .models import Model

SYSTEM_MESSAGE = (
    "You are an AI that receives the output of a command's --help option and "
    "generates a markdown table using GitHub Flavored Markdown (GFM) listing all "
    "available arguments, including the short and long arguments, description, "
    "and default value (if applicable), based on the following format: short, "
    "long, description, default. The markdown table should be the only thing in "
    "your response. Do NOT return any introductory text or text after the table."
)


def build_messages(help_text: str, system: str = SYSTEM_MESSAGE) -> Tuple[Message, Message]:
    """Build the system instruction followed by the captured help text.

    The help text is passed through verbatim, without truncation.
    """
    return (Message.system(system), Message.user(help_text))


def build_request(model: Model, help_text: str) -> Request:
    """Bundle the model's wire name with the prompt messages."""
    return Request(model=model.wire_name, messages=build_messages(help_text))
