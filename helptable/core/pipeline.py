"""
End-to-end help-to-table run.

Runs the help command, builds the completion request and sends it, each long
step accompanied by its own spinner.
"""

import logging
from typing import Optional

from rich.console import Console

from ..config.loader import AppConfig
from ..sdk.openai_client import CompletionClient
from .messages import Response
from .models import Model
from .prompt import build_request
from .runner import run_command
from .spinner import Spinner

logger = logging.getLogger(__name__)


async def generate_table(
    command: str,
    model: Model,
    config: AppConfig,
    *,
    console: Console,
    pipable: bool = False,
    client: Optional[CompletionClient] = None,
) -> Response:
    """Turn a command's help output into a completion response.

    The command spinner is stopped and its line cleared before the request is
    built, and the request spinner is stopped before this returns, so the
    caller may print immediately.

    Args:
        command: Help-printing command line
        model: Catalog model to query
        config: Startup configuration
        console: Console the spinners draw on
        pipable: Suppress spinners
        client: Completion client; built from config when omitted

    Returns:
        Parsed completion response

    Raises:
        HelpTableError: On any failure; nothing is retried
    """
    async with Spinner(console, "Executing command", detail=command, enabled=not pipable):
        help_text = await run_command(command)

    request = build_request(model, help_text)
    logger.debug("Built request for %s with %d characters of help text", model.wire_name, len(help_text))

    if client is None:
        client = CompletionClient(config.api_key, api_url=config.api_url, timeout=config.timeout)

    async with Spinner(console, "Asking AI", enabled=not pipable):
        response = await client.complete(request)

    logger.debug("Received response %s with %d choice(s)", response.id, len(response.choices))
    return response
