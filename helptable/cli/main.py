"""
CLI interface for helptable.

Runs a help command and prints the markdown table generated from its output.
"""

import asyncio
import logging
import sys
from typing import Optional

import pyperclip
import typer
from rich.console import Console
from rich.markup import escape

from helptable import __version__
from helptable.config.loader import (
    API_KEY_HELP_URL,
    CONFIG_PATH_ENV,
    load_config,
)
from helptable.core.errors import HelpTableError, MissingApiKeyError
from helptable.core.messages import Response
from helptable.core.models import DEFAULT_MODEL, Model, calculate_cost
from helptable.core.pipeline import generate_table
from helptable.logging_config import setup_logging

app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


def _version_callback(value: bool):
    if value:
        typer.echo(f"helptable {__version__}")
        raise typer.Exit()


@app.command()
def main(
    command: str = typer.Argument(
        ...,
        help="Command that returns help message"
    ),
    model: Optional[Model] = typer.Option(
        None,
        "--model",
        "-m",
        help=f"Model to use (defaults to {DEFAULT_MODEL.wire_name})"
    ),
    pipable: bool = typer.Option(
        False,
        "--pipable",
        "-p",
        help="Print only the table output"
    ),
    clipboard: bool = typer.Option(
        False,
        "--clipboard",
        "-c",
        help="Put the table output in clipboard"
    ),
    usage: bool = typer.Option(
        False,
        "--usage",
        "-u",
        help="Report token usage and estimated cost on stderr"
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        envvar=CONFIG_PATH_ENV,
        help="YAML file with default model, api_url and timeout"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug information to stderr"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit"
    ),
):
    """
    Take a help message and create a markdown table with the help of AI.

    COMMAND is split on whitespace; quoted arguments are not supported.
    """
    setup_logging(verbose)

    try:
        config = load_config(config_path)
    except MissingApiKeyError as e:
        err_console.print(f"[red]{e}[/] [bright_black]Refer to step 3 here: {API_KEY_HELP_URL}[/]")
        sys.exit(EXIT_CODE_FAIL)
    except HelpTableError as e:
        _fail(e)

    selected = model or config.model or DEFAULT_MODEL
    logger.debug("Using model %s", selected.wire_name)

    try:
        response = asyncio.run(
            generate_table(command, selected, config, console=console, pipable=pipable)
        )
        table = response.first_content()
    except HelpTableError as e:
        _fail(e)

    # Printed verbatim; rich markup would mangle the table
    typer.echo(table)

    if usage and not pipable:
        _report_usage(response, selected)

    if clipboard:
        _copy_to_clipboard(table)

    sys.exit(EXIT_CODE_PASS)


def _fail(error: HelpTableError):
    """Report a fatal error and exit."""
    err_console.print(f"[red]Error:[/] {escape(str(error))}", highlight=False)
    sys.exit(EXIT_CODE_FAIL)


def _format_currency(amount: float) -> str:
    """Format a small USD amount."""
    return f"${amount:,.4f}"


def _report_usage(response: Response, model: Model):
    """Print token usage and estimated cost."""
    if response.usage is None:
        err_console.print("[dim]No usage information returned.[/]")
        return

    cost = calculate_cost(model, response.usage.to_token_usage())
    err_console.print(
        f"[bright_black]Tokens: {response.usage.prompt_tokens} prompt + "
        f"{response.usage.completion_tokens} completion = {response.usage.total_tokens} "
        f"| Estimated cost: {_format_currency(cost)}[/]"
    )


def _copy_to_clipboard(text: str):
    """Copy the table; clipboard trouble never fails the run."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.warning("Could not copy to clipboard: %s", e)


if __name__ == "__main__":
    app()
