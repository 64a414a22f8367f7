"""
External command execution.

Runs the help command as a child process and captures its standard output.
"""

import asyncio
import logging
from typing import List, Tuple

from .errors import CommandError

logger = logging.getLogger(__name__)


def split_command(command: str) -> Tuple[str, List[str]]:
    """Split a command line into program and arguments.

    Splitting is done on whitespace only. Quotes are not interpreted, so an
    argument containing a space cannot be expressed.

    Args:
        command: Command line, e.g. ``"git --help"``

    Returns:
        Tuple of program and argument list

    Raises:
        CommandError: If the command is empty
    """
    parts = command.split()
    if not parts:
        raise CommandError("Command is empty")
    return parts[0], parts[1:]


async def run_command(command: str) -> str:
    """Run a command and return its standard output as text.

    The exit status is not checked: whatever the command printed to stdout is
    returned even when it exits non-zero. stderr is captured and discarded.

    Args:
        command: Command line to run

    Returns:
        Decoded standard output

    Raises:
        CommandError: If the program cannot be started or prints invalid UTF-8
    """
    program, args = split_command(command)
    logger.debug("Running %s with arguments %s", program, args)

    try:
        process = await asyncio.create_subprocess_exec(
            program,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CommandError(f"Failed to run '{program}': {e}") from e

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        logger.info("'%s' exited with status %s, using its output anyway", command, process.returncode)
    logger.debug("Captured %d bytes of stdout, %d bytes of stderr", len(stdout), len(stderr))

    try:
        return stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CommandError(f"Output of '{command}' is not valid UTF-8: {e}") from e
