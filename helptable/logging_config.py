"""
Logging configuration with rich output on stderr
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Send log records to stderr so stdout only ever carries the table"""
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("helptable")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
