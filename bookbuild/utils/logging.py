"""Logging setup for the command-line interface.

Services log through module-level loggers under the "bookbuild"
namespace; the CLI attaches a single rich handler to that namespace.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "bookbuild"


def setup_logging(level: int = logging.INFO, console: Console | None = None) -> None:
    """Configure the bookbuild logger.

    Args:
        level: Minimum log level.
        console: Console to write to (default: stderr).
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=level <= logging.DEBUG,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def configure_from_cli(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on CLI flags.

    Args:
        verbose: Enable debug output with timestamps.
        quiet: Suppress info messages (warnings and errors only).
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(level=level)
