"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console()

DEBUG_ENV_VAR = "CHAPPE_DEBUG"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for chappe CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (--verbose): INFO level - shows action selection, pipeline loading
    - Debug (CHAPPE_DEBUG=1): DEBUG level - shows everything
    """
    debug = bool(os.environ.get(DEBUG_ENV_VAR))

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    cli_logger = logging.getLogger("chappecli")
    cli_logger.setLevel(level)
    cli_logger.handlers = [handler]
    cli_logger.propagate = False
