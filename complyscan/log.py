"""Logging setup for the ComplyScan CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "complyscan"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Route ``complyscan`` log records to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of INFO.
        quiet: Only log warnings and errors (used for ``--json`` output).
            ``verbose`` wins when both are set.

    Returns:
        The configured package logger.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            show_path=False,
            show_time=verbose,
            markup=False,
        )
    )
    logger.propagate = False
    return logger
