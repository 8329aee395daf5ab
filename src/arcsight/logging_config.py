"""
Logging configuration for ArcSight.

Log records go to stderr through a rich handler attached to the ``arcsight``
logger only; the root logger of a host application is left alone. Nothing
logged here ever reaches an Envelope, and the engine only logs at DEBUG.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT = "arcsight"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure the arcsight logger for CLI use.

    Calling it again replaces the handler instead of adding a second one.
    Tracebacks never show local variables, since those hold file contents.

    Args:
        verbose: Enable DEBUG level logging (WARNING otherwise)

    Returns:
        Configured logger instance for arcsight
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger(_ROOT)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'arcsight.engine')
              If None, returns the root arcsight logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(_ROOT)

    if not name.startswith(_ROOT):
        name = f"{_ROOT}.{name}"

    return logging.getLogger(name)
