"""Define utility functions to simplify logging to the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)
console = Console()

PACKAGE_LOGGER_NAME = "cuboid_grasps"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route log records from the package through a rich handler on the shared console.

    :param level: Minimum level (e.g., logging.DEBUG or "DEBUG") of the displayed records
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=console, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)


def log_info(message: str) -> None:
    """Log the given string to standard output."""
    logger.info(message)
