"""Logging configuration utilities."""

import sys

from loguru import logger


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru for interactive use.

    Args:
        level: Minimum log level to display.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )
