"""Logging configuration for the library."""

import logging
import sys

from mailroom.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure library logging.

    Sets up plain stdout logging with a level chosen from the environment.
    Host applications with their own logging setup can skip this.

    Args:
        settings: Application settings
    """
    if settings.debug:
        level = logging.DEBUG
    elif settings.environment == "production":
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("redis").setLevel(logging.WARNING)

    logging.getLogger("mailroom").setLevel(level)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: environment={settings.environment}, level={logging.getLevelName(level)}"
    )

