"""
Logging configuration for harness entry points.
"""

import logging

from config.settings import Settings

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic")


def configure_logging(settings: Settings) -> None:
    """Configure root logging from LOG_LEVEL / LOG_FORMAT."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT,
        datefmt='%H:%M:%S'
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
