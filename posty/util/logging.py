"""Logging configuration for the application."""

import logging
import sys

from posty.config import Settings

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "aiosmtplib", "sqlalchemy.engine")


def setup_logging(settings: Settings) -> None:
    """Configure stdlib logging for route modules.

    Domain and adapter code logs through logfire; this covers the
    ``logging.getLogger(__name__)`` loggers used by the HTTP layer.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("posty").setLevel(level)

    logging.getLogger(__name__).info(
        f"Logging configured: environment={settings.environment}, "
        f"level={logging.getLevelName(level)}"
    )
