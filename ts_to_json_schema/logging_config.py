import os
import sys

from loguru import logger

# Flag to track if logging has been configured
_logging_configured = False

LOG_LEVEL_ENV = "TS_TO_JSON_SCHEMA_LOG_LEVEL"


def setup_logging(level=None, force=False):
    """
    Configures the global logger.

    Only a stderr sink is installed. The level defaults to the
    TS_TO_JSON_SCHEMA_LOG_LEVEL environment variable, or WARNING.

    Args:
        level: Logging level (default: from environment, else WARNING)
        force: Reconfigure even if logging was already set up
    """
    global _logging_configured

    # Only configure once to avoid duplicate handlers
    if _logging_configured and not force:
        return
    _logging_configured = True

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        colorize=True,
    )


# Configure the logger on import (level from the environment)
setup_logging()
