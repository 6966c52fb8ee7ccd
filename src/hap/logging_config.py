import logging
import os
import sys
from typing import IO, Optional

from .settings import ENV_LOG_LEVEL, get_settings

PACKAGE_LOGGER = "hap"


class _HapHandler(logging.StreamHandler):
    """Marker type so repeated configuration replaces only our own handler."""


def configure_logging(level: Optional[int] = None, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Attach one stream handler to the ``hap`` logger and set its level.

    Level precedence: the ``level`` argument, then HAP_LOG_LEVEL, then settings.
    Handlers on the root logger and on other loggers are left alone.
    """
    if level is None:
        level_name = os.getenv(ENV_LOG_LEVEL) or get_settings().log_level
        level = getattr(logging, level_name.upper(), logging.WARNING)

    handler = _HapHandler(stream=stream or sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for existing in [h for h in logger.handlers if isinstance(h, _HapHandler)]:
        logger.removeHandler(existing)
    logger.addHandler(handler)
    return logger
