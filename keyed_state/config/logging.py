"""Logging setup for applications embedding the keyed state store."""

import logging
import sys
from typing import Optional

from .settings import settings


def setup_logging(debug: Optional[bool] = None, level: Optional[str] = None) -> None:
    """
    Configure root logging for the application.

    The library itself never installs handlers; call this from the
    application's entry point.

    Args:
        debug: Force DEBUG level (default from settings.DEBUG)
        level: Level name used when not in debug mode (default settings.LOG_LEVEL)
    """
    debug = settings.DEBUG if debug is None else debug
    if debug:
        resolved = logging.DEBUG
    else:
        resolved = logging.getLevelName((level or settings.LOG_LEVEL).upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO

    logging.basicConfig(
        level=resolved,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )
