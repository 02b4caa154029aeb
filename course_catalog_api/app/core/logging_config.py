"""
Logging configuration for the course catalog.

``setup_logging`` attaches a console handler, and a file handler when
``Settings.log_file`` is set, to the ``course_catalog_api`` package
logger.  Every module logger in the package is a child of it, so the
gateway and the services all log through these handlers.  Records still
propagate to the root logger, which leaves an application's own logging
set-up in charge of everything else.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import Settings, settings as default_settings


PACKAGE_LOGGER = "course_catalog_api"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure and return the package logger.

    The level comes from ``settings.log_level`` (unknown names fall back
    to ``INFO``).  Calling this again replaces the handlers added by the
    previous call, so a catalog re-created with other settings does not
    log twice.
    """
    settings = settings or default_settings
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in [h for h in logger.handlers if getattr(h, "catalog_handler", False)]:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(Path(settings.log_file).resolve(), encoding="utf-8"))

    for handler in handlers:
        handler.catalog_handler = True
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
