"""
Logging configuration for the Nooklet API.
"""

import logging
import sys

from nooklet.config import settings

ROOT_LOGGER = 'nooklet'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Chatty at INFO; one line per request or statement.
_NOISY_LOGGERS = ('httpx', 'httpcore', 'aiosqlite')


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the ``nooklet`` logger tree.

    Safe to call on every app startup; the stdout handler is attached once.

    :param level: Level name overriding ``settings.LOG_LEVEL``
    :type level: str | None
    :return: Root logger for the nooklet application
    :rtype: logging.Logger
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    resolved = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if settings.DEBUG else resolved)
    if not any(getattr(h, '_nooklet', False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._nooklet = True
        logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a child of the ``nooklet`` logger, e.g. ``get_logger('services.rag')``.
    """
    if name.startswith(f'{ROOT_LOGGER}.'):
        name = name[len(ROOT_LOGGER) + 1:]
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
