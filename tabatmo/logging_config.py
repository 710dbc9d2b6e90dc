"""
logging_config.py – Logger setup for command-line use.

The library modules only create module loggers; applications decide where
the records go by calling ``setup_logging`` once.
"""

from __future__ import annotations
import logging
import sys

PACKAGE_LOGGER = "tabatmo"


def setup_logging(level: int | str = logging.INFO,
                  log_file: str | None = None) -> logging.Logger:
    """
    Configure the 'tabatmo' package logger.

    Parameters
    ----------
    level    : logging level (int or name such as "DEBUG")
    log_file : optional path to also write the log to

    Returns
    -------
    The configured package logger.
    """
    if isinstance(level, str):
        value = getattr(logging, level.upper(), None)
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level '{level}'")
        level = value

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Avoid duplicated records when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
