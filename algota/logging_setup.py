# -*- coding: utf-8 -*-
"""
Logging configuration for the backtester.
"""

import logging
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optional file) handlers to the package logger.

    Existing handlers are replaced, so repeated calls do not duplicate output.

    Parameters
    ----------
    log_level : str, default "INFO"
        Level name (DEBUG, INFO, WARNING, ...)
    log_file : str or None, optional
        File to append log records to
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    package_logger = logging.getLogger("algota")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger
