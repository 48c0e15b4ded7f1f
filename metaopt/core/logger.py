"""
Logging setup for metaopt.
Library modules log through ``logging.getLogger(__name__)``; entry points
call ``setup_logger`` once to attach console and file handlers.
"""

import logging
import os
from datetime import datetime
from typing import Optional

from config import LOGGING_CONFIG


def setup_logger(name: str, log_file: Optional[str] = None,
                 level: int = logging.INFO, log_dir: Optional[str] = None,
                 to_file: bool = True) -> logging.Logger:
    """
    Setup logger with console and (optionally) file handlers.

    Args:
        name: Logger name ('metaopt' configures the whole package)
        log_file: Optional log file name. If None, a timestamped name is used.
        level: Logging level (default: INFO)
        log_dir: Directory for log files (default from LOGGING_CONFIG)
        to_file: Attach a file handler as well as the console one

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger('metaopt', to_file=False)
        >>> logger.info("Running simulated annealing...")
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        LOGGING_CONFIG['format'],
        datefmt=LOGGING_CONFIG['datefmt']
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if to_file:
        log_dir = log_dir or LOGGING_CONFIG['log_dir']
        os.makedirs(log_dir, exist_ok=True)
        if log_file is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_file = f"{LOGGING_CONFIG['file_prefix']}_{timestamp}.log"
        log_path = os.path.join(log_dir, os.path.basename(log_file))

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug(f"Logger initialized. Log file: {log_path}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get existing logger or create a console-only one with default settings.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name, to_file=False)

    return logger
