"""
Logging setup for the Tabu VRP solver.
Provides centralized logging with file and console handlers.
"""

import logging
import os
from datetime import datetime
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, log_file: Optional[str] = None,
                 level: int = logging.INFO, log_dir: str = "logs",
                 to_file: bool = True) -> logging.Logger:
    """
    Setup logger with console and (optionally) file handlers.

    Args:
        name: Logger name (usually the package name, so module loggers inherit it)
        log_file: Optional log file name. If None, a timestamped name is used.
        level: Logging level (default: INFO)
        log_dir: Directory for log files (default: "logs")
        to_file: Whether to attach a file handler

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger('tabu_vrp', log_dir='logs')
        >>> logger.info("Starting tabu search...")
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if to_file:
        if log_file is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_file = f'tabu_vrp_{timestamp}.log'
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, os.path.basename(log_file))

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info(f"Logger initialized. Log file: {log_path}")

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
