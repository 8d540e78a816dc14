# yardmap/utils/logging_config.py
"""
Centralized logging configuration for the map viewer.
Call setup_logging() once at application startup.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

# Global flag to track if logging has been configured
_logging_configured = False


def setup_logging(log_level: int = logging.INFO,
                  log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger: console at log_level, rotating file at DEBUG.

    Args:
        log_level: Console logging level (default: logging.INFO)
        log_dir: Directory for log files; None disables the file handler

    Returns:
        Configured root logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger()

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Clear existing handlers to prevent duplicate logging
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        current_date = datetime.now().strftime("%Y-%m-%d")
        log_file = os.path.join(log_dir, f"yardmap_{current_date}.log")

        rotating_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8"
        )
        rotating_handler.setLevel(logging.DEBUG)
        rotating_handler.setFormatter(formatter)
        logger.addHandler(rotating_handler)

    logger.info("Logging system initialized")
    _logging_configured = True

    return logger
