# yardmap/infrastructure/logging/logger_service.py
"""
Implementation of the logger service using Python's built-in logging module.
"""
import logging
import sys
from typing import Any, Dict

from yardmap.domain.services.i_logger_service import ILoggerService

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConsoleLoggerService(ILoggerService):
    """
    Logger service that writes to stdout.

    Keyword context is appended to the message as "[key=value ...]".
    """

    def __init__(self, level: int = logging.INFO, name: str = "YardMap",
                 use_root_handlers: bool = False):
        """
        Initialize the logger service.

        Args:
            level: Initial log level (default: INFO)
            name: Logger name
            use_root_handlers: Rely on handlers installed by setup_logging()
                instead of attaching a console handler
        """
        self.logger = logging.getLogger(name)
        self.set_level(level)

        # Don't add handlers if they already exist
        if not use_root_handlers and not self.logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(console_handler)

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self._log(logging.CRITICAL, message, kwargs)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def _log(self, level: int, message: str, context: Dict[str, Any]) -> None:
        extra = self._format_extra(context)
        if extra:
            message = f"{message} {extra}"
        self.logger.log(level, message)

    def _format_extra(self, extra: Dict[str, Any]) -> str:
        """
        Format extra context information for logging.

        Args:
            extra: Dictionary of extra context information

        Returns:
            Formatted string of context information
        """
        if not extra:
            return ""
        return "[" + " ".join(f"{key}={value}" for key, value in extra.items()) + "]"
