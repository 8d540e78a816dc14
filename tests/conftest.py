"""
Shared fixtures: an in-memory logger and an offscreen Qt platform.
"""
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from yardmap.domain.services.i_logger_service import ILoggerService  # noqa: E402


class RecordingLogger(ILoggerService):
    """Keeps (level, message, context) tuples instead of printing."""

    def __init__(self):
        self.entries = []

    def debug(self, message: str, **kwargs) -> None:
        self.entries.append(("DEBUG", message, kwargs))

    def info(self, message: str, **kwargs) -> None:
        self.entries.append(("INFO", message, kwargs))

    def warning(self, message: str, **kwargs) -> None:
        self.entries.append(("WARNING", message, kwargs))

    def error(self, message: str, **kwargs) -> None:
        self.entries.append(("ERROR", message, kwargs))

    def critical(self, message: str, **kwargs) -> None:
        self.entries.append(("CRITICAL", message, kwargs))

    def set_level(self, level: int) -> None:
        pass

    def messages(self, level: str):
        return [message for entry_level, message, _ in self.entries if entry_level == level]


@pytest.fixture
def logger():
    return RecordingLogger()
