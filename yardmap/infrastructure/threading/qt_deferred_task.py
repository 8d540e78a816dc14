# yardmap/infrastructure/threading/qt_deferred_task.py
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from yardmap.domain.services.i_deferred_task_service import IDeferredTaskService
from yardmap.domain.services.i_logger_service import ILoggerService


class QtDeferredTaskService(IDeferredTaskService):
    """Single-shot QTimer; runs on the thread that owns it (the UI thread)."""

    def __init__(self, logger: ILoggerService, parent: Optional[QObject] = None):
        self.logger = logger
        self._callback: Optional[Callable[[], None]] = None
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self._timer.stop()
        self._callback = callback
        self._timer.start(max(0, int(delay_ms)))

    def cancel(self) -> bool:
        was_pending = self._timer.isActive()
        self._timer.stop()
        self._callback = None
        return was_pending

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        callback, self._callback = self._callback, None
        if callback is None:
            return
        try:
            callback()
        except Exception as e:
            self.logger.error(f"Deferred task failed: {e}")
