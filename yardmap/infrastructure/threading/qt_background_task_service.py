# yardmap/infrastructure/threading/qt_background_task_service.py
"""
Qt implementation of the background task service.

Each task runs in its own QThread. Results travel back to the UI thread
through queued signals received by a QObject created on the UI thread.
"""
import traceback
from typing import Dict, Callable, TypeVar

from PySide6.QtCore import QObject, QThread, Signal, Slot, Qt, QMutex, QMutexLocker

from yardmap.domain.common.result import Result
from yardmap.domain.services.i_background_task_service import (
    IBackgroundTaskService, Worker, TaskCancelledException
)
from yardmap.domain.services.i_logger_service import ILoggerService

T = TypeVar('T')

THREAD_STOP_TIMEOUT_MS = 1000


class WorkerSignals(QObject):
    """
    Signals emitted from the worker thread.

    Signals:
        completed: Emitted with the (thread-safe) result
        error: Emitted with an error message
    """
    completed = Signal(object)
    error = Signal(str)


class WorkerWrapper(QObject):
    """Runs a domain Worker inside a QThread and reports through signals."""

    def __init__(self, worker: Worker[T], logger: ILoggerService, task_id: str):
        super().__init__()
        self.worker = worker
        self.logger = logger
        self.task_id = task_id
        self.signals = WorkerSignals()

    @Slot()
    def run(self):
        try:
            self.logger.debug(f"Worker for task '{self.task_id}' starting execution")
            result = self.worker.execute()
        except TaskCancelledException:
            self.logger.debug(f"Task '{self.task_id}' was cancelled")
            return
        except Exception as e:
            self.logger.error(f"Unhandled error in worker: {e}", task=self.task_id)
            self.logger.debug(traceback.format_exc())
            self.signals.error.emit(f"Unhandled error in worker: {e}")
            return

        if isinstance(result, Result):
            result = result.to_thread_safe_dict()
        self.signals.completed.emit(result)


class UiCallbackReceiver(QObject):
    """Lives on the UI thread; hands worker results to the UI callback."""

    def __init__(self, callback: Callable, on_finished: Callable[[], None]):
        super().__init__()
        self.callback = callback
        self.on_finished = on_finished

    @Slot(object)
    def on_completed(self, result):
        try:
            if Result.is_thread_safe_dict(result):
                result = Result.from_thread_safe_dict(result)
            self.callback(result)
        finally:
            self.on_finished()

    @Slot(str)
    def on_error(self, message: str):
        try:
            self.callback(Result.fail(message))
        finally:
            self.on_finished()


class TaskInfo:
    """References that must stay alive while a task runs."""

    def __init__(self, task_id: str, thread: QThread, wrapper: WorkerWrapper,
                 worker: Worker, receiver: UiCallbackReceiver):
        self.task_id = task_id
        self.thread = thread
        self.wrapper = wrapper
        self.worker = worker
        self.receiver = receiver


class QtBackgroundTaskService(IBackgroundTaskService):
    """Executes workers in QThreads without blocking the UI."""

    def __init__(self, logger: ILoggerService):
        self.logger = logger
        self.tasks: Dict[str, TaskInfo] = {}
        self.mutex = QMutex()

    def execute_ui_task(self, task_id: str, worker: Worker[T],
                        ui_callback: Callable[[T], None]) -> Result[bool]:
        locker = QMutexLocker(self.mutex)
        try:
            if task_id in self.tasks:
                self.logger.warning(f"Task '{task_id}' is already running")
                return Result.fail(f"Task '{task_id}' is already running")

            thread = QThread()
            wrapper = WorkerWrapper(worker, self.logger, task_id)
            wrapper.moveToThread(thread)

            receiver = UiCallbackReceiver(ui_callback, lambda: self._cleanup_task(task_id))
            wrapper.signals.completed.connect(receiver.on_completed, Qt.QueuedConnection)
            wrapper.signals.error.connect(receiver.on_error, Qt.QueuedConnection)

            thread.started.connect(wrapper.run)

            self.tasks[task_id] = TaskInfo(task_id, thread, wrapper, worker, receiver)
            thread.start()

            self.logger.debug(f"Task '{task_id}' started")
            return Result.ok(True)
        except Exception as e:
            error_message = f"Error starting task '{task_id}': {e}"
            self.logger.error(error_message)
            self.logger.debug(traceback.format_exc())
            return Result.fail(error_message)
        finally:
            locker.unlock()

    def cancel_task(self, task_id: str) -> Result[bool]:
        locker = QMutexLocker(self.mutex)
        try:
            task_info = self.tasks.pop(task_id, None)
        finally:
            locker.unlock()

        if task_info is None:
            self.logger.warning(f"Cannot cancel task '{task_id}' - not found")
            return Result.fail(f"Task '{task_id}' not found")

        self.logger.debug(f"Cancelling task '{task_id}'")
        task_info.worker.cancel()
        self._stop_thread(task_info)
        return Result.ok(True)

    def is_task_running(self, task_id: str) -> bool:
        locker = QMutexLocker(self.mutex)
        try:
            return task_id in self.tasks
        finally:
            locker.unlock()

    def cancel_all_tasks(self) -> None:
        locker = QMutexLocker(self.mutex)
        try:
            task_ids = list(self.tasks.keys())
        finally:
            locker.unlock()  # cancel_task acquires the lock itself

        for task_id in task_ids:
            self.cancel_task(task_id)

    def _cleanup_task(self, task_id: str) -> None:
        locker = QMutexLocker(self.mutex)
        try:
            task_info = self.tasks.pop(task_id, None)
        finally:
            locker.unlock()

        if task_info is not None:
            self._stop_thread(task_info)
            self.logger.debug(f"Task '{task_id}' resources cleaned up")

    def _stop_thread(self, task_info: TaskInfo) -> None:
        for signal in (task_info.wrapper.signals.completed, task_info.wrapper.signals.error):
            try:
                signal.disconnect()
            except (TypeError, RuntimeError):
                pass  # already disconnected

        task_info.thread.quit()
        if not task_info.thread.wait(THREAD_STOP_TIMEOUT_MS):
            self.logger.warning(f"Forcing termination of task '{task_info.task_id}'")
            task_info.thread.terminate()
            task_info.thread.wait(500)
