# yardmap/domain/services/i_background_task_service.py
"""
Background task interface.

The map viewer has exactly one operation that must not block the UI thread:
fetching the region definitions. It runs as a Worker; the result is handed
back to the UI thread through a callback.
"""
from abc import ABC, abstractmethod
from typing import Callable, TypeVar, Generic
import threading

from yardmap.domain.common.result import Result

T = TypeVar('T')


class TaskCancelledException(Exception):
    """Exception raised when a task is cancelled."""
    pass


class CancellationToken:
    """Thread-safe cancellation flag shared between the UI and a worker."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def throw_if_cancelled(self) -> None:
        """
        Raises:
            TaskCancelledException: If cancellation has been requested
        """
        if self.is_cancelled:
            raise TaskCancelledException("Task was cancelled")


class Worker(Generic[T]):
    """
    Base class for work executed by the background task service.

    Subclasses implement execute(); the service delivers its return value
    to the UI callback.
    """

    def __init__(self):
        self._cancellation_token = CancellationToken()

    def check_cancellation(self) -> None:
        self._cancellation_token.throw_if_cancelled()

    @abstractmethod
    def execute(self) -> T:
        """
        Execute the worker's task in a background thread.

        Returns:
            The result of the worker's execution

        Raises:
            TaskCancelledException: If the task is cancelled
        """
        pass

    def cancel(self) -> None:
        """Request cancellation of the worker's task."""
        self._cancellation_token.cancel()


class IBackgroundTaskService(ABC):
    """Interface for executing workers off the UI thread."""

    @abstractmethod
    def execute_ui_task(self, task_id: str, worker: Worker[T],
                        ui_callback: Callable[[T], None]) -> Result[bool]:
        """
        Execute a worker and deliver its result on the UI thread.

        Worker results that are Result objects arrive as Result objects.

        Args:
            task_id: Unique identifier for the task
            worker: Worker to execute
            ui_callback: Callback executed on the UI thread with the result

        Returns:
            Result indicating whether the task was started
        """
        pass

    @abstractmethod
    def cancel_task(self, task_id: str) -> Result[bool]:
        """Cancel a running task."""
        pass

    @abstractmethod
    def is_task_running(self, task_id: str) -> bool:
        pass

    @abstractmethod
    def cancel_all_tasks(self) -> None:
        """Cancel all running background tasks."""
        pass
