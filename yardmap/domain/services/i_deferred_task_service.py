# yardmap/domain/services/i_deferred_task_service.py
from abc import ABC, abstractmethod
from typing import Callable


class IDeferredTaskService(ABC):
    """
    Runs one callback after a delay on the UI thread.

    Only a single task can be pending: scheduling again replaces it.
    """

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Cancel any pending task and run callback after delay_ms."""
        pass

    @abstractmethod
    def cancel(self) -> bool:
        """
        Cancel the pending task.

        Returns:
            True if a task was pending
        """
        pass

    @abstractmethod
    def is_pending(self) -> bool:
        pass
