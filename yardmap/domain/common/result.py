# yardmap/domain/common/result.py

"""
Result pattern implementation for error handling.

Loading a map involves several steps that are expected to fail on bad input
(malformed text, missing fields, unreachable files). Instead of raising, the
services return a Result carrying either the value or a DomainError.
"""
from typing import TypeVar, Generic, Optional, Union, Any, Dict

from yardmap.domain.common.errors import DomainError, ErrorCategory

T = TypeVar('T')


class Result(Generic[T]):
    """
    Result type for representing success or failure of an operation.

    Attributes:
        value: The result value (if successful)
        error: Error object (if failed)
        is_success: Whether the operation was successful
        is_failure: Whether the operation failed
    """

    def __init__(self, value: Optional[T], error: Optional[Union[str, DomainError]]):
        """
        Initialize a Result object.

        Args:
            value: The result value (or None if failed)
            error: Error object or message (or None if successful)
        """
        self._value = value

        if isinstance(error, str):
            self._error = DomainError(message=error, category=ErrorCategory.UNKNOWN)
        else:
            self._error = error

    @classmethod
    def ok(cls, value: T) -> 'Result[T]':
        """Create a successful result with a value."""
        return cls(value, None)

    @classmethod
    def fail(cls, error: Union[str, DomainError]) -> 'Result[T]':
        """Create a failed result with an error message or DomainError."""
        return cls(None, error)

    @property
    def is_success(self) -> bool:
        """Whether the result represents a successful operation."""
        return self._error is None

    @property
    def is_failure(self) -> bool:
        """Whether the result represents a failed operation."""
        return not self.is_success

    @property
    def value(self) -> T:
        """
        Get the success value.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot access value of a failed result: {self._error}")
        return self._value

    @property
    def error(self) -> DomainError:
        """
        Get the error.

        Raises:
            ValueError: If the result is a success
        """
        if self.is_success:
            raise ValueError("Cannot access error of a successful result")
        return self._error

    def to_thread_safe_dict(self) -> Dict[str, Any]:
        """
        Convert the result to a plain dictionary for a queued Qt signal.

        Error objects are passed as-is so the receiving side keeps their
        category and details.
        """
        if self.is_success:
            return {"success": True, "value": self._value}
        return {"success": False, "error": self._error}

    @classmethod
    def from_thread_safe_dict(cls, data: Dict[str, Any]) -> 'Result[Any]':
        """Rebuild a Result from a dictionary created by to_thread_safe_dict."""
        if data.get("success", False):
            return cls.ok(data.get("value"))
        return cls.fail(data.get("error") or "Unknown error")

    @staticmethod
    def is_thread_safe_dict(data: Any) -> bool:
        """Whether data looks like the output of to_thread_safe_dict."""
        return isinstance(data, dict) and "success" in data and ("value" in data or "error" in data)
