# yardmap/domain/common/errors.py

"""
Domain-specific error types for standardized error handling.

Every failure that can happen while loading the map, its regions or the
record dataset is described by one of these types. They travel inside
Result objects and are logged at the boundary where they are handled.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorCategory(Enum):
    """Categories of errors in the application."""
    PARSE = "Parse"
    SCHEMA = "Schema"
    CONFIGURATION = "Configuration"
    RESOURCE = "Resource"
    IMAGE = "Image"
    UNKNOWN = "Unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class DomainError:
    """
    Base class for domain-specific errors.

    Carries a human-readable message plus structured details so that the
    controller can both log the context and show a short status to the user.
    """

    def __init__(self,
                 message: str,
                 category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        """
        Initialize a domain error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            code: Optional error code for programmatic handling
            details: Optional additional error details
            inner_error: Optional original exception
        """
        self.message = message
        self.category = category
        self.severity = severity
        self.code = code
        self.details = details or {}
        self.inner_error = inner_error

    def __str__(self) -> str:
        """String representation of the error."""
        return f"{self.category.value} Error: {self.message}"


class ParseError(DomainError):
    """Text could not be turned into records, even after the repair pass."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.ERROR,
            code="parse_failed",
            details=details,
            inner_error=inner_error
        )

    @property
    def fragment(self) -> Optional[str]:
        """The text that was being parsed when the failure happened."""
        return self.details.get("fragment")


class SchemaError(DomainError):
    """A region definition is missing a required field or has a wrong type."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.SCHEMA,
            severity=ErrorSeverity.ERROR,
            code="schema_invalid",
            details=details,
            inner_error=inner_error
        )

    @property
    def index(self) -> Optional[int]:
        """1-based position of the offending entry."""
        return self.details.get("index")

    @property
    def field(self) -> Optional[str]:
        """Name of the missing or mistyped field."""
        return self.details.get("field")


class ConfigurationError(DomainError):
    """Error for configuration issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            details=details,
            inner_error=inner_error
        )


class ResourceError(DomainError):
    """Fetching a resource failed or answered with a non-success status."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.ERROR,
            code="resource_unavailable",
            details=details,
            inner_error=inner_error
        )


class ImageError(DomainError):
    """The map image could not be loaded, fallback included."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.IMAGE,
            severity=ErrorSeverity.CRITICAL,
            code="image_unavailable",
            details=details,
            inner_error=inner_error
        )
