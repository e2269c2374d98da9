"""Exception hierarchy for the collection health checker.

All custom exceptions inherit from CollectionHealthError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "CHK-1000"
    CONFIGURATION_ERROR = "CHK-1001"

    # Collection listing errors (2xxx)
    LIST_REQUEST_FAILED = "CHK-2000"
    LIST_BAD_RESPONSE = "CHK-2001"

    # Collection detail errors (3xxx)
    DETAIL_REQUEST_FAILED = "CHK-3000"
    DETAIL_BAD_RESPONSE = "CHK-3001"
    DETAIL_TIMEOUT = "CHK-3002"


class CollectionHealthError(Exception):
    """Base exception for all checker errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured output."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(CollectionHealthError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ListError(CollectionHealthError):
    """The collection list could not be obtained.

    Fatal to a run: there is nothing to aggregate without the names.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: ErrorCode = ErrorCode.LIST_REQUEST_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, code, details)


class DetailError(CollectionHealthError):
    """Details for a single collection could not be obtained.

    Recoverable: the aggregator turns it into an errored record.
    """

    def __init__(
        self,
        name: str,
        message: str,
        code: ErrorCode = ErrorCode.DETAIL_REQUEST_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        details = dict(details or {})
        details["collection"] = name
        super().__init__(message, code, details)
