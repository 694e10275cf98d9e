"""
Exception hierarchy for the token store.

Every error carries an error code, optional cause and free-form context, and
logs itself on construction. Setup failures (connection, schema,
configuration) and programming errors (unsupported scalar type) are raised;
runtime query failures are wrapped in ``QueryError`` and usually travel
inside a ``QueryResult`` instead of propagating.
"""

import logging
import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONNECTION_ERROR = "1002"
    CONFIGURATION_ERROR = "1003"
    SCHEMA_ERROR = "1005"

    # Caller errors (2xxx)
    VALIDATION_FAILED = "2000"
    TYPE_MISMATCH = "2003"
    UNSUPPORTED_TYPE = "2005"


class BaseError(Exception):
    """Base exception with error code, context, logging and error chaining."""

    log_level = logging.ERROR

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(message)

    def _log_error(self) -> None:
        """Log the error at the level declared by its class."""
        # Lazy import: the logger module imports config, which imports nothing from here
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "error_message": self.message,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "error_id"]},
        }

        if self.log_level >= logging.ERROR:
            logger.error(f"Error {self.error_code.value}: {self.message}", extra=log_data)
        else:
            logger.warning(f"Error {self.error_code.value}: {self.message}", extra=log_data)

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """
        Convert to a serializable dict.

        Args:
            include_cause: Include type and message of the underlying exception

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        result: Dict[str, Any] = {
            "error": {
                "id": self.error_id,
                "code": self.error_code.value,
                "message": self.message,
                "timestamp": self.timestamp,
                "context": {
                    k: v
                    for k, v in self.context.items()
                    if k not in ["cause", "error_id", "correlation_id"]
                },
            }
        }

        if "correlation_id" in self.context:
            result["error"]["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["error"]["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }

        return result

    @property
    def error_chain(self) -> List[Exception]:
        """Get the full chain of errors."""
        chain: List[Exception] = [self]
        current = self.cause
        while current:
            chain.append(current)
            current = getattr(current, "cause", None)
        return chain


class ConfigurationError(BaseError):
    """Unknown backend selection or malformed configuration."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if key:
            context["key"] = key
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, cause, **context)


class DatabaseConnectionError(BaseError):
    """The backend could not be reached or opened at startup."""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if backend:
            context["backend"] = backend
        super().__init__(message, ErrorCode.CONNECTION_ERROR, cause, **context)


class SchemaError(BaseError):
    """Creating the credential table failed."""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if backend:
            context["backend"] = backend
        super().__init__(message, ErrorCode.SCHEMA_ERROR, cause, **context)


class QueryError(BaseError):
    """A runtime statement failed. Recovered locally by the store."""

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        cause: Optional[Exception] = None,
        **context,
    ):
        if operation:
            context["operation"] = operation
        super().__init__(message, error_code, cause, **context)


class UnsupportedTypeError(BaseError):
    """The caller asked ``get_scalar_value`` for a type it cannot produce."""

    def __init__(self, requested: Any, **context):
        context["requested_type"] = repr(requested)
        super().__init__(
            f"Unsupported return type: {requested!r}",
            ErrorCode.UNSUPPORTED_TYPE,
            None,
            **context,
        )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
