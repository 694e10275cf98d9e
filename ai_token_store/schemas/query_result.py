"""
Result structure for escape-hatch and write operations.

Runtime query failures are not raised by the store. They come back as a
failed ``QueryResult`` so callers can choose between the quiet default and
strict handling through ``unwrap()``.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from ..constants import QueryStatus
from ..exceptions import ErrorCode, QueryError


class QueryResult(BaseModel):
    """Outcome of a store operation that touched the database."""

    status: QueryStatus = Field(description="Operation status")
    success: bool = Field(description="Whether the statement ran without error")
    found: bool = Field(default=False, description="Whether a row was returned")
    value: Any = Field(default=None, description="Scalar value, if the operation reads one")
    rows_affected: Optional[int] = Field(
        default=None, description="Row count reported by the driver for writes"
    )
    error_message: Optional[str] = Field(default=None, description="Failure description")
    error_code: Optional[str] = Field(default=None, description="ErrorCode value on failure")
    operation: Optional[str] = Field(default=None, description="Store operation name")

    @classmethod
    def success_result(
        cls, value: Any = None, rows_affected: Optional[int] = None, **kwargs
    ) -> "QueryResult":
        """A statement that ran and, for reads, produced a row."""
        return cls(
            status=QueryStatus.SUCCESS,
            success=True,
            found=True,
            value=value,
            rows_affected=rows_affected,
            **kwargs,
        )

    @classmethod
    def not_found_result(cls, **kwargs) -> "QueryResult":
        """A read that ran but matched no rows."""
        return cls(status=QueryStatus.NOT_FOUND, success=True, found=False, **kwargs)

    @classmethod
    def failure_result(cls, error: QueryError, **kwargs) -> "QueryResult":
        """A statement that failed; the error has already been logged."""
        return cls(
            status=QueryStatus.FAILURE,
            success=False,
            error_message=error.message,
            error_code=error.error_code.value,
            **kwargs,
        )

    def unwrap(self) -> Any:
        """
        Return ``value`` or raise for a failed result.

        Raises:
            QueryError: If the operation failed
        """
        if not self.success:
            raise QueryError(
                self.error_message or "Query failed",
                operation=self.operation,
                error_code=ErrorCode(self.error_code) if self.error_code else ErrorCode.DATABASE_ERROR,
            )
        return self.value

    def __bool__(self) -> bool:
        return self.success
