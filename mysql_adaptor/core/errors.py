"""
Error types and MySQL error classification for the adaptor.

Every failure raised out of a pipeline run is an AdaptorError subclass with
the underlying driver exception chained as ``__cause__``. Query failures also
carry a structured ErrorInfo so callers can branch on ``kind`` or
``retryable`` without matching on message text.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Standardized error categories."""

    DB_CONNECTION = "db_connection"  # Server unreachable, lost connection
    AUTH = "auth"                    # Access denied
    DB_CONSTRAINT = "db_constraint"  # Duplicate key, foreign key
    DB_DEADLOCK = "db_deadlock"      # Deadlock, lock wait timeout
    DB_TIMEOUT = "db_timeout"        # Statement execution time exceeded
    SYNTAX = "syntax"                # Malformed SQL
    SCHEMA = "schema"                # Unknown table/column, bad value
    UNKNOWN = "unknown"


class ErrorInfo(BaseModel):
    """Structured description of a failure."""

    kind: ErrorKind = Field(
        default=ErrorKind.UNKNOWN,
        description="Error category"
    )
    retryable: bool = Field(
        default=False,
        description="Whether this error is worth retrying"
    )
    code: str = Field(
        default="UNKNOWN",
        description="Error code (MYSQL_1062, MYSQL_UNKNOWN, ...)"
    )
    message: str = Field(
        default="Unknown error",
        description="Human-readable error message"
    )
    source: str = Field(
        default="mysql",
        description="Component that produced this error"
    )
    mysql_errno: Optional[int] = Field(
        None, description="MySQL server or client error number"
    )
    exception_type: Optional[str] = Field(
        None, description="Python exception class name"
    )

    def to_dict(self) -> dict[str, Any]:
        d = {
            "kind": self.kind.value,
            "retryable": self.retryable,
            "code": self.code,
            "message": self.message,
            "source": self.source,
        }
        if self.mysql_errno is not None:
            d["mysql_errno"] = self.mysql_errno
        if self.exception_type is not None:
            d["exception_type"] = self.exception_type
        return d


class AdaptorError(Exception):
    """Base exception for adaptor errors."""
    pass


class MySQLConnectionError(AdaptorError):
    """Opening the database connection failed or configuration is invalid."""

    def __init__(self, message: str, error_info: Optional[ErrorInfo] = None):
        super().__init__(message)
        self.error_info = error_info


class QueryExecutionError(AdaptorError):
    """The driver reported a failure while executing a statement."""

    def __init__(self, message: str, statement: str = "", error_info: Optional[ErrorInfo] = None):
        super().__init__(message)
        self.statement = statement
        self.error_info = error_info


class ResolutionError(AdaptorError):
    """A reference inside a field spec could not be resolved against the state."""
    pass


class OperationError(AdaptorError):
    """An operation returned something other than a state."""
    pass


# errno -> (kind, retryable)
_MYSQL_ERRNO_KINDS: dict[int, tuple[ErrorKind, bool]] = {
    1045: (ErrorKind.AUTH, False),            # ER_ACCESS_DENIED_ERROR
    1044: (ErrorKind.AUTH, False),            # ER_DBACCESS_DENIED_ERROR
    1049: (ErrorKind.DB_CONNECTION, False),   # ER_BAD_DB_ERROR
    2002: (ErrorKind.DB_CONNECTION, True),    # CR_CONNECTION_ERROR
    2003: (ErrorKind.DB_CONNECTION, True),    # CR_CONN_HOST_ERROR
    2006: (ErrorKind.DB_CONNECTION, True),    # CR_SERVER_GONE_ERROR
    2013: (ErrorKind.DB_CONNECTION, True),    # CR_SERVER_LOST
    1062: (ErrorKind.DB_CONSTRAINT, False),   # ER_DUP_ENTRY
    1451: (ErrorKind.DB_CONSTRAINT, False),   # ER_ROW_IS_REFERENCED_2
    1452: (ErrorKind.DB_CONSTRAINT, False),   # ER_NO_REFERENCED_ROW_2
    1048: (ErrorKind.DB_CONSTRAINT, False),   # ER_BAD_NULL_ERROR
    1213: (ErrorKind.DB_DEADLOCK, True),      # ER_LOCK_DEADLOCK
    1205: (ErrorKind.DB_DEADLOCK, True),      # ER_LOCK_WAIT_TIMEOUT
    3024: (ErrorKind.DB_TIMEOUT, True),       # ER_QUERY_TIMEOUT
    1064: (ErrorKind.SYNTAX, False),          # ER_PARSE_ERROR
    1146: (ErrorKind.SCHEMA, False),          # ER_NO_SUCH_TABLE
    1054: (ErrorKind.SCHEMA, False),          # ER_BAD_FIELD_ERROR
    1366: (ErrorKind.SCHEMA, False),          # ER_TRUNCATED_WRONG_VALUE_FOR_FIELD
    1406: (ErrorKind.SCHEMA, False),          # ER_DATA_TOO_LONG
}


def _mysql_errno(error: Exception) -> Optional[int]:
    # PyMySQL errors carry (errno, message) in args
    args = getattr(error, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def classify_mysql_error(error: Exception) -> ErrorInfo:
    """Classify a PyMySQL (or other) exception into an ErrorInfo."""
    errno = _mysql_errno(error)
    error_type = type(error).__name__
    code = f"MYSQL_{errno}" if errno is not None else "MYSQL_UNKNOWN"
    message = str(error.args[1]) if errno is not None and len(error.args) > 1 else str(error)

    if errno in _MYSQL_ERRNO_KINDS:
        kind, retryable = _MYSQL_ERRNO_KINDS[errno]
        return ErrorInfo(
            kind=kind,
            retryable=retryable,
            code=code,
            message=message,
            mysql_errno=errno,
            exception_type=error_type,
        )

    error_str = message.lower()
    if "deadlock" in error_str:
        kind, retryable = ErrorKind.DB_DEADLOCK, True
    elif "duplicate" in error_str:
        kind, retryable = ErrorKind.DB_CONSTRAINT, False
    elif "connect" in error_str:
        kind, retryable = ErrorKind.DB_CONNECTION, True
    elif "timeout" in error_str:
        kind, retryable = ErrorKind.DB_TIMEOUT, True
    else:
        kind, retryable = ErrorKind.UNKNOWN, False

    return ErrorInfo(
        kind=kind,
        retryable=retryable,
        code=code,
        message=message,
        mysql_errno=errno,
        exception_type=error_type,
    )


__all__ = [
    "ErrorKind",
    "ErrorInfo",
    "AdaptorError",
    "MySQLConnectionError",
    "QueryExecutionError",
    "ResolutionError",
    "OperationError",
    "classify_mysql_error",
]
