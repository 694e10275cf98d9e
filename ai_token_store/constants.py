"""
Constants and enums for the AI token store.

This module centralizes the magic strings used throughout the package
so backends, configuration and callers agree on them.
"""

from enum import Enum

CREDENTIALS_TABLE = "credentials"
CREDENTIALS_UNIQUE_CONSTRAINT = "uq_credentials_user_platform"


class DatabaseType(str, Enum):
    """Recognized values for ``database.type``."""

    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"


class ScalarType(str, Enum):
    """Column types that ``get_scalar_value`` can return."""

    TEXT = "text"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT64 = "float64"
    BOOL = "bool"


class QueryStatus(str, Enum):
    """Outcome of an escape-hatch query."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    FAILURE = "failure"


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Environment variable names read by ``AppConfig.from_env``."""

    DATABASE_TYPE = "DATABASE_TYPE"
    DATA_FOLDER = "DATA_FOLDER"
    SQLITE_PATH = "SQLITE_PATH"
    MYSQL_HOST = "MYSQL_HOST"
    MYSQL_PORT = "MYSQL_PORT"
    MYSQL_NAME = "MYSQL_NAME"
    MYSQL_USER = "MYSQL_USER"
    MYSQL_PASSWORD = "MYSQL_PASSWORD"
    POSTGRES_HOST = "POSTGRES_HOST"
    POSTGRES_PORT = "POSTGRES_PORT"
    POSTGRES_NAME = "POSTGRES_NAME"
    POSTGRES_USER = "POSTGRES_USER"
    POSTGRES_PASSWORD = "POSTGRES_PASSWORD"
    DB_ECHO = "DB_ECHO"
    TOKEN_ENCRYPTION_KEY = "TOKEN_ENCRYPTION_KEY"
    LOG_LEVEL = "LOG_LEVEL"
    AZURE_STORAGE_CONNECTION = "AzureWebJobsStorage"
