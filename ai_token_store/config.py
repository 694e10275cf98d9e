"""
Centralized configuration for the token store.

Configuration comes from environment variables (optionally seeded from a
``.env`` file) or from a nested mapping such as a parsed plugin config file.
Values are validated with Pydantic and can be read back with dotted keys,
e.g. ``config.get_int("database.mysql.port", 3306)``.
"""

import os
from typing import Any, Dict, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import DatabaseType, EnvironmentVariable, LogLevel
from .exceptions import ConfigurationError

_MISSING = object()


def _env(name: EnvironmentVariable, default: str) -> str:
    return os.getenv(name.value, default)


def _invalid_config(source: str, error: ValidationError) -> ConfigurationError:
    """Wrap a pydantic validation failure, keyed by the first offending field."""
    details = error.errors()
    problems = [f"{'.'.join(str(p) for p in d['loc'])}: {d['msg']}" for d in details]
    key = ".".join(str(p) for p in details[0]["loc"]) if details else None
    return ConfigurationError(
        f"Invalid configuration from {source}: {'; '.join(problems)}",
        key=key or None,
        cause=error,
        problems=problems,
    )


class SqliteConfig(BaseModel):
    """Embedded file backend."""

    path: str = Field(
        default_factory=lambda: _env(EnvironmentVariable.SQLITE_PATH, "artificialintelligence.db"),
        description="Database file, relative to data_folder unless absolute",
    )
    data_folder: str = Field(
        default_factory=lambda: _env(EnvironmentVariable.DATA_FOLDER, "."),
        description="Directory that relative paths are resolved against",
    )

    def resolve_path(self) -> str:
        """Absolute path of the database file."""
        if os.path.isabs(self.path):
            return self.path
        return os.path.abspath(os.path.join(self.data_folder, self.path))


class MySQLConfig(BaseModel):
    """Client/server backend using MySQL."""

    host: str = Field(default_factory=lambda: _env(EnvironmentVariable.MYSQL_HOST, "localhost"))
    port: int = Field(
        default_factory=lambda: _env(EnvironmentVariable.MYSQL_PORT, "3306"), validate_default=True
    )
    name: str = Field(default_factory=lambda: _env(EnvironmentVariable.MYSQL_NAME, "mcengine_ai"))
    user: str = Field(default_factory=lambda: _env(EnvironmentVariable.MYSQL_USER, "root"))
    password: str = Field(default_factory=lambda: _env(EnvironmentVariable.MYSQL_PASSWORD, ""))

    def __repr__(self) -> str:
        """String representation with masked password."""
        return (
            f"MySQLConfig(host='{self.host}', port={self.port}, "
            f"name='{self.name}', user='{self.user}', password='***')"
        )


class PostgreSQLConfig(BaseModel):
    """Client/server backend using PostgreSQL."""

    host: str = Field(default_factory=lambda: _env(EnvironmentVariable.POSTGRES_HOST, "localhost"))
    port: int = Field(
        default_factory=lambda: _env(EnvironmentVariable.POSTGRES_PORT, "5432"), validate_default=True
    )
    name: str = Field(
        default_factory=lambda: _env(EnvironmentVariable.POSTGRES_NAME, "mcengine_ai")
    )
    user: str = Field(default_factory=lambda: _env(EnvironmentVariable.POSTGRES_USER, "postgres"))
    password: str = Field(default_factory=lambda: _env(EnvironmentVariable.POSTGRES_PASSWORD, ""))

    def __repr__(self) -> str:
        """String representation with masked password."""
        return (
            f"PostgreSQLConfig(host='{self.host}', port={self.port}, "
            f"name='{self.name}', user='{self.user}', password='***')"
        )


class DatabaseSettings(BaseModel):
    """Backend selection plus connection parameters for every backend."""

    type: str = Field(
        default_factory=lambda: _env(EnvironmentVariable.DATABASE_TYPE, DatabaseType.SQLITE.value),
        description="One of sqlite, mysql, postgresql",
    )
    sqlite: SqliteConfig = Field(default_factory=SqliteConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    postgresql: PostgreSQLConfig = Field(default_factory=PostgreSQLConfig)
    echo: bool = Field(
        default_factory=lambda: _env(EnvironmentVariable.DB_ECHO, "false").lower() == "true",
        description="Echo SQL statements",
    )
    pool_recycle: int = Field(
        default=3600, description="Seconds before a server connection is recycled"
    )

    @field_validator("type")
    def normalize_type(cls, v: str) -> str:
        """Backend names are matched case-insensitively."""
        return v.strip().lower()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: _env(EnvironmentVariable.LOG_LEVEL, LogLevel.INFO.value),
        description="Logging level",
    )
    enable_queue: bool = Field(default=False, description="Ship logs to an Azure Storage queue")
    queue_name: str = Field(default="logs-queue", description="Queue receiving log entries")
    queue_connection_string: str = Field(
        default_factory=lambda: _env(EnvironmentVariable.AZURE_STORAGE_CONNECTION, ""),
        description="Azure Storage connection string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SecurityConfig(BaseModel):
    """Secrets used by the encryption gateway."""

    encryption_key: Optional[str] = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.TOKEN_ENCRYPTION_KEY.value),
        description="Fernet key (url-safe base64, 32 bytes)",
    )


class AppConfig(BaseModel):
    """Top-level configuration handed to the store factory."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @classmethod
    def from_env(cls, load_env_file: bool = False, env_file: Optional[str] = None) -> "AppConfig":
        """
        Create configuration from environment variables.

        With ``load_env_file`` a ``.env`` file (``env_file``, or the nearest one
        above the working directory) seeds variables that are not already set.

        Raises:
            ConfigurationError: If a variable holds a value of the wrong type
        """
        if load_env_file:
            load_dotenv(env_file or find_dotenv(usecwd=True))
        try:
            return cls()
        except ValidationError as e:
            raise _invalid_config("environment", e)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AppConfig":
        """
        Create configuration from a nested mapping.

        Missing sections and keys fall back to the environment defaults.

        Raises:
            ConfigurationError: If a value has the wrong type or is not allowed
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise _invalid_config("mapping", e)

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key such as ``database.mysql.host``.

        Returns ``default`` when any segment is missing.
        """
        node: Any = self.model_dump()
        for part in key.split("."):
            if not isinstance(node, dict):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def get_string(self, key: str, default: str = "") -> str:
        value = self.get_value(key, default)
        return default if value is None else str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get_value(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get_value(key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    def describe(self) -> Dict[str, Any]:
        """Configuration dump with every password and key masked."""
        dumped = self.model_dump()
        for backend in ("mysql", "postgresql"):
            dumped["database"][backend]["password"] = "***"
        if dumped["security"]["encryption_key"]:
            dumped["security"]["encryption_key"] = "***"
        return dumped


# Global configuration instance, used only for logging defaults
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
