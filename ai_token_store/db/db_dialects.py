"""
Backend dialect descriptors.

The three backends share one store implementation. What differs between them
is captured here: how the connection URL is built, how the native upsert
clause is spelled, what has to happen before the first connection and what
runs on every new DBAPI connection.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from sqlalchemy import Table
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import URL
from sqlalchemy.sql.dml import Insert

from ..config import DatabaseSettings
from ..constants import DatabaseType
from ..exceptions import ConfigurationError, DatabaseConnectionError
from ..utils.logger import get_logger

KEY_COLUMNS = ("user_id", "platform")


@dataclass(frozen=True)
class BackendDialect:
    """Everything that is backend specific about the credential store."""

    name: DatabaseType
    label: str
    build_url: Callable[[DatabaseSettings], URL]
    build_upsert: Callable[[Table, Dict[str, Any]], Insert]
    prepare: Callable[[DatabaseSettings], None] = lambda settings: None
    on_connect: Optional[Callable[[Any, Any], None]] = None
    connect_args: Dict[str, Any] = field(default_factory=dict)
    recycles_connections: bool = False

    def engine_options(self, settings: DatabaseSettings) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "echo": settings.echo,
            "connect_args": dict(self.connect_args),
        }
        if self.recycles_connections:
            options["pool_recycle"] = settings.pool_recycle
        return options


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------
def _sqlite_url(settings: DatabaseSettings) -> URL:
    return URL.create("sqlite", database=settings.sqlite.resolve_path())


def _sqlite_prepare(settings: DatabaseSettings) -> None:
    """Create the database file and its parent directories if missing."""
    path = settings.sqlite.resolve_path()
    if os.path.exists(path):
        return
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        open(path, "a").close()
    except OSError as e:
        raise DatabaseConnectionError(
            f"Failed to create SQLite database file: {path}",
            backend=DatabaseType.SQLITE.value,
            cause=e,
            path=path,
        )
    get_logger().info("SQLite database file created", extra={"path": path})


def _sqlite_enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys = ON")
    finally:
        cursor.close()


def _sqlite_upsert(table: Table, row: Dict[str, Any]) -> Insert:
    statement = sqlite_insert(table).values(**row)
    return statement.on_conflict_do_update(
        index_elements=list(KEY_COLUMNS),
        set_={"secret_ciphertext": statement.excluded.secret_ciphertext},
    )


# ---------------------------------------------------------------------------
# MySQL
# ---------------------------------------------------------------------------
def _mysql_url(settings: DatabaseSettings) -> URL:
    mysql = settings.mysql
    return URL.create(
        "mysql+pymysql",
        username=mysql.user,
        password=mysql.password,
        host=mysql.host,
        port=mysql.port,
        database=mysql.name,
        query={"charset": "utf8mb4"},
    )


def _mysql_upsert(table: Table, row: Dict[str, Any]) -> Insert:
    statement = mysql_insert(table).values(**row)
    return statement.on_duplicate_key_update(
        secret_ciphertext=statement.inserted.secret_ciphertext
    )


# ---------------------------------------------------------------------------
# PostgreSQL
# ---------------------------------------------------------------------------
def _postgresql_url(settings: DatabaseSettings) -> URL:
    postgresql = settings.postgresql
    return URL.create(
        "postgresql+psycopg2",
        username=postgresql.user,
        password=postgresql.password,
        host=postgresql.host,
        port=postgresql.port,
        database=postgresql.name,
    )


def _postgresql_upsert(table: Table, row: Dict[str, Any]) -> Insert:
    statement = postgresql_insert(table).values(**row)
    return statement.on_conflict_do_update(
        index_elements=list(KEY_COLUMNS),
        set_={"secret_ciphertext": statement.excluded.secret_ciphertext},
    )


SQLITE = BackendDialect(
    name=DatabaseType.SQLITE,
    label="SQLite",
    build_url=_sqlite_url,
    build_upsert=_sqlite_upsert,
    prepare=_sqlite_prepare,
    on_connect=_sqlite_enable_foreign_keys,
    connect_args={"check_same_thread": False},
)

MYSQL = BackendDialect(
    name=DatabaseType.MYSQL,
    label="MySQL",
    build_url=_mysql_url,
    build_upsert=_mysql_upsert,
    recycles_connections=True,
)

POSTGRESQL = BackendDialect(
    name=DatabaseType.POSTGRESQL,
    label="PostgreSQL",
    build_url=_postgresql_url,
    build_upsert=_postgresql_upsert,
)

DIALECTS: Dict[DatabaseType, BackendDialect] = {
    DatabaseType.SQLITE: SQLITE,
    DatabaseType.MYSQL: MYSQL,
    DatabaseType.POSTGRESQL: POSTGRESQL,
}


def get_dialect(db_type: str) -> BackendDialect:
    """
    Look up the descriptor for a ``database.type`` value.

    Raises:
        ConfigurationError: If the value names no known backend
    """
    try:
        return DIALECTS[DatabaseType(db_type.strip().lower())]
    except (ValueError, AttributeError):
        raise ConfigurationError(
            f"Unsupported database type: {db_type}",
            key="database.type",
            value=db_type,
            supported=[t.value for t in DatabaseType],
        )
