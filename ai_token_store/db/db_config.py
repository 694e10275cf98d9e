from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import QueuePool

from ..config import DatabaseSettings
from ..exceptions import DatabaseConnectionError, SchemaError
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .db_dialects import BackendDialect

# Base class for all SQLAlchemy models
Base: Any = declarative_base()


class DatabaseManager:
    """
    Owns the single connection a credential store uses.

    The engine pool holds exactly one connection with no overflow, so
    concurrent callers take turns on it. ``pool_pre_ping`` replaces the
    connection transparently when a server has dropped it.
    """

    def __init__(self, dialect: "BackendDialect", settings: DatabaseSettings):
        self.dialect = dialect
        self.settings = settings
        self.logger = get_logger()
        self.engine = self._create_engine()

    def _create_engine(self):
        self.dialect.prepare(self.settings)
        try:
            engine = create_engine(
                self.dialect.build_url(self.settings),
                poolclass=QueuePool,
                pool_size=1,
                max_overflow=0,
                pool_pre_ping=True,
                **self.dialect.engine_options(self.settings),
            )
        except (SQLAlchemyError, ImportError) as e:
            # ImportError: the backend's DBAPI driver is not installed
            raise DatabaseConnectionError(
                f"Failed to set up {self.dialect.label} engine: {e}",
                backend=self.dialect.name.value,
                cause=e,
            )
        if self.dialect.on_connect is not None:
            event.listen(engine, "connect", self.dialect.on_connect)
        return engine

    def connect(self) -> None:
        """
        Open the connection.

        Raises:
            DatabaseConnectionError: If the backend cannot be reached
        """
        try:
            with self.engine.connect():
                pass
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(
                f"Failed to connect to {self.dialect.label}: {e}",
                backend=self.dialect.name.value,
                cause=e,
                url=self.engine.url.render_as_string(hide_password=True),
            )
        self.logger.info(
            f"Connected to {self.dialect.label}",
            extra={"url": self.engine.url.render_as_string(hide_password=True)},
        )

    def create_tables(self) -> None:
        """
        Create the credential table if it does not exist. Safe to repeat.

        Raises:
            SchemaError: If the DDL fails
        """
        # Registers Credential with Base.metadata
        from . import db_credential_models  # noqa: F401

        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise SchemaError(
                f"Failed to create {self.dialect.label} table: {e}",
                backend=self.dialect.name.value,
                cause=e,
            )

    def close(self) -> None:
        self.engine.dispose()
