"""
Credential store shared by every backend.

``CredentialStore`` keeps one encrypted token per (user_id, platform) and
exposes two generic escape hatches for callers that need ad-hoc SQL on the
same connection. Setup failures raise; runtime query failures are logged
and reported through ``QueryResult``.
"""

from typing import Any, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..config import DatabaseSettings
from ..db.db_config import DatabaseManager
from ..db.db_credential_models import Credential
from ..db.db_dialects import BackendDialect
from ..exceptions import ErrorCode, QueryError
from ..schemas.query_result import QueryResult
from ..utils.encryption_utils import TokenEncryptor
from ..utils.logger import get_logger
from ..utils.scalar_utils import coerce_scalar, resolve_scalar_type


class TokenStore(Protocol):
    def set_token(self, user_id: str, platform: str, token: str) -> QueryResult:
        """Encrypt ``token`` and upsert it for (user_id, platform)."""

    def get_token(self, user_id: str, platform: str) -> Optional[str]:
        """Return the stored ciphertext, or ``None`` if there is none."""

    def execute_statement(self, sql: str) -> QueryResult:
        """Run an arbitrary statement; failures are logged, not raised."""

    def get_scalar_value(self, sql: str, expected_type: Any) -> QueryResult:
        """Read the first column of the first row as ``expected_type``."""


class CredentialStore:
    """
    Token storage on top of a single backend connection.

    Instances are built by ``initialize`` (or the store factory) and handed
    to consumers explicitly; nothing here is process-global.
    """

    def __init__(self, db_manager: DatabaseManager, encrypt: TokenEncryptor):
        self.db_manager = db_manager
        self.dialect = db_manager.dialect
        self._encrypt = encrypt
        self._table = Credential.__table__
        self.logger = get_logger()

    @classmethod
    def initialize(
        cls,
        dialect: BackendDialect,
        settings: DatabaseSettings,
        encrypt: TokenEncryptor,
    ) -> "CredentialStore":
        """
        Connect to the backend and make sure the credential table exists.

        Raises:
            DatabaseConnectionError: If the backend cannot be opened
            SchemaError: If the table cannot be created
        """
        db_manager = DatabaseManager(dialect, settings)
        db_manager.connect()
        db_manager.create_tables()
        return cls(db_manager, encrypt)

    @property
    def backend(self) -> str:
        return self.dialect.name.value

    def set_token(self, user_id: str, platform: str, token: str) -> QueryResult:
        """
        Encrypt ``token`` and store it for (user_id, platform).

        The backend's native upsert clause resolves the conflict, so concurrent
        writers for the same pair never produce a second row. Only the
        ciphertext of an existing row is replaced.
        """
        statement = self.dialect.build_upsert(
            self._table,
            {
                "user_id": user_id,
                "platform": platform,
                "secret_ciphertext": self._encrypt(token),
            },
        )

        try:
            with self.db_manager.engine.begin() as conn:
                conn.execute(statement)
        except SQLAlchemyError as e:
            error = QueryError(
                f"Failed to save token in {self.dialect.label}: {e}",
                operation="set_token",
                cause=e,
                user_id=user_id,
                platform=platform,
            )
            return QueryResult.failure_result(error, operation="set_token")

        self.logger.info(
            "Token saved",
            extra={"user_id": user_id, "platform": platform, "db_backend": self.backend},
        )
        # No rows_affected: MySQL counts an upsert that updates as two rows
        return QueryResult.success_result(operation="set_token")

    def get_token(self, user_id: str, platform: str) -> Optional[str]:
        """Return the stored ciphertext unchanged, or ``None``."""
        statement = select(self._table.c.secret_ciphertext).where(
            self._table.c.user_id == user_id,
            self._table.c.platform == platform,
        )

        try:
            with self.db_manager.engine.connect() as conn:
                return conn.execute(statement).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.warning(
                f"Failed to retrieve token from {self.dialect.label}: {e}",
                extra={"user_id": user_id, "platform": platform, "operation": "get_token"},
            )
            return None

    def execute_statement(self, sql: str) -> QueryResult:
        """
        Run ``sql`` in its own transaction on the store's connection.

        A failure is logged and returned as a failed result; call
        ``unwrap()`` on the result to turn it into an exception.
        """
        try:
            with self.db_manager.engine.begin() as conn:
                result = conn.execution_options(no_parameters=True).exec_driver_sql(sql)
                rows_affected = result.rowcount
        except SQLAlchemyError as e:
            error = QueryError(
                f"{self.dialect.label} executeStatement failed: {e}",
                operation="execute_statement",
                cause=e,
            )
            return QueryResult.failure_result(error, operation="execute_statement")

        return QueryResult.success_result(
            rows_affected=rows_affected, operation="execute_statement"
        )

    def get_scalar_value(self, sql: str, expected_type: Any) -> QueryResult:
        """
        Read the first column of the first row of ``sql``.

        ``expected_type`` is a ScalarType (or its string value, or one of
        ``str``, ``int``, ``float``, ``bool``). It is checked before any SQL
        runs. Zero rows give a not-found result; a value outside the accepted
        family for the type gives a failed result.

        Raises:
            UnsupportedTypeError: If ``expected_type`` is not supported
        """
        scalar_type = resolve_scalar_type(expected_type)

        try:
            # Writes made by the statement (INSERT ... RETURNING) are committed
            with self.db_manager.engine.begin() as conn:
                row = conn.execution_options(no_parameters=True).exec_driver_sql(sql).first()
        except SQLAlchemyError as e:
            error = QueryError(
                f"{self.dialect.label} getScalarValue failed: {e}",
                operation="get_scalar_value",
                cause=e,
            )
            return QueryResult.failure_result(error, operation="get_scalar_value")

        if row is None:
            return QueryResult.not_found_result(operation="get_scalar_value")

        try:
            value = coerce_scalar(row[0], scalar_type)
        except (TypeError, ValueError) as e:
            error = QueryError(
                f"Cannot read {scalar_type.value} from {self.dialect.label} result: {e}",
                operation="get_scalar_value",
                error_code=ErrorCode.TYPE_MISMATCH,
                cause=e,
            )
            return QueryResult.failure_result(error, operation="get_scalar_value")

        return QueryResult.success_result(value=value, operation="get_scalar_value")

    def close(self) -> None:
        """Release the connection. Hosts call this on shutdown, the store never does."""
        self.db_manager.close()
