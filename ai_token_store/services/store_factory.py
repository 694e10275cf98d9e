"""
Store factory.

Reads ``database.type``, builds exactly one backend and returns the store.
An unknown backend name stops startup: writing tokens to the wrong database
would strand them.
"""

from typing import Optional

from ..config import AppConfig
from ..constants import DatabaseType
from ..db.db_dialects import get_dialect
from ..utils.encryption_utils import TokenEncryptor, build_encryptor
from ..utils.logger import configure_logging
from .credential_store import CredentialStore


def create_credential_store(
    config: Optional[AppConfig] = None,
    encrypt: Optional[TokenEncryptor] = None,
) -> CredentialStore:
    """
    Build the credential store selected by configuration.

    The store logger is (re)configured from ``config.logging`` and stamps
    the selected backend on every record.

    Args:
        config: Application configuration. If None, read from the environment.
        encrypt: Encryption gateway. If None, a Fernet encryptor is built from
            ``security.encryption_key``.

    Returns:
        An initialized CredentialStore

    Raises:
        ConfigurationError: If the configuration is malformed, the backend name
            is unknown or no key is configured
        DatabaseConnectionError: If the backend cannot be opened
        SchemaError: If the credential table cannot be created
    """
    if config is None:
        config = AppConfig.from_env()

    db_type = config.get_string("database.type", DatabaseType.SQLITE.value)
    dialect = get_dialect(db_type)

    if encrypt is None:
        encrypt = build_encryptor(config.security.encryption_key)

    logging_config = config.logging
    logger = configure_logging(
        backend=dialect.name.value,
        log_level=logging_config.level,
        enable_queue=logging_config.enable_queue,
        queue_name=logging_config.queue_name,
        connection_string=logging_config.queue_connection_string,
    )
    logger.debug(
        "Creating credential store",
        extra={"db_backend": dialect.name.value, "config": config.describe()["database"]},
    )
    return CredentialStore.initialize(dialect, config.database, encrypt)
