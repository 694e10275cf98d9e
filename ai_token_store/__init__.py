"""
Multi-backend store for encrypted per-user AI platform tokens.

Typical use::

    from ai_token_store import AppConfig, create_credential_store

    store = create_credential_store(AppConfig.from_env())
    store.set_token(user_id, "openai", api_key)
    ciphertext = store.get_token(user_id, "openai")
"""

from .config import AppConfig
from .constants import DatabaseType, ScalarType
from .exceptions import (
    BaseError,
    ConfigurationError,
    DatabaseConnectionError,
    QueryError,
    SchemaError,
    UnsupportedTypeError,
)
from .schemas import QueryResult
from .services import CredentialStore, TokenStore, create_credential_store

__all__ = [
    "AppConfig",
    "DatabaseType",
    "ScalarType",
    "BaseError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "QueryError",
    "SchemaError",
    "UnsupportedTypeError",
    "QueryResult",
    "CredentialStore",
    "TokenStore",
    "create_credential_store",
]
