"""
Database layer: connection management, the credential model and the
per-backend dialect descriptors.
"""

from .db_config import Base, DatabaseManager
from .db_credential_models import Credential
from .db_dialects import DIALECTS, MYSQL, POSTGRESQL, SQLITE, BackendDialect, get_dialect

__all__ = [
    "Base",
    "DatabaseManager",
    "Credential",
    "BackendDialect",
    "DIALECTS",
    "SQLITE",
    "MYSQL",
    "POSTGRESQL",
    "get_dialect",
]
