"""Utility modules for the token store."""

# Encryption gateway
from .encryption_utils import FernetTokenEncryptor, TokenEncryptor, build_encryptor

# Logging utilities
from .logger import (
    AzureQueueHandler,
    ContextAwareLogger,
    StoreContextFilter,
    configure_logging,
    get_logger,
)

# Scalar coercion
from .scalar_utils import coerce_scalar, resolve_scalar_type

__all__ = [
    "FernetTokenEncryptor",
    "TokenEncryptor",
    "build_encryptor",
    "AzureQueueHandler",
    "ContextAwareLogger",
    "StoreContextFilter",
    "configure_logging",
    "get_logger",
    "coerce_scalar",
    "resolve_scalar_type",
]
