"""Credential store service and its factory."""

from .credential_store import CredentialStore, TokenStore
from .store_factory import create_credential_store

__all__ = ["CredentialStore", "TokenStore", "create_credential_store"]
