"""
Shared test fixtures.

Provides a deterministic encryption gateway, SQLite-backed store fixtures
on temporary files, and resets of the global config and logger between
tests.
"""

import pytest

from ai_token_store.config import AppConfig, reset_config
from ai_token_store.services import CredentialStore, create_credential_store
from ai_token_store.utils import logger as store_logger
from tests.fakes import fake_encrypt


@pytest.fixture(autouse=True)
def reset_globals(monkeypatch):
    """Keep host environment and earlier tests from leaking into a test."""
    for name in ("DATABASE_TYPE", "SQLITE_PATH", "DATA_FOLDER", "TOKEN_ENCRYPTION_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    store_logger.reset_logging()
    yield
    reset_config()
    store_logger.reset_logging()


@pytest.fixture
def encrypt():
    return fake_encrypt


@pytest.fixture
def sqlite_config(tmp_path) -> AppConfig:
    """SQLite configuration pointing at a fresh nested directory."""
    return AppConfig.from_mapping(
        {
            "database": {
                "type": "sqlite",
                "sqlite": {"path": "store/tokens.db", "data_folder": str(tmp_path / "plugin")},
            }
        }
    )


@pytest.fixture
def store(sqlite_config, encrypt) -> CredentialStore:
    """Initialized SQLite credential store."""
    credential_store = create_credential_store(sqlite_config, encrypt=encrypt)
    yield credential_store
    credential_store.close()


@pytest.fixture
def sample_user_id() -> str:
    return "3f2b8a9e-5c1d-4e7f-9a0b-1c2d3e4f5a6b"
