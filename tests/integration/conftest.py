"""
Integration test configuration.

Runs the same store scenarios against every backend that is available.
SQLite always runs; MySQL and PostgreSQL run when ``TEST_MYSQL_URL`` or
``TEST_POSTGRES_URL`` point at a scratch database, e.g.
``mysql://root:pw@localhost:3306/mcengine_ai_test``.
"""

import os

import pytest
from sqlalchemy.engine import make_url

from ai_token_store.config import AppConfig
from ai_token_store.services import create_credential_store

SERVER_URL_VARIABLES = {
    "mysql": "TEST_MYSQL_URL",
    "postgresql": "TEST_POSTGRES_URL",
}


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "tests/integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)


def server_mapping(db_type: str, raw_url: str) -> dict:
    url = make_url(raw_url)
    return {
        "database": {
            "type": db_type,
            db_type: {
                "host": url.host or "localhost",
                "port": url.port or (3306 if db_type == "mysql" else 5432),
                "name": url.database,
                "user": url.username or "",
                "password": url.password or "",
            },
        }
    }


@pytest.fixture(params=["sqlite", "mysql", "postgresql"])
def backend_config(request, tmp_path) -> AppConfig:
    """Configuration for each reachable backend."""
    if request.param == "sqlite":
        return AppConfig.from_mapping(
            {
                "database": {
                    "type": "sqlite",
                    "sqlite": {"path": "artificialintelligence.db", "data_folder": str(tmp_path)},
                }
            }
        )

    variable = SERVER_URL_VARIABLES[request.param]
    raw_url = os.getenv(variable)
    if not raw_url:
        pytest.skip(f"{variable} not set")
    return AppConfig.from_mapping(server_mapping(request.param, raw_url))


@pytest.fixture
def backend_store(backend_config, encrypt):
    """Store on a clean credential table."""
    store = create_credential_store(backend_config, encrypt=encrypt)
    store.execute_statement("DELETE FROM credentials").unwrap()
    yield store
    store.execute_statement("DELETE FROM credentials")
    store.close()
