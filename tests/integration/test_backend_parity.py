"""
Behaviour that must be identical on SQLite, MySQL and PostgreSQL.
"""

import threading

import pytest

from ai_token_store.constants import QueryStatus, ScalarType
from ai_token_store.exceptions import ErrorCode, UnsupportedTypeError
from tests.fakes import fake_encrypt

COUNT_ALL = "SELECT COUNT(*) FROM credentials"


class TestTokenParity:
    def test_set_then_get(self, backend_store, sample_user_id):
        backend_store.set_token(sample_user_id, "openai", "abc")

        assert backend_store.get_token(sample_user_id, "openai") == fake_encrypt("abc")

    def test_overwrite_keeps_one_row(self, backend_store, sample_user_id):
        backend_store.set_token(sample_user_id, "openai", "abc")
        result = backend_store.set_token(sample_user_id, "openai", "xyz")

        assert result.success
        assert result.rows_affected is None

        assert backend_store.get_token(sample_user_id, "openai") == fake_encrypt("xyz")
        assert backend_store.get_scalar_value(COUNT_ALL, ScalarType.INT64).value == 1

    def test_absent_pair(self, backend_store, sample_user_id):
        assert backend_store.get_token(sample_user_id, "deepseek") is None

    def test_platform_case_is_significant(self, backend_store, sample_user_id):
        backend_store.set_token(sample_user_id, "openai", "lower")
        backend_store.set_token(sample_user_id, "OpenAI", "mixed")

        assert backend_store.get_token(sample_user_id, "openai") == fake_encrypt("lower")
        assert backend_store.get_token(sample_user_id, "OpenAI") == fake_encrypt("mixed")

    def test_concurrent_writers(self, backend_store, sample_user_id):
        def writer(index: int) -> None:
            for attempt in range(5):
                backend_store.set_token(sample_user_id, "openai", f"t-{index}-{attempt}")

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert backend_store.get_scalar_value(COUNT_ALL, ScalarType.INT64).value == 1


class TestEscapeHatchParity:
    def test_count(self, backend_store):
        backend_store.set_token("u1", "openai", "a")
        backend_store.set_token("u2", "openai", "b")
        backend_store.set_token("u1", "anthropic", "c")

        result = backend_store.get_scalar_value(COUNT_ALL, ScalarType.INT32)

        assert result.value == 3

    def test_sum_is_read_as_float(self, backend_store):
        backend_store.set_token("u1", "openai", "a")
        backend_store.set_token("u2", "openai", "b")

        result = backend_store.get_scalar_value("SELECT SUM(id) FROM credentials", ScalarType.FLOAT64)

        assert result.success
        assert isinstance(result.value, float)

    def test_text(self, backend_store):
        backend_store.set_token("u1", "openai", "a")

        result = backend_store.get_scalar_value(
            "SELECT platform FROM credentials WHERE user_id = 'u1'", ScalarType.TEXT
        )

        assert result.value == "openai"

    def test_zero_rows(self, backend_store):
        result = backend_store.get_scalar_value(
            "SELECT id FROM credentials WHERE user_id = 'nobody'", ScalarType.INT64
        )

        assert result.status == QueryStatus.NOT_FOUND

    def test_invalid_statement_is_quiet(self, backend_store):
        result = backend_store.execute_statement("SELEC nothing")

        assert not result.success
        assert result.error_code == ErrorCode.DATABASE_ERROR.value
        assert backend_store.set_token("u1", "openai", "still works").success

    def test_scalar_write_is_committed(self, backend_store):
        if backend_store.backend == "mysql":
            pytest.skip("MySQL has no INSERT ... RETURNING")

        result = backend_store.get_scalar_value(
            "INSERT INTO credentials (user_id, platform, secret_ciphertext) "
            "VALUES ('a', 'b', 'c') RETURNING id",
            ScalarType.INT64,
        )

        assert result.success
        assert backend_store.get_token("a", "b") == "c"

    def test_unsupported_type(self, backend_store):
        with pytest.raises(UnsupportedTypeError):
            backend_store.get_scalar_value(COUNT_ALL, "decimal")

    def test_update_reports_rows_affected(self, backend_store):
        backend_store.set_token("u1", "openai", "a")
        backend_store.set_token("u2", "openai", "b")

        result = backend_store.execute_statement(
            "UPDATE credentials SET secret_ciphertext = 'rotated' WHERE platform = 'openai'"
        )

        assert result.rows_affected == 2
        assert backend_store.get_token("u2", "openai") == "rotated"
