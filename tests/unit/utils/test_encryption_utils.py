"""Unit tests for the Fernet encryption gateway."""

import pytest

from ai_token_store.exceptions import ConfigurationError
from ai_token_store.utils.encryption_utils import FernetTokenEncryptor, build_encryptor


@pytest.fixture
def key():
    return FernetTokenEncryptor.generate_key()


class TestFernetTokenEncryptor:
    def test_round_trip(self, key):
        encryptor = FernetTokenEncryptor(key)

        ciphertext = encryptor("sk-live-123")

        assert ciphertext != "sk-live-123"
        assert encryptor.decrypt(ciphertext) == "sk-live-123"

    def test_ciphertext_differs_per_call(self, key):
        encryptor = FernetTokenEncryptor(key)

        assert encryptor.encrypt("same") != encryptor.encrypt("same")

    def test_unicode_token(self, key):
        encryptor = FernetTokenEncryptor(key)

        assert encryptor.decrypt(encryptor("tøken-✓")) == "tøken-✓"

    def test_wrong_key_gives_none(self, key):
        ciphertext = FernetTokenEncryptor(key).encrypt("secret")

        other = FernetTokenEncryptor(FernetTokenEncryptor.generate_key())

        assert other.decrypt(ciphertext) is None

    @pytest.mark.parametrize("bad_key", ["short", "not base64 at all!!", ""])
    def test_invalid_key(self, bad_key):
        with pytest.raises(ConfigurationError) as exc_info:
            FernetTokenEncryptor(bad_key)

        assert exc_info.value.context["key"] == "security.encryption_key"


class TestBuildEncryptor:
    def test_builds_from_key(self, key):
        assert isinstance(build_encryptor(key), FernetTokenEncryptor)

    @pytest.mark.parametrize("missing", [None, ""])
    def test_missing_key(self, missing):
        with pytest.raises(ConfigurationError) as exc_info:
            build_encryptor(missing)

        assert "TOKEN_ENCRYPTION_KEY" in exc_info.value.message
