"""
Encryption gateway for token storage.

The store only needs a ``Callable[[str], str]`` that turns a plaintext token
into ciphertext; it never decrypts. ``FernetTokenEncryptor`` is the default
gateway and also offers ``decrypt`` for consumers that hand tokens to AI
providers.
"""

from typing import Callable, Optional

from cryptography.fernet import Fernet, InvalidToken

from ..exceptions import ConfigurationError

TokenEncryptor = Callable[[str], str]


class FernetTokenEncryptor:
    """Symmetric token encryption with a Fernet key."""

    def __init__(self, key: str):
        try:
            self._fernet = Fernet(key.encode("utf-8") if isinstance(key, str) else key)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                "Token encryption key is not a valid Fernet key",
                key="security.encryption_key",
                cause=e,
            )

    def __call__(self, plaintext: str) -> str:
        return self.encrypt(plaintext)

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> Optional[str]:
        """Return the plaintext, or ``None`` if the key does not match."""
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except InvalidToken:
            return None

    @staticmethod
    def generate_key() -> str:
        """New random key suitable for ``security.encryption_key``."""
        return Fernet.generate_key().decode("ascii")


def build_encryptor(encryption_key: Optional[str]) -> FernetTokenEncryptor:
    """Build the default gateway, failing fast when no key is configured."""
    if not encryption_key:
        raise ConfigurationError(
            "No token encryption key configured (TOKEN_ENCRYPTION_KEY)",
            key="security.encryption_key",
        )
    return FernetTokenEncryptor(encryption_key)
