"""Fernet-based field encryption for weight readings at rest.

The measured value of each reading is encrypted before it is written to
SQLite. Sample timestamps stay in clear text so the store can answer
range queries without decrypting every row.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""


class FieldEncryptor:
    """Encrypts and decrypts JSON-serializable payloads with Fernet.

    Usage::

        encryptor = FieldEncryptor(key="...")
        token = encryptor.encrypt_weight(72.4)
        encryptor.decrypt_weight(token)  # 72.4
    """

    def __init__(self, key: str) -> None:
        """Initialize with a Fernet key.

        Args:
            key: A valid Fernet key string. Generate with
                 :meth:`generate_key`.

        Raises:
            EncryptionError: If the key is empty or invalid.
        """
        if not key or not key.strip():
            raise EncryptionError("Encryption key must not be empty")
        try:
            self._fernet = Fernet(key.encode())
        except ValueError as exc:
            raise EncryptionError(f"Invalid encryption key: {exc}") from exc

    def encrypt(self, data: Any) -> str:
        """Encrypt a JSON-serializable value to a Fernet token string.

        Raises:
            EncryptionError: If serialization fails.
        """
        try:
            plaintext = json.dumps(data, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise EncryptionError(f"Encryption failed: {exc}") from exc
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str) -> Any:
        """Decrypt a Fernet token string back to a Python object.

        Raises:
            EncryptionError: If the token is invalid or decryption fails.
        """
        if not token:
            raise EncryptionError("Decryption failed: empty token")
        try:
            plaintext = self._fernet.decrypt(token.encode("utf-8"))
            return json.loads(plaintext)
        except InvalidToken as exc:
            raise EncryptionError("Decryption failed: invalid token or wrong key") from exc
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise EncryptionError(f"Decryption failed: {exc}") from exc

    def encrypt_weight(self, value_kg: float) -> str:
        """Encrypt a single weight value (kilograms)."""
        return self.encrypt({"kg": float(value_kg)})

    def decrypt_weight(self, token: str) -> float:
        """Decrypt a token produced by :meth:`encrypt_weight`.

        Raises:
            EncryptionError: If the payload is not a finite weight.
        """
        payload = self.decrypt(token)
        if not isinstance(payload, dict) or "kg" not in payload:
            raise EncryptionError("Decryption failed: payload is not a weight reading")
        value = payload["kg"]
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise EncryptionError("Decryption failed: weight value is not a finite number")
        return float(value)

    @staticmethod
    def generate_key() -> str:
        """Generate a new Fernet key.

        Returns:
            A URL-safe base64-encoded 32-byte key as a string.
        """
        return Fernet.generate_key().decode("utf-8")
