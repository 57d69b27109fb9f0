"""Signing secret derived from the application key."""

import base64
import binascii

BASE64_PREFIX = "base64:"


class AppKeySecretProvider:
    """Turns the configured ``APP_KEY`` into raw HMAC key bytes."""

    def __init__(self, app_key: str):
        """
        Decode the application key once.

        Args:
            app_key: Either ``base64:<payload>`` or a plain string

        Raises:
            ValueError: If the key is empty or the base64 payload cannot be decoded
        """
        self._secret = decode_app_key(app_key)

    def current(self) -> bytes:
        """Return the secret key bytes."""
        return self._secret


def decode_app_key(app_key: str) -> bytes:
    if app_key.startswith(BASE64_PREFIX):
        try:
            secret = base64.b64decode(app_key[len(BASE64_PREFIX):], validate=True)
        except binascii.Error as e:
            raise ValueError(f"APP_KEY has an invalid base64 payload: {e}") from e
    else:
        secret = app_key.encode("utf-8")

    if not secret:
        raise ValueError("APP_KEY must not be empty")
    return secret
