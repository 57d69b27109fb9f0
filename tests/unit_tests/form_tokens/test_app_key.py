"""Unit tests for APP_KEY decoding."""

import base64

import pytest

from auth.app_key import AppKeySecretProvider, decode_app_key


def test_base64_prefixed_key_is_decoded():
    raw = bytes(range(32))
    app_key = "base64:" + base64.b64encode(raw).decode("ascii")

    assert AppKeySecretProvider(app_key).current() == raw


def test_plain_key_uses_utf8_bytes():
    assert AppKeySecretProvider("dev-secret").current() == b"dev-secret"
    assert decode_app_key("chave-secreta-ç") == "chave-secreta-ç".encode("utf-8")


def test_prefix_is_case_sensitive():
    """Test: Only the exact 'base64:' prefix triggers decoding."""
    assert decode_app_key("BASE64:abcd") == b"BASE64:abcd"


@pytest.mark.parametrize("app_key", ["base64:not*valid*base64", "base64:abc"])
def test_invalid_base64_payload_raises(app_key):
    with pytest.raises(ValueError, match="invalid base64"):
        decode_app_key(app_key)


@pytest.mark.parametrize("app_key", ["", "base64:"])
def test_empty_key_raises(app_key):
    with pytest.raises(ValueError, match="must not be empty"):
        AppKeySecretProvider(app_key)
