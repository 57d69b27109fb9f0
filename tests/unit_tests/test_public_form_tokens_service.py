"""Unit tests for the public form token service layer.

These tests verify input precedence and that rejections are logged without
leaking the token.
"""

import logging

import pytest

from auth.exceptions import FormTokenValidationError, InvalidFormToken, RejectionReason
from services.public_form_tokens_service import (
    issue_form_token,
    resolve_form_input,
    resolve_ttl_input,
    validate_form_token,
)


@pytest.mark.parametrize(
    "path_form, query, body, expected",
    [
        ("path", {"form": "query"}, {"form": "body"}, "path"),
        (None, {"form": "query"}, {"form": "body"}, "query"),
        (None, {}, {"form": "body"}, "body"),
        ("", {"form": ""}, {"form": "body"}, "body"),
        (None, {}, None, None),
        (None, {}, {}, None),
    ],
)
def test_resolve_form_precedence(path_form, query, body, expected):
    assert resolve_form_input(path_form, query, body) == expected


@pytest.mark.parametrize(
    "query, body, expected",
    [
        ({"ttl": "5"}, {"ttl": 10}, 10),
        ({"ttl": "5"}, {}, "5"),
        ({"ttl": "5"}, None, "5"),
        ({}, {"ttl": ""}, None),
        ({}, None, None),
    ],
)
def test_resolve_ttl_precedence(query, body, expected):
    assert resolve_ttl_input(query, body) == expected


def test_issue_form_token_applies_precedence(issuer):
    issued = issue_form_token(
        issuer,
        tenant_id="tenant-a",
        path_form="enrollment",
        query={"form": "contact", "ttl": "5"},
        body={"ttl": 12},
    )

    assert issued.claims.form == "enrollment"
    assert issued.claims.tenant_id == "tenant-a"
    assert issued.ttl_minutes == 12


def test_issue_form_token_logs_issuance(issuer, caplog):
    with caplog.at_level(logging.INFO, logger="services.public_form_tokens_service"):
        issued = issue_form_token(issuer, tenant_id="tenant-a", query={"form": "contact"})

    assert "form=contact" in caplog.text
    assert "tenant=tenant-a" in caplog.text
    assert issued.token not in caplog.text


def test_issue_form_token_propagates_validation_error(issuer):
    with pytest.raises(FormTokenValidationError) as exc_info:
        issue_form_token(issuer, tenant_id=None, body={"ttl": 0})

    assert "ttl" in exc_info.value.errors


def test_validate_form_token_empty_form_skips_check(issuer, verifier):
    token = issuer.issue(form="enrollment").token

    claims = validate_form_token(verifier, token=token, tenant_id=None, form="")

    assert claims.form == "enrollment"


def test_validate_form_token_logs_reason_not_token(issuer, verifier, caplog):
    token = issuer.issue(form="enrollment", tenant_id="tenant-a").token

    with caplog.at_level(logging.INFO, logger="services.public_form_tokens_service"):
        with pytest.raises(InvalidFormToken) as exc_info:
            validate_form_token(verifier, token=token, tenant_id="tenant-b")

    assert exc_info.value.reason == RejectionReason.TENANT_MISMATCH
    assert "reason=tenant_mismatch" in caplog.text
    assert token not in caplog.text
