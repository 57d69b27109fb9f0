"""Service layer for public form token requests."""

import logging
from collections.abc import Mapping
from typing import Any

from auth.exceptions import FormTokenValidationError, InvalidFormToken
from auth.form_tokens import FormTokenIssuer, FormTokenVerifier
from auth.schemas import FormTokenClaims, IssuedFormToken

logger = logging.getLogger(__name__)


def _present(value: Any) -> bool:
    return value is not None and value != ""


def resolve_form_input(
    path_form: str | None,
    query: Mapping[str, Any],
    body: Mapping[str, Any] | None,
) -> Any:
    """
    Pick the requested form identifier.

    Precedence: route path, then query string, then body. Empty values are
    treated as missing so the configured default applies.
    """
    for value in (path_form, query.get("form"), (body or {}).get("form")):
        if _present(value):
            return value
    return None


def resolve_ttl_input(
    query: Mapping[str, Any],
    body: Mapping[str, Any] | None,
) -> Any:
    """
    Pick the requested ttl in minutes: body first, then query string.
    """
    for value in ((body or {}).get("ttl"), query.get("ttl")):
        if _present(value):
            return value
    return None


def issue_form_token(
    issuer: FormTokenIssuer,
    *,
    tenant_id: str | None,
    path_form: str | None = None,
    query: Mapping[str, Any] | None = None,
    body: Mapping[str, Any] | None = None,
) -> IssuedFormToken:
    """
    Issue a public form token from raw request inputs.

    Args:
        issuer: Token issuer
        tenant_id: Tenant of the current request
        path_form: `form` route parameter, if the route has one
        query: Query string parameters
        body: Parsed JSON body, if any

    Returns:
        IssuedFormToken

    Raises:
        FormTokenValidationError: If form or ttl are invalid
    """
    query = query or {}
    form = resolve_form_input(path_form, query, body)
    ttl = resolve_ttl_input(query, body)

    try:
        issued = issuer.issue(form=form, ttl=ttl, tenant_id=tenant_id)
    except FormTokenValidationError as e:
        logger.info("Rejected public form token request: %s", e)
        raise

    logger.info(
        "Issued public form token form=%s tenant=%s expires_at=%s",
        issued.claims.form,
        tenant_id,
        issued.expires_at.isoformat(),
    )
    return issued


def validate_form_token(
    verifier: FormTokenVerifier,
    *,
    token: str,
    tenant_id: str | None,
    form: str | None = None,
) -> FormTokenClaims:
    """
    Verify a public form token for the current tenant.

    An empty `form` means no form check.

    Raises:
        InvalidFormToken: If the token is rejected
    """
    try:
        claims = verifier.verify(token, expected_form=form or None, tenant_id=tenant_id)
    except InvalidFormToken as e:
        logger.info(
            "Rejected public form token: reason=%s tenant=%s",
            e.reason.value,
            tenant_id,
        )
        raise

    return claims
