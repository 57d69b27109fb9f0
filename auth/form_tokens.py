"""Public form token issuing and verification.

A token is ``base64url(payload_json) "." base64url(HMAC-SHA256(secret, payload_b64))``
with padding stripped from both segments. Tokens are stateless: nothing is
stored server side and expiry is the only end of life. The nonce makes otherwise
identical tokens distinct but is not tracked, so a token can be replayed until
it expires.
"""

import binascii
import hashlib
import hmac
import json
import time
from datetime import datetime, UTC
from typing import Any, Callable
from uuid import uuid4

from jose.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, Field, StrictStr, ValidationError, field_validator

from auth.exceptions import FormTokenValidationError, InvalidFormToken, RejectionReason
from auth.schemas import FormTokenClaims, FormTokenConfig, IssuedFormToken

Clock = Callable[[], int]

FORM_MAX_LENGTH = 100
TTL_MIN_MINUTES = 1
TTL_MAX_MINUTES = 1440


def system_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


class _IssueInput(BaseModel):
    """Caller-supplied issuance parameters, before defaults are applied."""

    form: StrictStr | None = Field(default=None, max_length=FORM_MAX_LENGTH)
    ttl: int | None = Field(default=None, ge=TTL_MIN_MINUTES, le=TTL_MAX_MINUTES)

    @field_validator("form", "ttl", mode="before")
    @classmethod
    def empty_as_missing(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("ttl", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("The ttl field must be an integer.")
        return value


def _validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        errors.setdefault(field, []).append(error["msg"])
    return errors


class _FormTokenSigner:
    """Holds the signing key and clock shared by issuer and verifier."""

    def __init__(self, config: FormTokenConfig, clock: Clock = system_clock):
        self.config = config
        self.clock = clock

    def _signature(self, payload_segment: bytes) -> bytes:
        digest = hmac.new(self.config.secret, payload_segment, hashlib.sha256).digest()
        return base64url_encode(digest)


class FormTokenIssuer(_FormTokenSigner):
    """Issues signed, tenant-scoped, time-bounded public form tokens."""

    def issue(
        self,
        form: Any = None,
        ttl: Any = None,
        tenant_id: str | None = None,
    ) -> IssuedFormToken:
        """
        Issue a token for a public form.

        Args:
            form: Form identifier (at most 100 chars); configured default when absent
            ttl: Lifetime in minutes, integer in [1, 1440]; configured default when absent
            tenant_id: Tenant the token is scoped to (None outside tenant context)

        Returns:
            IssuedFormToken with the token string and its expiry

        Raises:
            FormTokenValidationError: If form or ttl are invalid
        """
        try:
            params = _IssueInput(form=form, ttl=ttl)
        except ValidationError as e:
            raise FormTokenValidationError(_validation_errors(e)) from e

        resolved_form = params.form if params.form is not None else self.config.default_form
        ttl_minutes = params.ttl if params.ttl is not None else self.config.default_ttl_minutes

        now = self.clock()
        claims = FormTokenClaims(
            form=resolved_form,
            tenant_id=tenant_id,
            issued_at=now,
            expires_at=now + ttl_minutes * 60,
            nonce=str(uuid4()),
        )

        # Signed bytes are the serialized bytes; the verifier never re-serializes
        payload_json = json.dumps(claims.to_wire(), separators=(",", ":"))
        payload_segment = base64url_encode(payload_json.encode("utf-8"))
        token = b".".join([payload_segment, self._signature(payload_segment)])

        return IssuedFormToken(
            token=token.decode("ascii"),
            expires_at=datetime.fromtimestamp(claims.expires_at, UTC),
            ttl_minutes=ttl_minutes,
            claims=claims,
        )


class FormTokenVerifier(_FormTokenSigner):
    """Verifies public form tokens issued with the same secret."""

    def verify(
        self,
        token: str,
        expected_form: str | None = None,
        tenant_id: str | None = None,
    ) -> FormTokenClaims:
        """
        Verify a token and return its claims.

        Checks run in order and stop at the first failure: shape, signature,
        payload decoding, expiry, tenant, form.

        Args:
            token: Token string from the client
            expected_form: Form the token must have been issued for, if given
            tenant_id: Tenant of the current request (None outside tenant context)

        Returns:
            FormTokenClaims of the verified token

        Raises:
            InvalidFormToken: With the reason for the rejection
        """
        payload_segment, separator, signature_segment = token.partition(".")
        if not separator or not payload_segment or not signature_segment:
            raise InvalidFormToken(RejectionReason.MALFORMED)

        # Both segments are base64url, so anything outside ASCII cannot be a token
        try:
            payload_bytes = payload_segment.encode("ascii")
            signature_bytes = signature_segment.encode("ascii")
        except UnicodeEncodeError as e:
            raise InvalidFormToken(RejectionReason.MALFORMED) from e

        expected_signature = self._signature(payload_bytes)
        if not hmac.compare_digest(expected_signature, signature_bytes):
            raise InvalidFormToken(RejectionReason.BAD_SIGNATURE)

        claims = self._decode_claims(payload_bytes)

        if self.clock() > claims.expires_at:
            raise InvalidFormToken(RejectionReason.EXPIRED)

        if claims.tenant_id != tenant_id:
            raise InvalidFormToken(RejectionReason.TENANT_MISMATCH)

        if expected_form is not None and claims.form != expected_form:
            raise InvalidFormToken(RejectionReason.FORM_MISMATCH)

        return claims

    @staticmethod
    def _decode_claims(payload_segment: bytes) -> FormTokenClaims:
        try:
            data = json.loads(base64url_decode(payload_segment))
            return FormTokenClaims.model_validate(data)
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise InvalidFormToken(RejectionReason.MALFORMED) from e
