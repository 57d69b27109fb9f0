"""Errors raised while issuing or verifying public form tokens."""

from enum import Enum


class RejectionReason(str, Enum):
    """Why a candidate token was refused."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    TENANT_MISMATCH = "tenant_mismatch"
    FORM_MISMATCH = "form_mismatch"


# Malformed and forged tokens share one message on purpose
REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.MALFORMED: "Invalid token or incorrect signature.",
    RejectionReason.BAD_SIGNATURE: "Invalid token or incorrect signature.",
    RejectionReason.EXPIRED: "Token expired.",
    RejectionReason.TENANT_MISMATCH: "Token does not belong to the current tenant.",
    RejectionReason.FORM_MISMATCH: "Form does not match the token.",
}


class FormTokenError(Exception):
    """Base class for public form token errors."""


class FormTokenValidationError(FormTokenError):
    """Issuance input failed validation.

    Attributes:
        errors: Field name -> list of human-readable messages
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__(
            "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items())
        )


class InvalidFormToken(FormTokenError):
    """A token was rejected by the verifier."""

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        self.message = REJECTION_MESSAGES[reason]
        super().__init__(self.message)
