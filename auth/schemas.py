"""Public form token schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator


class FormTokenClaims(BaseModel):
    """Signed payload of a public form token.

    Field aliases are the wire keys; serialize with ``by_alias=True``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    form: StrictStr
    tenant_id: StrictStr | None  # None in single-tenant deployments
    issued_at: StrictInt = Field(alias="iat")
    expires_at: StrictInt = Field(alias="exp")
    nonce: StrictStr  # UUID4, not checked for reuse

    @model_validator(mode="after")
    def check_window(self) -> "FormTokenClaims":
        if self.issued_at > self.expires_at:
            raise ValueError("iat must not be later than exp")
        return self

    def to_wire(self) -> dict:
        """Claims as the JSON object carried inside the token."""
        return self.model_dump(by_alias=True)


class FormTokenConfig(BaseModel):
    """Immutable configuration shared by the issuer and the verifier."""

    model_config = ConfigDict(frozen=True)

    secret: bytes
    default_form: str = "generic"
    default_ttl_minutes: int = Field(default=30, ge=1, le=1440)


class IssuedFormToken(BaseModel):
    """Result of issuing a token."""

    token: str
    expires_at: datetime  # UTC
    ttl_minutes: int
    claims: FormTokenClaims
