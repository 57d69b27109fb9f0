"""Public form token endpoints (no authentication)."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from api.deps import (
    get_current_tenant_id,
    get_form_token_issuer,
    get_form_token_verifier,
)
from auth.exceptions import FormTokenValidationError, InvalidFormToken
from auth.form_tokens import FORM_MAX_LENGTH, FormTokenIssuer, FormTokenVerifier
from services import public_form_tokens_service

router = APIRouter()


class FormTokenResponse(BaseModel):
    """Response schema for an issued form token."""

    token: str
    expires_at: datetime
    ttl_minutes: int


class FormTokenValidationRequest(BaseModel):
    """Request schema for form token validation."""

    token: str
    form: str | None = Field(default=None, max_length=FORM_MAX_LENGTH)


class FormTokenValidationResponse(BaseModel):
    """Response schema for a valid form token."""

    valid: bool = True
    payload: dict[str, Any]


class FormTokenRejectionResponse(BaseModel):
    """Response schema for a rejected form token."""

    valid: bool = False
    message: str


def _issue(
    request: Request,
    issuer: FormTokenIssuer,
    tenant_id: str | None,
    body: dict[str, Any] | None,
    path_form: str | None = None,
):
    try:
        issued = public_form_tokens_service.issue_form_token(
            issuer,
            tenant_id=tenant_id,
            path_form=path_form,
            query=request.query_params,
            body=body,
        )
    except FormTokenValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"message": "Validation error", "errors": e.errors},
        )

    return FormTokenResponse(
        token=issued.token,
        expires_at=issued.expires_at,
        ttl_minutes=issued.ttl_minutes,
    )


# Registered before /public/form-token/{form} so "validate" is not taken as a form name
@router.post(
    "/public/form-token/validate",
    response_model=FormTokenValidationResponse,
    responses={422: {"model": FormTokenRejectionResponse}},
)
async def validate_form_token(
    payload: FormTokenValidationRequest,
    verifier: FormTokenVerifier = Depends(get_form_token_verifier),
    tenant_id: str | None = Depends(get_current_tenant_id),
):
    """
    Validate a public form token.

    The token must carry a valid signature, be unexpired, belong to the
    current tenant and, when `form` is given, have been issued for that form.

    Returns:
        FormTokenValidationResponse: Claims if valid, 422 FormTokenRejectionResponse otherwise
    """
    try:
        claims = public_form_tokens_service.validate_form_token(
            verifier,
            token=payload.token,
            tenant_id=tenant_id,
            form=payload.form,
        )
    except InvalidFormToken as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=FormTokenRejectionResponse(message=e.message).model_dump(),
        )

    return FormTokenValidationResponse(payload=claims.to_wire())


@router.post("/public/form-token", response_model=FormTokenResponse)
async def generate_form_token(
    request: Request,
    body: dict[str, Any] | None = Body(None),
    issuer: FormTokenIssuer = Depends(get_form_token_issuer),
    tenant_id: str | None = Depends(get_current_tenant_id),
):
    """
    Issue a signed token for a public form.

    `form` is read from the query string, then the JSON body; without one the
    configured default is used. `ttl` (minutes, 1-1440, default 30) is read
    from the body, then the query string. The body may be omitted.

    Returns:
        FormTokenResponse: Token, expiry instant and ttl
    """
    return _issue(request, issuer, tenant_id, body)


@router.post("/public/form-token/{form}", response_model=FormTokenResponse)
async def generate_form_token_for(
    form: str,
    request: Request,
    body: dict[str, Any] | None = Body(None),
    issuer: FormTokenIssuer = Depends(get_form_token_issuer),
    tenant_id: str | None = Depends(get_current_tenant_id),
):
    """
    Issue a signed token for the form named in the path.

    Allows a POST without body. The path value wins over query and body.
    """
    return _issue(request, issuer, tenant_id, body, path_form=form)
