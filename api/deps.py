"""FastAPI dependencies for public form tokens and tenancy."""

from functools import lru_cache

from fastapi import Depends, Request

import config
from api.tenancy import TenantResolver
from auth.app_key import AppKeySecretProvider
from auth.form_tokens import Clock, FormTokenIssuer, FormTokenVerifier, system_clock
from auth.schemas import FormTokenConfig


@lru_cache
def get_form_token_config() -> FormTokenConfig:
    """
    Build the immutable token configuration from settings.

    Cached: the secret is decoded once per process.

    Raises:
        ValueError: If APP_KEY cannot be decoded
    """
    secret_provider = AppKeySecretProvider(config.settings.APP_KEY)
    return FormTokenConfig(
        secret=secret_provider.current(),
        default_form=config.settings.PUBLIC_FORM_DEFAULT,
        default_ttl_minutes=config.settings.PUBLIC_FORM_DEFAULT_TTL,
    )


@lru_cache
def get_tenant_resolver() -> TenantResolver:
    """Tenant resolver configured from settings."""
    return TenantResolver(
        config.settings.TENANT_DOMAINS,
        trust_header=config.settings.TRUST_TENANT_HEADER,
        slugs=config.settings.TENANT_SLUGS,
    )


def get_clock() -> Clock:
    """Clock used to stamp and check tokens."""
    return system_clock


def get_form_token_issuer(
    token_config: FormTokenConfig = Depends(get_form_token_config),
    clock: Clock = Depends(get_clock),
) -> FormTokenIssuer:
    return FormTokenIssuer(token_config, clock=clock)


def get_form_token_verifier(
    token_config: FormTokenConfig = Depends(get_form_token_config),
    clock: Clock = Depends(get_clock),
) -> FormTokenVerifier:
    return FormTokenVerifier(token_config, clock=clock)


def get_current_tenant_id(
    request: Request,
    resolver: TenantResolver = Depends(get_tenant_resolver),
) -> str | None:
    """
    Dependency to get the tenant of the current request.

    Returns:
        Tenant id, or None when the request is not in a tenant context
    """
    return resolver.resolve_request(request)
