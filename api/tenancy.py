"""Tenant resolution for public (unauthenticated) requests."""

from collections.abc import Callable, Mapping

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

TENANT_HEADER = "X-Tenant-Id"
TENANT_SLUG_HEADER = "X-Tenant-Slug"


class TenantResolver:
    """Resolves the current tenant from the request host or a trusted header."""

    def __init__(
        self,
        domains: Mapping[str, str],
        trust_header: bool = False,
        slugs: Mapping[str, str] | None = None,
    ):
        """
        Initialize tenant resolver.

        Args:
            domains: Host name -> tenant id
            trust_header: Honour the X-Tenant-Id request header (only behind a proxy that sets it)
            slugs: Tenant id -> human-readable slug
        """
        self.domains = {domain.lower(): tenant_id for domain, tenant_id in domains.items()}
        self.trust_header = trust_header
        self.slugs = dict(slugs or {})

    def resolve(self, host: str | None, header_value: str | None = None) -> str | None:
        """
        Return the tenant id for a request.

        Args:
            host: Value of the Host header, port included or not
            header_value: Value of the X-Tenant-Id request header, if any

        Returns:
            Tenant id, or None for the central (single-tenant) context
        """
        if self.trust_header and header_value:
            return header_value

        if not host:
            return None

        hostname = host.rsplit(":", 1)[0] if not host.endswith("]") else host
        return self.domains.get(hostname.lower())

    def resolve_request(self, request: Request) -> str | None:
        """Resolve the tenant for a FastAPI/Starlette request."""
        return self.resolve(
            request.headers.get("host"),
            request.headers.get(TENANT_HEADER),
        )

    def slug_for(self, tenant_id: str | None) -> str | None:
        """Slug of a tenant, or None when no slug is configured."""
        if tenant_id is None:
            return None
        return self.slugs.get(tenant_id)


class TenantHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds X-Tenant-Id and X-Tenant-Slug to responses when the request resolved to a tenant.

    Makes the active tenant visible in the browser and in curl output.
    Bodies and status codes are left untouched.
    """

    def __init__(self, app, resolver_factory: Callable[[], TenantResolver]):
        super().__init__(app)
        self.resolver_factory = resolver_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        resolver = self.resolver_factory()
        tenant_id = resolver.resolve_request(request)
        if tenant_id:
            response.headers[TENANT_HEADER] = tenant_id

        tenant_slug = resolver.slug_for(tenant_id)
        if tenant_slug:
            response.headers[TENANT_SLUG_HEADER] = tenant_slug

        return response
