"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
import logging_config
from api import router as api_router
from api.deps import get_form_token_config, get_tenant_resolver
from api.tenancy import TenantHeadersMiddleware, TenantResolver

# Setup logging
logging_config.setup_logging(config.settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup: fail fast on an undecodable APP_KEY
    get_form_token_config()
    yield


# Create FastAPI app
app = FastAPI(
    title="Public Form Token API",
    description="Signed, tenant-scoped tokens for anonymous public forms",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Tenant-Id", "X-Tenant-Slug"],
)


def current_tenant_resolver() -> TenantResolver:
    """Tenant resolver for the middleware, honouring dependency overrides."""
    return app.dependency_overrides.get(get_tenant_resolver, get_tenant_resolver)()


# Echo the resolved tenant on every response
app.add_middleware(TenantHeadersMiddleware, resolver_factory=current_tenant_resolver)

# Include API router
app.include_router(api_router.api_router, prefix=config.settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Public Form Token API",
        "version": "0.1.0",
    }
