"""Main API router that includes versioned routers."""

from fastapi import APIRouter

from api.v1 import health, public_form_tokens

# Main API router
api_router = APIRouter()

# Include v1 routers
v1_router = APIRouter(prefix="/v1")
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(public_form_tokens.router, tags=["public-form-tokens"])

api_router.include_router(v1_router)
