"""Health check endpoint."""

from fastapi import APIRouter, Depends

import config
from api.deps import get_current_tenant_id

router = APIRouter()


@router.get("/health")
async def health_check(tenant_id: str | None = Depends(get_current_tenant_id)):
    """
    Health check endpoint.

    Returns:
        dict: Status, environment and the tenant resolved for this request
    """
    return {
        "status": "ok",
        "env": config.settings.ENV,
        "tenant_id": tenant_id,
    }
