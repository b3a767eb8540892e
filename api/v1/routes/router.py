from fastapi import APIRouter, Depends

from api.v1.routes import health
from packages.billing.dependencies import require_service_key
from packages.billing.routes import billing, webhooks

api_router = APIRouter()

# Health check (no auth required)
api_router.include_router(health.router, prefix="/health", tags=["health"])

# Webhooks (no auth - signature verified internally)
api_router.include_router(webhooks.router, tags=["webhooks"])

# Entitlement and administrative routes (service API key)
api_router.include_router(
    billing.router,
    prefix="/billing",
    tags=["billing"],
    dependencies=[Depends(require_service_key)],
)
