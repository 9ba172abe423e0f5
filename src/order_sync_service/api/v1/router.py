"""API v1 router that aggregates all endpoint routers."""

from fastapi import APIRouter

from order_sync_service.api.v1 import health, sync

api_router = APIRouter()

# Include all routers
api_router.include_router(
    health.router,
    tags=["Health"],
)

api_router.include_router(
    sync.router,
    prefix="/sync",
    tags=["Sync"],
)
