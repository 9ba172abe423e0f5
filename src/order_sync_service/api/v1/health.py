"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from order_sync_service import __version__
from order_sync_service.config import Settings, get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    timestamp: str
    integrations: dict[str, str]


def _configured(*values: str) -> str:
    return "configured" if all(values) else "missing"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns the service status, version and whether each platform has
    credentials configured. No platform is called.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc).isoformat(),
        integrations={
            "kuantokusta": _configured(
                settings.kuantokusta_api_url, settings.kuantokusta_api_key
            ),
            "shopify": _configured(
                settings.shopify_api_url, settings.shopify_access_token
            ),
            "moloni": _configured(
                settings.moloni_developer_id,
                settings.moloni_client_secret,
                settings.moloni_user,
                settings.moloni_password,
                settings.moloni_company_id,
            ),
        },
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Returns 200 if the service is running."""
    return {"status": "alive"}
