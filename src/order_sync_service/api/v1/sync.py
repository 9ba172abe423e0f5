"""Manual trigger endpoints for the synchronization engines."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from order_sync_service.dependencies import (
    get_order_sync_service,
    get_shipment_sync_service,
    get_status_propagation_service,
)
from order_sync_service.domain.models import RunStatus, ShipmentSyncStatus
from order_sync_service.services.order_sync import OrderSyncService
from order_sync_service.services.shipment_sync import ShipmentSyncService
from order_sync_service.services.status_propagation import StatusPropagationService
from order_sync_service.services.windows import SyncWindow

logger = structlog.get_logger()

router = APIRouter()


class SyncRunResponse(BaseModel):
    """Summary of an order synchronization pass."""

    status: str
    window: str
    message: str
    synced: int
    duplicated: list[str]
    not_found_skus: list[str]
    skipped: list[str]
    failed: list[str]


class StatusRunResponse(BaseModel):
    """Summary of a status propagation pass."""

    window: str
    processed: int
    actions: dict[str, int]
    invoices_issued: list[str]
    missing_orders: list[str]
    failed: list[str]


class ShipmentSyncResponse(BaseModel):
    order_id: str
    status: str
    message: str
    fulfillment_order_id: str | None = None


@router.post(
    "/orders",
    response_model=SyncRunResponse,
    responses={204: {"description": "No orders in window"}, 409: {}, 423: {}},
)
async def sync_orders(
    window: Annotated[SyncWindow, Query(description="Order creation window")] = SyncWindow.TODAY,
    service: OrderSyncService = Depends(get_order_sync_service),
) -> Response:
    """
    Trigger an order synchronization pass.

    - **204** when the marketplace returned no orders
    - **409** when some orders already existed in the storefront
    - **423** when a pass is already running
    """
    result = await service.run_sync(window)

    if result.status is RunStatus.EMPTY:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if result.status is RunStatus.BUSY:
        status_code = status.HTTP_423_LOCKED
    elif result.duplicated:
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_200_OK

    body = SyncRunResponse(**result.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post(
    "/order-status",
    response_model=StatusRunResponse,
    responses={423: {"description": "A status update is already running"}},
)
async def update_order_status(
    window: Annotated[SyncWindow, Query(description="Order creation window")] = SyncWindow.TODAY,
    service: StatusPropagationService = Depends(get_status_propagation_service),
) -> Response:
    """Propagate marketplace states to the storefront and issue pending invoices."""
    result = await service.run_status_update(window)
    if result is None:
        return JSONResponse(
            status_code=status.HTTP_423_LOCKED,
            content={"detail": "A status update is already running"},
        )
    return JSONResponse(content=StatusRunResponse(**result.to_dict()).model_dump())


@router.post(
    "/shipments/{order_id}",
    response_model=ShipmentSyncResponse,
    responses={404: {"description": "Order not found"}},
)
async def sync_shipment(
    order_id: str,
    service: ShipmentSyncService = Depends(get_shipment_sync_service),
) -> Response:
    """Mark the storefront order fulfilled if the marketplace shipped it."""
    result = await service.sync_shipment_from_source(order_id)
    status_code = (
        status.HTTP_404_NOT_FOUND
        if result.status is ShipmentSyncStatus.NOT_FOUND
        else status.HTTP_200_OK
    )
    return JSONResponse(
        status_code=status_code, content=ShipmentSyncResponse(**result.to_dict()).model_dump()
    )
