"""Business logic services."""

from order_sync_service.services.invoicing import InvoiceIssuer
from order_sync_service.services.order_sync import OrderSyncService
from order_sync_service.services.shipment_sync import ShipmentSyncService
from order_sync_service.services.status_propagation import StatusPropagationService

__all__ = [
    "InvoiceIssuer",
    "OrderSyncService",
    "ShipmentSyncService",
    "StatusPropagationService",
]
