"""On-demand shipment sync for a single marketplace order."""

import structlog

from order_sync_service.config import Settings
from order_sync_service.domain.models import (
    ShipmentSyncResult,
    ShipmentSyncStatus,
    SourceOrderState,
)
from order_sync_service.services.interfaces import OrderSource, Storefront
from order_sync_service.services.order_mapper import order_tag

logger = structlog.get_logger()


class ShipmentSyncService:
    def __init__(self, source: OrderSource, storefront: Storefront, settings: Settings):
        self.source = source
        self.storefront = storefront
        self.settings = settings

    async def sync_shipment_from_source(self, order_id: str) -> ShipmentSyncResult:
        """Mark the storefront order fulfilled when the marketplace shipped it."""
        order = await self.source.fetch_order(order_id)
        if order is None:
            return ShipmentSyncResult(
                order_id, ShipmentSyncStatus.NOT_FOUND, "Order not found in marketplace"
            )

        if order.state is not SourceOrderState.SHIPPED:
            return ShipmentSyncResult(
                order_id,
                ShipmentSyncStatus.SKIPPED,
                f"Order is not shipped (state: {order.order_state or 'unknown'})",
            )

        tag = order_tag(order_id, self.settings.order_tag_prefix)
        status = await self.storefront.query_order_status(tag)
        if status is None:
            logger.warning("Order not found in storefront", order_id=order_id, tag=tag)
            return ShipmentSyncResult(
                order_id, ShipmentSyncStatus.NOT_FOUND, "Order not found in storefront"
            )

        if not status.fulfillment_order_id:
            logger.warning("Order has no fulfillment order, skipping", order_id=order_id)
            return ShipmentSyncResult(
                order_id, ShipmentSyncStatus.SKIPPED, "No fulfillment order available"
            )

        await self.storefront.mark_fulfilled(status.fulfillment_order_id)
        logger.info("Shipment synced", order_id=order_id)
        return ShipmentSyncResult(
            order_id,
            ShipmentSyncStatus.FULFILLED,
            "Order marked as fulfilled",
            fulfillment_order_id=status.fulfillment_order_id,
        )
