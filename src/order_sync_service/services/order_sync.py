"""Order synchronization service.

Pulls marketplace orders for a window and creates the missing ones in the
storefront. Deduplication relies solely on the tag-based existence check:
two passes racing between the check and the create can both create the
order. There is no local state to fall back on.
"""

import structlog

from order_sync_service.config import Settings
from order_sync_service.domain.models import (
    DestinationLineItem,
    RunStatus,
    SourceOrder,
    SyncRunResult,
)
from order_sync_service.services.guard import RunGuard
from order_sync_service.services.interfaces import OrderSource, Storefront
from order_sync_service.services.order_mapper import (
    format_money,
    map_to_destination,
    order_tag,
)
from order_sync_service.services.windows import SyncWindow, resolve_window

logger = structlog.get_logger()


def parse_item_id(item_id: str) -> int:
    """Extract the numeric id from a storefront identifier.

    Accepts plain numbers and GraphQL global ids such as
    ``gid://shopify/ProductVariant/123``. Raises ValueError otherwise.
    """
    tail = str(item_id).rsplit("/", 1)[-1]
    if not tail.isdigit():
        raise ValueError(f"Item id is not numeric: {item_id!r}")
    return int(tail)


class OrderSyncService:
    """Service for synchronizing marketplace orders into the storefront."""

    def __init__(self, source: OrderSource, storefront: Storefront, settings: Settings):
        self.source = source
        self.storefront = storefront
        self.settings = settings
        self.guard = RunGuard("order_sync")

    async def run_sync(self, window: SyncWindow = SyncWindow.TODAY) -> SyncRunResult:
        """
        Run one synchronization pass over ``window``.

        Args:
            window: Which range of marketplace orders to consider

        Returns:
            SyncRunResult with status EMPTY when nothing was fetched, BUSY when
            another pass was still running, OK otherwise
        """
        async with self.guard.acquire() as acquired:
            if not acquired:
                return SyncRunResult(status=RunStatus.BUSY, window=window.value)
            return await self._run(window)

    async def _run(self, window: SyncWindow) -> SyncRunResult:
        time_range = resolve_window(window, self.settings.timezone)
        orders = await self.source.fetch_orders(
            time_range.start, time_range.end, time_range.label
        )

        if not orders:
            logger.warning("No marketplace orders found", window=window.value)
            return SyncRunResult(status=RunStatus.EMPTY, window=window.value)

        logger.info("Starting order sync", window=window.value, orders=len(orders))
        result = SyncRunResult(status=RunStatus.OK, window=window.value)

        for order in orders:
            if not order.products:
                logger.warning(
                    "Order has no products, ignoring", order_id=order.order_id or None
                )
                continue

            try:
                await self._sync_order(order, result)
            except Exception as e:
                logger.error(
                    "Error syncing order",
                    order_id=order.order_id,
                    error=str(e),
                )
                result.failed.append(order.order_id)

        logger.info("Order sync completed", **result.to_dict())
        return result

    async def _sync_order(self, order: SourceOrder, result: SyncRunResult) -> None:
        tag = order_tag(order.order_id, self.settings.order_tag_prefix)

        if await self.storefront.order_exists_by_tag(tag):
            logger.info("Order already exists in storefront", order_id=order.order_id, tag=tag)
            result.duplicated.append(order.order_id)
            return

        line_items = await self._resolve_line_items(order, result)
        if not line_items:
            logger.warning(
                "No products resolved for order, skipping", order_id=order.order_id
            )
            result.skipped.append(order.order_id)
            return

        destination = map_to_destination(
            order,
            tag_prefix=self.settings.order_tag_prefix,
            source_marker=self.settings.source_marker_tag,
            placeholder_domain=self.settings.placeholder_email_domain,
            currency=self.settings.shopify_currency,
        )
        destination.line_items = line_items

        storefront_id = await self.storefront.create_order(destination)
        result.synced += 1
        logger.info(
            "Order synced to storefront",
            order_id=order.order_id,
            storefront_id=storefront_id,
            line_items=len(line_items),
        )

    async def _resolve_line_items(
        self, order: SourceOrder, result: SyncRunResult
    ) -> list[DestinationLineItem]:
        resolved: list[DestinationLineItem] = []

        for product in order.products:
            sku = product.sku
            item = await self.storefront.find_item_by_sku(sku) if sku else None
            if item is None:
                result.not_found_skus.append(sku or product.name)
                continue

            try:
                variant_id = parse_item_id(item.item_id)
            except ValueError:
                logger.warning(
                    "Invalid storefront item id",
                    order_id=order.order_id,
                    sku=sku,
                    item_id=item.item_id,
                )
                result.not_found_skus.append(sku)
                continue

            resolved.append(
                DestinationLineItem(
                    variant_id=variant_id,
                    quantity=product.quantity,
                    price=format_money(product.price),
                    title=item.display_name,
                    sku=sku,
                )
            )

        return resolved
