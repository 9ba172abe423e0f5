"""Order synchronization tasks."""

import structlog

from order_sync_service.services.order_sync import OrderSyncService
from order_sync_service.services.windows import SyncWindow

logger = structlog.get_logger()


async def sync_orders_from_marketplace(
    service: OrderSyncService, window: SyncWindow = SyncWindow.TODAY
) -> dict:
    """
    Synchronize marketplace orders into the storefront.

    This task:
    1. Fetches marketplace orders created in ``window``
    2. Skips orders already tagged in the storefront
    3. Creates the remaining ones with their resolved line items

    Returns:
        dict: Summary of sync operation
    """
    logger.info("Scheduled order sync triggered", window=window.value)
    result = await service.run_sync(window)
    return result.to_dict()
