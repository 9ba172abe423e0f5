"""Order status propagation tasks."""

import structlog

from order_sync_service.services.status_propagation import StatusPropagationService
from order_sync_service.services.windows import SyncWindow

logger = structlog.get_logger()


async def update_order_status_from_marketplace(
    service: StatusPropagationService, window: SyncWindow = SyncWindow.TODAY
) -> dict:
    """
    Propagate marketplace order states to the storefront and issue invoices.

    Returns:
        dict: Summary of the pass, or a ``skipped`` marker when a previous
        pass was still running
    """
    logger.info("Scheduled status update triggered", window=window.value)
    result = await service.run_status_update(window)
    if result is None:
        return {"window": window.value, "skipped": True}
    return result.to_dict()
