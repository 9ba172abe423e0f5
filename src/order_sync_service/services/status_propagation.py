"""Status propagation service.

Maps marketplace lifecycle states onto storefront actions and issues the
invoice for approved orders.
"""

import structlog

from order_sync_service.config import Settings
from order_sync_service.domain.models import (
    SourceOrder,
    SourceOrderState,
    StatusAction,
    StatusRunResult,
    StorefrontOrderStatus,
)
from order_sync_service.services.guard import RunGuard
from order_sync_service.services.interfaces import OrderSource, Storefront
from order_sync_service.services.invoicing import InvoiceIssuer
from order_sync_service.services.order_mapper import order_tag
from order_sync_service.services.windows import SyncWindow, resolve_window
from shared.constants import PAID_FINANCIAL_STATUSES

logger = structlog.get_logger()

STATE_ACTIONS: dict[SourceOrderState, StatusAction] = {
    SourceOrderState.APPROVED: StatusAction.MARK_PAID,
    SourceOrderState.WAITING_APPROVAL: StatusAction.MARK_PAID,
    SourceOrderState.WAITING_PAYMENT: StatusAction.NONE,
    SourceOrderState.CANCELED: StatusAction.CANCEL,
    SourceOrderState.SHIPPED: StatusAction.MARK_FULFILLED,
    SourceOrderState.OTHER: StatusAction.NONE,
}

# States that trigger invoice issuance
INVOICED_STATES = frozenset({SourceOrderState.APPROVED})


class StatusPropagationService:
    """Propagates marketplace state transitions to the storefront."""

    def __init__(
        self,
        source: OrderSource,
        storefront: Storefront,
        issuer: InvoiceIssuer,
        settings: Settings,
    ):
        self.source = source
        self.storefront = storefront
        self.issuer = issuer
        self.settings = settings
        self.guard = RunGuard("status_propagation")

    async def run_status_update(
        self, window: SyncWindow = SyncWindow.TODAY
    ) -> StatusRunResult | None:
        """Run one pass; returns None when a previous pass is still running."""
        async with self.guard.acquire() as acquired:
            if not acquired:
                return None
            return await self._run(window)

    async def _run(self, window: SyncWindow) -> StatusRunResult:
        time_range = resolve_window(window, self.settings.timezone)
        orders = await self.source.fetch_orders(
            time_range.start, time_range.end, time_range.label
        )
        result = StatusRunResult(window=window.value)
        logger.info("Starting status update", window=window.value, orders=len(orders))

        for order in orders:
            state = order.state
            if not order.order_id or state is None:
                continue

            result.processed += 1
            await self._propagate(order, state, result)

            if state in INVOICED_STATES:
                await self._invoice(order, result)

        logger.info("Status update completed", **result.to_dict())
        return result

    async def _propagate(
        self, order: SourceOrder, state: SourceOrderState, result: StatusRunResult
    ) -> None:
        try:
            action = await self.apply_state(order, state)
            if action is None:
                result.missing_orders.append(order.order_id)
            else:
                result.count_action(action)
        except Exception as e:
            logger.error(
                "Error updating order status",
                order_id=order.order_id,
                order_state=order.order_state,
                error=str(e),
            )
            result.failed.append(order.order_id)

    async def _invoice(self, order: SourceOrder, result: StatusRunResult) -> None:
        try:
            response = await self.issuer.issue_if_missing(order)
            if response is not None:
                result.invoices_issued.append(order.order_id)
        except Exception as e:
            logger.error("Error issuing invoice", order_id=order.order_id, error=str(e))
            if order.order_id not in result.failed:
                result.failed.append(order.order_id)

    async def apply_state(
        self, order: SourceOrder, state: SourceOrderState
    ) -> StatusAction | None:
        """Dispatch the storefront action for ``state``.

        Returns the action taken (NONE for no-ops), or None when the order is
        not in the storefront.
        """
        action = STATE_ACTIONS[state]
        if action is StatusAction.NONE:
            logger.info(
                "State requires no storefront update",
                order_id=order.order_id,
                order_state=order.order_state,
            )
            return action

        tag = order_tag(order.order_id, self.settings.order_tag_prefix)
        status = await self.storefront.query_order_status(tag)
        if status is None:
            logger.warning("Order not found in storefront", order_id=order.order_id, tag=tag)
            return None

        if action is StatusAction.MARK_PAID:
            return await self._mark_paid(order, status)
        if action is StatusAction.CANCEL:
            await self.storefront.cancel(status.id)
            return action
        return await self._mark_fulfilled(order, status)

    async def _mark_paid(
        self, order: SourceOrder, status: StorefrontOrderStatus
    ) -> StatusAction:
        financial_status = (status.financial_status or "").upper()
        if financial_status in PAID_FINANCIAL_STATUSES:
            logger.info(
                "Order already paid, nothing to do",
                order_id=order.order_id,
                financial_status=financial_status,
            )
            return StatusAction.NONE
        await self.storefront.mark_paid(status.id)
        return StatusAction.MARK_PAID

    async def _mark_fulfilled(
        self, order: SourceOrder, status: StorefrontOrderStatus
    ) -> StatusAction:
        if not status.fulfillment_order_id:
            logger.warning(
                "Order has no fulfillment order, skipping", order_id=order.order_id
            )
            return StatusAction.NONE
        await self.storefront.mark_fulfilled(status.fulfillment_order_id)
        return StatusAction.MARK_FULFILLED
