"""Unit tests for single-order shipment sync."""

import pytest

from order_sync_service.domain.models import ShipmentSyncStatus, StorefrontOrderStatus
from order_sync_service.services.shipment_sync import ShipmentSyncService


def status(fulfillment_order_id: str | None = "gid://shopify/FulfillmentOrder/3") -> StorefrontOrderStatus:
    return StorefrontOrderStatus(
        id="gid://shopify/Order/1", name="#1", financial_status="PAID",
        fulfillment_order_id=fulfillment_order_id,
    )


@pytest.mark.asyncio
async def test_shipped_order_is_fulfilled(shipment_sync: ShipmentSyncService, source, storefront, order_factory) -> None:
    source.orders = [order_factory(order_id="1", state="In Transit")]
    storefront.statuses["KK-1"] = status()

    result = await shipment_sync.sync_shipment_from_source("1")

    assert result.status is ShipmentSyncStatus.FULFILLED
    assert storefront.called("mark_fulfilled") == ["gid://shopify/FulfillmentOrder/3"]


@pytest.mark.asyncio
async def test_unknown_order(shipment_sync: ShipmentSyncService) -> None:
    result = await shipment_sync.sync_shipment_from_source("missing")
    assert result.status is ShipmentSyncStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_not_shipped_is_skipped(shipment_sync: ShipmentSyncService, source, storefront, order_factory) -> None:
    source.orders = [order_factory(order_id="1", state="approved")]

    result = await shipment_sync.sync_shipment_from_source("1")

    assert result.status is ShipmentSyncStatus.SKIPPED
    assert storefront.calls == []


@pytest.mark.asyncio
async def test_missing_in_storefront(shipment_sync: ShipmentSyncService, source, order_factory) -> None:
    source.orders = [order_factory(order_id="1", state="shipped")]

    result = await shipment_sync.sync_shipment_from_source("1")

    assert result.status is ShipmentSyncStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_no_fulfillment_order(shipment_sync: ShipmentSyncService, source, storefront, order_factory) -> None:
    source.orders = [order_factory(order_id="1", state="shipped")]
    storefront.statuses["KK-1"] = status(fulfillment_order_id=None)

    result = await shipment_sync.sync_shipment_from_source("1")

    assert result.status is ShipmentSyncStatus.SKIPPED
    assert storefront.called("mark_fulfilled") == []
