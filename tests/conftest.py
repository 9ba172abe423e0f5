"""Pytest configuration and fixtures."""

from datetime import datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient

from order_sync_service.config import Settings, get_settings
from order_sync_service.dependencies import (
    get_order_sync_service,
    get_shipment_sync_service,
    get_status_propagation_service,
)
from order_sync_service.domain.models import (
    CatalogItem,
    DestinationOrder,
    InvoicePayload,
    PartyDetails,
    SourceOrder,
    StorefrontItem,
    StorefrontOrderStatus,
)
from order_sync_service.main import create_app
from order_sync_service.services import (
    InvoiceIssuer,
    OrderSyncService,
    ShipmentSyncService,
    StatusPropagationService,
)


class FakeOrderSource:
    """In-memory marketplace."""

    def __init__(self, orders: list[SourceOrder] | None = None):
        self.orders = orders or []
        self.fetch_calls: list[tuple[datetime, datetime, str]] = []

    async def fetch_orders(self, start: datetime, end: datetime, label: str) -> list[SourceOrder]:
        self.fetch_calls.append((start, end, label))
        return list(self.orders)

    async def fetch_order(self, order_id: str) -> SourceOrder | None:
        return next((o for o in self.orders if o.order_id == order_id), None)


class FakeStorefront:
    """In-memory storefront recording every call."""

    def __init__(self) -> None:
        self.existing_tags: set[str] = set()
        self.items: dict[str, StorefrontItem] = {}
        self.statuses: dict[str, StorefrontOrderStatus] = {}
        self.created: list[DestinationOrder] = []
        self.calls: list[tuple[str, Any]] = []

    async def order_exists_by_tag(self, tag: str) -> bool:
        self.calls.append(("order_exists_by_tag", tag))
        return tag in self.existing_tags

    async def create_order(self, order: DestinationOrder) -> str:
        self.calls.append(("create_order", order))
        self.created.append(order)
        self.existing_tags.update(order.tags)
        return str(1000 + len(self.created))

    async def find_item_by_sku(self, sku: str) -> StorefrontItem | None:
        self.calls.append(("find_item_by_sku", sku))
        return self.items.get(sku)

    async def query_order_status(self, tag: str) -> StorefrontOrderStatus | None:
        self.calls.append(("query_order_status", tag))
        return self.statuses.get(tag)

    async def mark_paid(self, order_id: str) -> None:
        self.calls.append(("mark_paid", order_id))

    async def cancel(self, order_id: str) -> None:
        self.calls.append(("cancel", order_id))

    async def mark_fulfilled(self, fulfillment_order_id: str) -> None:
        self.calls.append(("mark_fulfilled", fulfillment_order_id))

    def called(self, name: str) -> list[Any]:
        return [arg for call, arg in self.calls if call == name]


class FakeInvoicing:
    """In-memory invoicing backend; issued invoices become findable by reference."""

    def __init__(self) -> None:
        self.catalog: dict[str, CatalogItem] = {}
        self.invoices: dict[str, dict[str, Any]] = {}
        self.parties: list[PartyDetails] = []
        self.issued: list[InvoicePayload] = []
        self.document_set_id: int | None = 77
        self.issue_response: dict[str, Any] | None = None

    async def find_or_create_party(self, party: PartyDetails) -> int:
        self.parties.append(party)
        return 555

    async def get_default_document_set_id(self) -> int | None:
        return self.document_set_id

    async def find_item_by_sku(self, sku: str) -> CatalogItem | None:
        return self.catalog.get(sku)

    async def find_invoice_by_order_reference(self, reference: str) -> dict[str, Any] | None:
        return self.invoices.get(reference)

    async def issue_invoice(self, payload: InvoicePayload) -> dict[str, Any]:
        self.issued.append(payload)
        if self.issue_response is not None:
            return self.issue_response
        response = {"valid": 1, "document_id": 9000 + len(self.issued)}
        self.invoices[payload.your_reference] = response
        return response


def make_order(
    order_id: str = "1001",
    skus: list[str] | None = None,
    state: str | None = "Waiting Payment",
    customer_name: str = "Cliente Sandbox",
    **extra: Any,
) -> SourceOrder:
    """Build a marketplace order from its wire (camelCase) representation."""
    skus = ["SKU-1"] if skus is None else skus
    address = {
        "customerName": customer_name,
        "address1": "Rua Exemplo 123",
        "zipCode": "1000-000",
        "city": "Lisboa",
        "country": "PT",
    }
    payload = {
        "orderId": order_id,
        "deliveryAddress": address,
        "billingAddress": {**address, "vat": "123456789"},
        "products": [
            {"name": f"Product {sku}", "sellerProductId": sku, "id": f"kk-{sku}", "quantity": 2, "price": 9.95}
            for sku in skus
        ],
        "totalPrice": 19.9,
        "shipping": {"type": "CTT", "value": 3.5},
        "orderState": state,
        "createdAt": "2026-10-18T10:00:00Z",
        **extra,
    }
    return SourceOrder.model_validate(payload)


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings with overrides."""
    return Settings(
        app_env="test",
        debug=True,
        scheduler_enabled=False,
        timezone="UTC",
        kuantokusta_api_url="https://kk.test",
        kuantokusta_api_key="kk-key",
        shopify_api_url="https://shop.test/admin/api/2024-10",
        shopify_access_token="shp-token",
        moloni_api_url="https://moloni.test/v1",
        moloni_developer_id="dev",
        moloni_client_secret="secret",
        moloni_user="user@test",
        moloni_password="pass",
        moloni_company_id="42",
    )


@pytest.fixture
def source() -> FakeOrderSource:
    return FakeOrderSource()


@pytest.fixture
def storefront() -> FakeStorefront:
    return FakeStorefront()


@pytest.fixture
def invoicing() -> FakeInvoicing:
    return FakeInvoicing()


@pytest.fixture
def order_sync(source, storefront, test_settings) -> OrderSyncService:
    return OrderSyncService(source, storefront, test_settings)


@pytest.fixture
def status_propagation(source, storefront, invoicing, test_settings) -> StatusPropagationService:
    return StatusPropagationService(
        source, storefront, InvoiceIssuer(invoicing, test_settings), test_settings
    )


@pytest.fixture
def shipment_sync(source, storefront, test_settings) -> ShipmentSyncService:
    return ShipmentSyncService(source, storefront, test_settings)


@pytest.fixture
def app(test_settings, order_sync, status_propagation, shipment_sync) -> Any:
    """Create test application wired to the fakes."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_order_sync_service] = lambda: order_sync
    app.dependency_overrides[get_status_propagation_service] = lambda: status_propagation
    app.dependency_overrides[get_shipment_sync_service] = lambda: shipment_sync
    return app


@pytest.fixture
def client(app: Any) -> TestClient:
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def order_factory():
    """Factory for marketplace orders."""
    return make_order
