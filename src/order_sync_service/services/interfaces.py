"""Collaborator contracts consumed by the engines."""

from datetime import datetime
from typing import Any, Protocol

from order_sync_service.domain.models import (
    CatalogItem,
    DestinationOrder,
    InvoicePayload,
    PartyDetails,
    SourceOrder,
    StorefrontItem,
    StorefrontOrderStatus,
)


class OrderSource(Protocol):
    async def fetch_orders(
        self, start: datetime, end: datetime, label: str
    ) -> list[SourceOrder]: ...

    async def fetch_order(self, order_id: str) -> SourceOrder | None: ...


class Storefront(Protocol):
    async def order_exists_by_tag(self, tag: str) -> bool: ...

    async def create_order(self, order: DestinationOrder) -> str: ...

    async def find_item_by_sku(self, sku: str) -> StorefrontItem | None: ...

    async def query_order_status(self, tag: str) -> StorefrontOrderStatus | None: ...

    async def mark_paid(self, order_id: str) -> None: ...

    async def cancel(self, order_id: str) -> None: ...

    async def mark_fulfilled(self, fulfillment_order_id: str) -> None: ...


class Invoicing(Protocol):
    async def find_or_create_party(self, party: PartyDetails) -> int: ...

    async def get_default_document_set_id(self) -> int | None: ...

    async def find_item_by_sku(self, sku: str) -> CatalogItem | None: ...

    async def find_invoice_by_order_reference(
        self, reference: str
    ) -> dict[str, Any] | None: ...

    async def issue_invoice(self, payload: InvoicePayload) -> dict[str, Any]: ...
