"""Invoice issuance for approved marketplace orders."""

from datetime import date, timedelta
from typing import Any

import structlog

from order_sync_service.config import Settings
from order_sync_service.domain.models import (
    InvoiceLine,
    InvoicePayload,
    PartyDetails,
    SourceOrder,
)
from order_sync_service.services.interfaces import Invoicing
from order_sync_service.services.order_mapper import format_money
from shared.constants import DEFAULT_PARTY_NAME, INVOICE_DUE_DAYS

logger = structlog.get_logger()


class InvoiceIssuanceError(Exception):
    """Invoicing of a single order failed; other orders are unaffected."""

    def __init__(self, order_id: str, reason: str):
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"Invoice for order {order_id} not issued: {reason}")


class InvoiceIssuer:
    """Issues at most one invoice per marketplace order."""

    def __init__(self, invoicing: Invoicing, settings: Settings):
        self.invoicing = invoicing
        self.settings = settings

    def party_for(self, order: SourceOrder) -> PartyDetails:
        address = order.billing_address or order.delivery_address
        if address is None:
            return PartyDetails(
                name=DEFAULT_PARTY_NAME,
                vat=self.settings.moloni_default_vat,
                country=self.settings.moloni_default_country,
                email=order.customer_email,
            )

        street = ", ".join(part for part in (address.address1, address.address2) if part)
        return PartyDetails(
            name=address.customer_name.strip() or DEFAULT_PARTY_NAME,
            vat=address.vat or self.settings.moloni_default_vat,
            address=street,
            zip_code=address.zip_code,
            city=address.city,
            country=address.country or self.settings.moloni_default_country,
            phone=address.contact or "",
            email=order.customer_email,
        )

    async def issue_if_missing(self, order: SourceOrder) -> dict[str, Any] | None:
        """Issue an invoice unless one already references this order.

        Returns the invoicing response, or None when an invoice already existed.
        """
        existing = await self.invoicing.find_invoice_by_order_reference(order.order_id)
        if existing:
            logger.info(
                "Invoice already exists for order",
                order_id=order.order_id,
                document_id=existing.get("document_id"),
            )
            return None
        return await self.issue(order)

    async def issue(self, order: SourceOrder, today: date | None = None) -> dict[str, Any]:
        if not order.products:
            raise InvoiceIssuanceError(order.order_id, "order has no products")

        customer_id = await self.invoicing.find_or_create_party(self.party_for(order))

        document_set_id = await self.invoicing.get_default_document_set_id()
        if not document_set_id:
            raise InvoiceIssuanceError(order.order_id, "no document set available")

        lines = []
        for product in order.products:
            if not product.sku:
                raise InvoiceIssuanceError(
                    order.order_id, f"product has no SKU: {product.name}"
                )
            item = await self.invoicing.find_item_by_sku(product.sku)
            if item is None:
                raise InvoiceIssuanceError(
                    order.order_id,
                    f"product not in catalog: {product.name} (SKU: {product.sku})",
                )
            lines.append(
                InvoiceLine(
                    product_id=item.product_id,
                    name=item.name,
                    quantity=product.quantity,
                    price=format_money(product.price),
                    tax_id=item.tax_id or self.settings.moloni_default_tax_id,
                    exemption_reason=self.settings.moloni_exemption_reason,
                )
            )

        issued_on = today or date.today()
        payload = InvoicePayload(
            customer_id=customer_id,
            document_set_id=document_set_id,
            date=issued_on.isoformat(),
            expiration_date=(issued_on + timedelta(days=INVOICE_DUE_DAYS)).isoformat(),
            your_reference=order.order_id,
            lines=lines,
        )

        response = await self.invoicing.issue_invoice(payload)
        if not response.get("invoice_id") and not response.get("document_id"):
            raise InvoiceIssuanceError(order.order_id, f"no invoice created: {response}")

        logger.info(
            "Invoice issued",
            order_id=order.order_id,
            invoice_id=response.get("invoice_id"),
            document_id=response.get("document_id"),
        )
        return response
