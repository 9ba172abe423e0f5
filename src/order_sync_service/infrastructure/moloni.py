"""Moloni invoicing client.

Every Moloni v1 endpoint is a form-encoded POST authenticated with an
``access_token`` query parameter obtained through the OAuth password grant.
"""

import time
from typing import Any

import httpx
import orjson
import structlog

from order_sync_service.config import Settings
from order_sync_service.domain.models import CatalogItem, InvoicePayload, PartyDetails
from order_sync_service.infrastructure.errors import (
    PlatformError,
    require_settings,
)
from order_sync_service.infrastructure.http import PlatformClient
from shared.constants import INVOICE_STATUS_CLOSED, TOKEN_EXPIRY_MARGIN_SECONDS

logger = structlog.get_logger()


class MoloniClient(PlatformClient):
    """Customers, catalog lookups and invoice documents in Moloni."""

    platform = "moloni"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        require_settings(
            "Moloni",
            moloni_developer_id=settings.moloni_developer_id,
            moloni_client_secret=settings.moloni_client_secret,
            moloni_user=settings.moloni_user,
            moloni_password=settings.moloni_password,
            moloni_company_id=settings.moloni_company_id,
        )
        super().__init__(
            settings.moloni_api_url,
            timeout=settings.moloni_api_timeout,
            transport=transport,
        )
        self.settings = settings
        self.company_id = str(settings.moloni_company_id)
        self._token: str | None = None
        self._token_expires_at = 0.0

    async def _access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        data = await self._request(
            "GET",
            "/grant/",
            params={
                "grant_type": "password",
                "client_id": self.settings.moloni_developer_id,
                "client_secret": self.settings.moloni_client_secret,
                "username": self.settings.moloni_user,
                "password": self.settings.moloni_password,
            },
        )
        token = (data or {}).get("access_token")
        if not token:
            raise PlatformError(self.platform, ["grant returned no access_token"])

        expires_in = float(data.get("expires_in") or 3600)
        self._token = token
        self._token_expires_at = (
            time.monotonic() + expires_in - TOKEN_EXPIRY_MARGIN_SECONDS
        )
        logger.debug("Moloni access token obtained", expires_in=expires_in)
        return token

    async def _call(self, endpoint: str, form: dict[str, Any]) -> Any:
        token = await self._access_token()
        return await self._request(
            "POST",
            f"/{endpoint}/",
            params={"access_token": token},
            data={"company_id": self.company_id, **form},
        )

    async def find_or_create_party(self, party: PartyDetails) -> int:
        """Return the customer id for ``party``, inserting it when the search is empty."""
        found = await self._call(
            "customers/getAll",
            {"filters": orjson.dumps({"name": party.name}).decode()},
        )
        if isinstance(found, list) and found:
            return int(found[0]["customer_id"])

        form = {
            "name": party.name,
            "vat": party.vat,
            "address": party.address,
            "zip_code": party.zip_code,
            "city": party.city,
            "country": party.country,
            "phone": party.phone,
        }
        if party.email:
            form["email"] = party.email
        created = await self._call("customers/insert", form)
        customer_id = (created or {}).get("customer_id")
        if not customer_id:
            raise PlatformError(self.platform, [f"customer insert failed: {created}"])
        logger.info("Moloni customer created", customer_id=customer_id, name=party.name)
        return int(customer_id)

    async def get_default_document_set_id(self) -> int | None:
        data = await self._call("documentSets/getAll", {})
        if isinstance(data, list) and data:
            return int(data[0]["document_set_id"])
        return None

    async def find_item_by_sku(self, sku: str) -> CatalogItem | None:
        """Catalog item whose reference equals ``sku``; the search itself is fuzzy."""
        if not sku:
            return None
        data = await self._call("products/getBySearch", {"search": sku})
        product = next(
            (
                p
                for p in (data if isinstance(data, list) else [])
                if str(p.get("reference", "")) == sku
            ),
            None,
        )
        if product is None:
            logger.warning("No Moloni product found for SKU", sku=sku)
            return None

        tax_id = product.get("tax_id")
        if tax_id is None and product.get("taxes"):
            tax_id = product["taxes"][0].get("tax_id")
        return CatalogItem(
            product_id=int(product["product_id"]),
            name=product.get("name", sku),
            tax_id=int(tax_id) if tax_id is not None else None,
        )

    async def find_invoice_by_order_reference(self, reference: str) -> dict[str, Any] | None:
        data = await self._call(
            "documents/getAll",
            {"your_reference": reference, "status": str(INVOICE_STATUS_CLOSED)},
        )
        if isinstance(data, list) and data:
            return data[0]
        return None

    async def issue_invoice(self, payload: InvoicePayload) -> dict[str, Any]:
        form: dict[str, Any] = {
            "customer_id": str(payload.customer_id),
            "document_set_id": str(payload.document_set_id),
            "date": payload.date,
            "expiration_date": payload.expiration_date,
            "status": str(payload.status),
            "your_reference": payload.your_reference,
        }
        for idx, line in enumerate(payload.lines):
            prefix = f"products[{idx}]"
            form[f"{prefix}[product_id]"] = str(line.product_id)
            form[f"{prefix}[name]"] = line.name
            form[f"{prefix}[qty]"] = str(line.quantity)
            form[f"{prefix}[price]"] = line.price
            form[f"{prefix}[taxes][0][tax_id]"] = str(line.tax_id)
            form[f"{prefix}[exemption_reason]"] = line.exemption_reason

        logger.debug("Submitting Moloni invoice", reference=payload.your_reference, form=form)
        data = await self._call("invoices/insert", form)
        return data if isinstance(data, dict) else {"response": data}
