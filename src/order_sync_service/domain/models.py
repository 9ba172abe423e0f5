"""Domain models for marketplace orders, storefront orders and run results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SourceOrderState(str, Enum):
    """Lifecycle states reported by the marketplace."""

    WAITING_PAYMENT = "waiting payment"
    WAITING_APPROVAL = "waiting approval"
    APPROVED = "approved"
    SHIPPED = "shipped"
    CANCELED = "canceled"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | None) -> "SourceOrderState | None":
        """Normalize a raw marketplace state, case-insensitively.

        "In Transit" and "shipped" are the same state. Unknown values map
        to OTHER; missing values map to None.
        """
        if raw is None:
            return None
        value = " ".join(raw.strip().lower().split())
        if not value:
            return None
        if value in ("in transit", "in_transit"):
            return cls.SHIPPED
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class StatusAction(str, Enum):
    """Storefront action dispatched for a marketplace state."""

    MARK_PAID = "mark_paid"
    CANCEL = "cancel"
    MARK_FULFILLED = "mark_fulfilled"
    NONE = "none"


class RunStatus(str, Enum):
    """Classification of a synchronization pass."""

    OK = "ok"
    EMPTY = "empty"
    BUSY = "busy"


class ShipmentSyncStatus(str, Enum):
    FULFILLED = "fulfilled"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"


# -----------------------------------------------------------------------------
# Marketplace (source) schema
# -----------------------------------------------------------------------------


def _number_as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _SourceModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # The marketplace sends null for absent values; let field defaults apply.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class SourceAddress(_SourceModel):
    customer_name: str = Field(default="", alias="customerName")
    address1: str = ""
    address2: str | None = None
    zip_code: str = Field(default="", alias="zipCode")
    city: str = ""
    country: str = ""
    contact: str | None = None
    vat: str | None = None
    email: str | None = None

    @field_validator("customer_name", "address1", "address2", "zip_code", "contact", "vat", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)


class SourceLineItem(_SourceModel):
    name: str = ""
    seller_product_id: str | None = Field(default=None, alias="sellerProductId")
    id: str | None = None
    quantity: int = 1
    price: float = 0.0

    @field_validator("seller_product_id", "id", "name", mode="before")
    @classmethod
    def _ids_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)

    @property
    def sku(self) -> str:
        """Seller SKU, falling back to the marketplace product id."""
        return str(self.seller_product_id or self.id or "")


class SourceShipping(_SourceModel):
    type: str = ""
    value: float = 0.0


class SourceOrder(_SourceModel):
    """Immutable snapshot of a marketplace order, re-fetched on every pass."""

    order_id: str = Field(default="", alias="orderId")
    delivery_address: SourceAddress | None = Field(default=None, alias="deliveryAddress")
    billing_address: SourceAddress | None = Field(default=None, alias="billingAddress")
    products: list[SourceLineItem] = Field(default_factory=list)
    email: str | None = None
    additional_info: str | None = Field(default=None, alias="additionalInfo")
    products_price: float | None = Field(default=None, alias="productsPrice")
    total_price: float | None = Field(default=None, alias="totalPrice")
    shipping: SourceShipping | None = None
    order_state: str | None = Field(default=None, alias="orderState")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    approval_date: datetime | None = Field(default=None, alias="approvalDate")
    shipped_date: datetime | None = Field(default=None, alias="shippedDate")
    cancel_date: datetime | None = Field(default=None, alias="cancelDate")

    @field_validator("order_id", mode="before")
    @classmethod
    def _order_id_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)

    @property
    def state(self) -> SourceOrderState | None:
        return SourceOrderState.parse(self.order_state)

    @property
    def customer_email(self) -> str | None:
        for candidate in (
            self.email,
            self.billing_address.email if self.billing_address else None,
            self.delivery_address.email if self.delivery_address else None,
        ):
            if candidate:
                return candidate
        return None


# -----------------------------------------------------------------------------
# Storefront (destination) schema
# -----------------------------------------------------------------------------


class DestinationAddress(BaseModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    zip: str = ""
    country: str = ""
    phone: str | None = None


class DestinationCustomer(BaseModel):
    first_name: str
    last_name: str
    email: str


class DestinationLineItem(BaseModel):
    variant_id: int
    quantity: int
    price: str
    title: str | None = None
    sku: str | None = None


class DestinationShippingLine(BaseModel):
    title: str
    price: str
    code: str


class DestinationOrder(BaseModel):
    """Order in the storefront's REST schema."""

    customer: DestinationCustomer
    email: str
    shipping_address: DestinationAddress
    billing_address: DestinationAddress
    line_items: list[DestinationLineItem] = Field(default_factory=list)
    shipping_lines: list[DestinationShippingLine] = Field(default_factory=list)
    financial_status: str = "pending"
    currency: str
    total_price: str
    note: str | None = None
    tags: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the storefront API (tags as a comma separated string)."""
        payload = self.model_dump(exclude_none=True)
        payload["tags"] = ", ".join(self.tags)
        return payload


@dataclass(frozen=True)
class StorefrontItem:
    """A storefront variant resolved from a SKU."""

    item_id: str
    display_name: str
    sku: str | None = None


@dataclass(frozen=True)
class StorefrontOrderStatus:
    """Current state of an order in the storefront."""

    id: str
    name: str | None
    financial_status: str | None
    fulfillment_order_id: str | None = None


# -----------------------------------------------------------------------------
# Invoicing schema
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class PartyDetails:
    """Billing party data used to find or create an invoicing customer."""

    name: str
    vat: str
    address: str = ""
    zip_code: str = ""
    city: str = ""
    country: str = ""
    phone: str = ""
    email: str | None = None


@dataclass(frozen=True)
class CatalogItem:
    product_id: int
    name: str
    tax_id: int | None = None


@dataclass
class InvoiceLine:
    product_id: int
    name: str
    quantity: int
    price: str
    tax_id: int
    exemption_reason: str


@dataclass
class InvoicePayload:
    customer_id: int
    document_set_id: int
    date: str
    expiration_date: str
    your_reference: str
    lines: list[InvoiceLine]
    status: int = 1


# -----------------------------------------------------------------------------
# Run results
# -----------------------------------------------------------------------------


@dataclass
class SyncRunResult:
    """Outcome of one order synchronization pass."""

    status: RunStatus
    window: str
    synced: int = 0
    duplicated: list[str] = field(default_factory=list)
    not_found_skus: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.status is RunStatus.EMPTY:
            return "No orders found in the marketplace"
        if self.status is RunStatus.BUSY:
            return "An order synchronization is already running"

        parts = []
        if self.synced:
            parts.append(f"{self.synced} orders synced")
        if self.duplicated:
            parts.append(f"{len(self.duplicated)} already existed")
        if self.not_found_skus:
            parts.append(f"{len(self.not_found_skus)} SKUs not found")
        if not parts:
            return "No orders were synced"
        return ", ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "window": self.window,
            "message": self.message,
            "synced": self.synced,
            "duplicated": list(self.duplicated),
            "not_found_skus": list(self.not_found_skus),
            "skipped": list(self.skipped),
            "failed": list(self.failed),
        }


@dataclass
class StatusRunResult:
    """Outcome of one status propagation pass."""

    window: str
    processed: int = 0
    actions: dict[str, int] = field(default_factory=dict)
    invoices_issued: list[str] = field(default_factory=list)
    missing_orders: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def count_action(self, action: StatusAction) -> None:
        self.actions[action.value] = self.actions.get(action.value, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "window": self.window,
            "processed": self.processed,
            "actions": dict(self.actions),
            "invoices_issued": list(self.invoices_issued),
            "missing_orders": list(self.missing_orders),
            "failed": list(self.failed),
        }


@dataclass(frozen=True)
class ShipmentSyncResult:
    order_id: str
    status: ShipmentSyncStatus
    message: str
    fulfillment_order_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "status": self.status.value,
            "message": self.message,
            "fulfillment_order_id": self.fulfillment_order_id,
        }
