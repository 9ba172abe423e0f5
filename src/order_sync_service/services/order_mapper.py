"""Marketplace order -> storefront order mapping.

Pure functions only: no I/O and no logging, so the mapping can be tested in
isolation and reused by every engine.
"""

import re

from order_sync_service.domain.models import (
    DestinationAddress,
    DestinationCustomer,
    DestinationOrder,
    DestinationShippingLine,
    SourceAddress,
    SourceOrder,
)
from shared.constants import (
    DEFAULT_CURRENCY,
    ORDER_TAG_PREFIX,
    PLACEHOLDER_EMAIL_DOMAIN,
    SOURCE_MARKER_TAG,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def order_tag(order_id: str, prefix: str = ORDER_TAG_PREFIX) -> str:
    """Deterministic external-reference tag attached to created orders."""
    return f"{prefix}-{order_id}"


def split_name(full_name: str | None) -> tuple[str, str]:
    """Split on whitespace: first token, then the rest joined by one space."""
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def resolve_email(
    email: str | None, order_id: str, domain: str = PLACEHOLDER_EMAIL_DOMAIN
) -> str:
    """Return ``email`` when valid, otherwise a placeholder derived from the order id."""
    candidate = (email or "").strip()
    if EMAIL_PATTERN.match(candidate):
        return candidate
    return f"order-{order_id}@{domain}"


def format_money(value: float | None) -> str:
    return f"{(value or 0.0):.2f}"


def _map_address(address: SourceAddress | None) -> DestinationAddress:
    if address is None:
        return DestinationAddress()
    first_name, last_name = split_name(address.customer_name)
    return DestinationAddress(
        first_name=first_name,
        last_name=last_name,
        address1=address.address1 or "",
        address2=address.address2 or "",
        city=address.city or "",
        zip=address.zip_code or "",
        country=address.country or "",
        phone=address.contact or None,
    )


def map_to_destination(
    order: SourceOrder,
    *,
    tag_prefix: str = ORDER_TAG_PREFIX,
    source_marker: str = SOURCE_MARKER_TAG,
    placeholder_domain: str = PLACEHOLDER_EMAIL_DOMAIN,
    currency: str = DEFAULT_CURRENCY,
) -> DestinationOrder:
    """Map a marketplace order to the storefront schema.

    Line items are left empty; the synchronization engine attaches the ones
    it managed to resolve.
    """
    delivery = order.delivery_address or order.billing_address
    billing = order.billing_address or order.delivery_address
    customer_name = delivery.customer_name if delivery else ""
    first_name, last_name = split_name(customer_name)
    email = resolve_email(order.customer_email, order.order_id, placeholder_domain)

    shipping_lines = []
    if order.shipping is not None:
        shipping_lines.append(
            DestinationShippingLine(
                title=order.shipping.type,
                price=format_money(order.shipping.value),
                code=order.shipping.type,
            )
        )

    return DestinationOrder(
        customer=DestinationCustomer(
            first_name=first_name, last_name=last_name, email=email
        ),
        email=email,
        shipping_address=_map_address(delivery),
        billing_address=_map_address(billing),
        shipping_lines=shipping_lines,
        financial_status="pending",
        currency=currency,
        total_price=format_money(order.total_price),
        note=order.additional_info or f"{source_marker} order {order.order_id}",
        tags=[source_marker, order_tag(order.order_id, tag_prefix)],
    )
