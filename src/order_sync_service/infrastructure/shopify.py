"""Shopify storefront client (REST for order creation, GraphQL for the rest)."""

from typing import Any

import httpx
import structlog

from order_sync_service.config import Settings
from order_sync_service.domain.models import (
    DestinationOrder,
    StorefrontItem,
    StorefrontOrderStatus,
)
from order_sync_service.infrastructure.errors import PlatformError, require_settings
from order_sync_service.infrastructure.http import PlatformClient

logger = structlog.get_logger()

ORDER_BY_TAG_QUERY = """
query GetOrderByTag($query: String!) {
  orders(first: 1, query: $query) {
    edges {
      node {
        id
        name
        displayFinancialStatus
        fulfillmentOrders(first: 1) {
          nodes {
            id
            status
          }
        }
      }
    }
  }
}
"""

VARIANT_BY_SKU_QUERY = """
query ProductVariantBySku($query: String!) {
  productVariants(first: 1, query: $query) {
    edges {
      node {
        id
        sku
        title
        product {
          id
          title
        }
      }
    }
  }
}
"""

MARK_PAID_MUTATION = """
mutation MarkOrderPaid($input: OrderMarkAsPaidInput!) {
  orderMarkAsPaid(input: $input) {
    order {
      id
      name
      displayFinancialStatus
    }
    userErrors {
      field
      message
    }
  }
}
"""

CANCEL_MUTATION = """
mutation CancelOrder($orderId: ID!) {
  orderCancel(orderId: $orderId, reason: CUSTOMER, refund: false, restock: true) {
    job {
      id
    }
    orderCancelUserErrors {
      field
      message
    }
  }
}
"""

FULFILL_MUTATION = """
mutation FulfillOrder($fulfillmentOrderId: ID!) {
  fulfillmentCreateV2(fulfillment: {
    lineItemsByFulfillmentOrder: [{ fulfillmentOrderId: $fulfillmentOrderId }],
    notifyCustomer: true
  }) {
    fulfillment {
      id
      status
    }
    userErrors {
      field
      message
    }
  }
}
"""


class ShopifyClient(PlatformClient):
    """Creates and updates orders in the Shopify Admin API."""

    platform = "shopify"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        require_settings(
            "Shopify",
            shopify_api_url=settings.shopify_api_url,
            shopify_access_token=settings.shopify_access_token,
        )
        super().__init__(
            settings.shopify_api_url,
            timeout=settings.shopify_api_timeout,
            headers={
                "X-Shopify-Access-Token": settings.shopify_access_token,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        body = await self._request(
            "POST", "/graphql.json", json={"query": query, "variables": variables}
        )
        errors = (body or {}).get("errors")
        if errors:
            raise PlatformError(
                self.platform,
                [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors],
            )
        return (body or {}).get("data") or {}

    def _raise_user_errors(self, errors: list[dict[str, Any]] | None) -> None:
        if errors:
            raise PlatformError(self.platform, [e.get("message", "") for e in errors])

    async def order_exists_by_tag(self, tag: str) -> bool:
        data = await self._graphql(ORDER_BY_TAG_QUERY, {"query": f"tag:{tag}"})
        return bool(data.get("orders", {}).get("edges"))

    async def create_order(self, order: DestinationOrder) -> str:
        """Create the order and return its storefront id."""
        body = await self._request(
            "POST", "/orders.json", json={"order": order.to_payload()}
        )
        created = (body or {}).get("order") or {}
        order_id = str(created.get("id", ""))
        logger.info("Storefront order created", storefront_id=order_id, tags=order.tags)
        return order_id

    async def find_item_by_sku(self, sku: str) -> StorefrontItem | None:
        data = await self._graphql(VARIANT_BY_SKU_QUERY, {"query": f"sku:{sku}"})
        edges = data.get("productVariants", {}).get("edges") or []
        if not edges:
            logger.warning("SKU not found in storefront", sku=sku)
            return None

        node = edges[0]["node"]
        product = node.get("product") or {}
        display_name = product.get("title") or node.get("title") or sku
        variant_title = node.get("title")
        if variant_title and variant_title != "Default Title":
            display_name = f"{display_name} - {variant_title}"
        return StorefrontItem(item_id=node["id"], display_name=display_name, sku=node.get("sku"))

    async def query_order_status(self, tag: str) -> StorefrontOrderStatus | None:
        data = await self._graphql(ORDER_BY_TAG_QUERY, {"query": f"tag:{tag}"})
        edges = data.get("orders", {}).get("edges") or []
        if not edges:
            return None

        node = edges[0]["node"]
        fulfillment_orders = (node.get("fulfillmentOrders") or {}).get("nodes") or []
        return StorefrontOrderStatus(
            id=node["id"],
            name=node.get("name"),
            financial_status=node.get("displayFinancialStatus"),
            fulfillment_order_id=fulfillment_orders[0]["id"] if fulfillment_orders else None,
        )

    async def mark_paid(self, order_id: str) -> None:
        data = await self._graphql(MARK_PAID_MUTATION, {"input": {"id": order_id}})
        result = data.get("orderMarkAsPaid") or {}
        self._raise_user_errors(result.get("userErrors"))
        if not result.get("order"):
            raise PlatformError(self.platform, ["orderMarkAsPaid returned no order"])
        logger.info(
            "Storefront order marked as paid",
            storefront_id=order_id,
            financial_status=result["order"].get("displayFinancialStatus"),
        )

    async def cancel(self, order_id: str) -> None:
        data = await self._graphql(CANCEL_MUTATION, {"orderId": order_id})
        result = data.get("orderCancel") or {}
        self._raise_user_errors(result.get("orderCancelUserErrors"))
        logger.info("Storefront order canceled", storefront_id=order_id)

    async def mark_fulfilled(self, fulfillment_order_id: str) -> None:
        data = await self._graphql(
            FULFILL_MUTATION, {"fulfillmentOrderId": fulfillment_order_id}
        )
        result = data.get("fulfillmentCreateV2") or {}
        self._raise_user_errors(result.get("userErrors"))
        logger.info(
            "Storefront order marked as fulfilled",
            fulfillment_order_id=fulfillment_order_id,
        )
