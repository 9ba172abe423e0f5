"""KuantoKusta marketplace client (order source)."""

from datetime import datetime

import httpx
import structlog
from pydantic import ValidationError

from order_sync_service.config import Settings
from order_sync_service.domain.models import SourceOrder
from order_sync_service.infrastructure.errors import TransportError, require_settings
from order_sync_service.infrastructure.http import PlatformClient

logger = structlog.get_logger()


class KuantoKustaClient(PlatformClient):
    """Reads orders from the KuantoKusta KMS API."""

    platform = "kuantokusta"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        require_settings(
            "KuantoKusta",
            kuantokusta_api_url=settings.kuantokusta_api_url,
            kuantokusta_api_key=settings.kuantokusta_api_key,
        )
        super().__init__(
            settings.kuantokusta_api_url,
            timeout=settings.kuantokusta_api_timeout,
            headers={
                "x-api-key": settings.kuantokusta_api_key,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def fetch_orders(
        self, start: datetime, end: datetime, label: str
    ) -> list[SourceOrder]:
        """Fetch orders created between ``start`` and ``end``."""
        logger.info(
            "Fetching marketplace orders",
            window=label,
            start=start.isoformat(),
            end=end.isoformat(),
        )
        data = await self._request(
            "GET",
            "/kms/orders",
            params={
                "creationDateStart": start.isoformat(),
                "creationDateEnd": end.isoformat(),
            },
        )
        raw_orders = data if isinstance(data, list) else (data or {}).get("orders", [])
        orders: list[SourceOrder] = []
        for raw in raw_orders:
            try:
                orders.append(SourceOrder.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed marketplace order",
                    order_id=raw.get("orderId") if isinstance(raw, dict) else None,
                    errors=e.error_count(),
                    error=str(e),
                )
        logger.info("Marketplace orders received", window=label, count=len(orders))
        return orders

    async def fetch_order(self, order_id: str) -> SourceOrder | None:
        """Fetch a single order, or None when the marketplace does not know it."""
        try:
            data = await self._request("GET", f"/kms/orders/{order_id}")
        except TransportError as e:
            if e.status_code == 404:
                return None
            raise
        if not data:
            return None
        return SourceOrder.model_validate(data)
