"""Wiring of platform clients and services."""

from dataclasses import dataclass
from functools import lru_cache

from order_sync_service.config import Settings, get_settings
from order_sync_service.infrastructure.kuantokusta import KuantoKustaClient
from order_sync_service.infrastructure.moloni import MoloniClient
from order_sync_service.infrastructure.shopify import ShopifyClient
from order_sync_service.services import (
    InvoiceIssuer,
    OrderSyncService,
    ShipmentSyncService,
    StatusPropagationService,
)


@dataclass
class ServiceContainer:
    """Engine instances (and their run guards) shared by the API and the scheduler."""

    marketplace: KuantoKustaClient
    storefront: ShopifyClient
    invoicing: MoloniClient
    order_sync: OrderSyncService
    status_propagation: StatusPropagationService
    shipment_sync: ShipmentSyncService

    async def close(self) -> None:
        await self.marketplace.close()
        await self.storefront.close()
        await self.invoicing.close()


def build_container(settings: Settings) -> ServiceContainer:
    """Create clients and services. Raises ConfigurationError on missing settings."""
    marketplace = KuantoKustaClient(settings)
    storefront = ShopifyClient(settings)
    invoicing = MoloniClient(settings)
    return ServiceContainer(
        marketplace=marketplace,
        storefront=storefront,
        invoicing=invoicing,
        order_sync=OrderSyncService(marketplace, storefront, settings),
        status_propagation=StatusPropagationService(
            marketplace, storefront, InvoiceIssuer(invoicing, settings), settings
        ),
        shipment_sync=ShipmentSyncService(marketplace, storefront, settings),
    )


@lru_cache
def get_container() -> ServiceContainer:
    """Get the process-wide container."""
    return build_container(get_settings())


def get_order_sync_service() -> OrderSyncService:
    return get_container().order_sync


def get_status_propagation_service() -> StatusPropagationService:
    return get_container().status_propagation


def get_shipment_sync_service() -> ShipmentSyncService:
    return get_container().shipment_sync
