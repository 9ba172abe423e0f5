"""Order synchronization service: KuantoKusta -> Shopify -> Moloni."""

__version__ = "1.0.0"
