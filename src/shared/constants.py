"""Shared constants across the application."""

# Order tagging (storefront side)
ORDER_TAG_PREFIX = "KK"
SOURCE_MARKER_TAG = "KuantoKusta"

# Placeholder email for orders whose customer email is missing or invalid
PLACEHOLDER_EMAIL_DOMAIN = "kuantokusta.invalid"

# Storefront financial statuses that already count as paid
PAID_FINANCIAL_STATUSES = frozenset({"PAID", "PARTIALLY_PAID"})

# Default currency for created storefront orders
DEFAULT_CURRENCY = "EUR"

# Invoicing
INVOICE_DUE_DAYS = 30
INVOICE_STATUS_CLOSED = 1
DEFAULT_PARTY_NAME = "Cliente KuantoKusta"

# Scheduler intervals (seconds)
ORDER_SYNC_INTERVAL_SECONDS = 300
STATUS_UPDATE_INTERVAL_SECONDS = 900

# Moloni access tokens are refreshed this many seconds before expiry
TOKEN_EXPIRY_MARGIN_SECONDS = 60
