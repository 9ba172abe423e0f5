"""Errors raised by the platform clients."""

from typing import Any


class IntegrationError(Exception):
    """Base class for failures talking to an external platform."""


class ConfigurationError(IntegrationError):
    """Required settings are missing. Raised at client construction."""

    def __init__(self, platform: str, missing: list[str]):
        self.platform = platform
        self.missing = missing
        super().__init__(
            f"{platform} credentials not configured: {', '.join(missing)}"
        )


class TransportError(IntegrationError):
    """HTTP or network failure, carrying the upstream status code and body."""

    def __init__(
        self,
        platform: str,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ):
        self.platform = platform
        self.status_code = status_code
        self.body = body
        super().__init__(f"{platform}: {message} (status={status_code})")


class PlatformError(IntegrationError):
    """The platform answered 2xx but reported a logical failure."""

    def __init__(self, platform: str, messages: list[str]):
        self.platform = platform
        self.messages = messages
        super().__init__(f"{platform}: {', '.join(messages)}")


def require_settings(platform: str, **values: Any) -> None:
    """Raise ConfigurationError naming every empty value."""
    missing = [name.upper() for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(platform, missing)
