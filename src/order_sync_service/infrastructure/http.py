"""Shared async HTTP plumbing for the platform clients."""

from typing import Any

import httpx
import orjson
import structlog

from order_sync_service.infrastructure.errors import TransportError

logger = structlog.get_logger()


def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body, falling back to the raw text."""
    if not response.content:
        return None
    try:
        return orjson.loads(response.content)
    except orjson.JSONDecodeError:
        return response.text


class PlatformClient:
    """Base client: owns an httpx.AsyncClient and normalizes failures."""

    platform = "platform"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers or {},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Platform request failed",
                platform=self.platform,
                method=method,
                url=url,
                error=str(e),
            )
            raise TransportError(self.platform, str(e)) from e

        body = decode_body(response)
        if response.is_error:
            logger.error(
                "Platform returned an error",
                platform=self.platform,
                method=method,
                url=url,
                status_code=response.status_code,
                body=body,
            )
            raise TransportError(
                self.platform,
                f"{method} {url} failed",
                status_code=response.status_code,
                body=body,
            )
        return body
