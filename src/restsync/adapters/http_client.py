"""httpx-backed transport gateway.

Why a wrapper:
- Standardizes timeouts, headers and error mapping for every request the
  adapter issues.
- Easy to test: pass an `httpx.AsyncClient` built on `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from restsync.core.config import AdapterSettings
from restsync.core.domain.errors import TransportError
from restsync.core.domain.models import RequestDescription, TransportResponse

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AdapterSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so every request behaves the same.
    - `transport` lets tests plug in `httpx.MockTransport`.
    """

    settings = settings or AdapterSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """`TransportGateway` on top of an `httpx.AsyncClient`.

    Every HTTP status is returned as a `TransportResponse`; only connection,
    timeout and protocol errors raise `TransportError`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: AdapterSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client or build_async_client(settings)

    async def submit(self, request: RequestDescription) -> TransportResponse:
        headers: dict[str, str] = {}
        if request.accept:
            headers["Accept"] = request.accept
        if request.content_type:
            headers["Content-Type"] = request.content_type

        try:
            response = await self.client.request(
                request.method,
                request.url,
                params=request.params,
                content=request.payload.encode("utf-8") if request.payload is not None else None,
                headers=headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # InvalidURL is not an HTTPError subclass.
            raise TransportError(f"{request.method} {request.url}: {exc}") from exc

        body = response.text if response.content else None
        return TransportResponse(status=response.status_code, body=body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
