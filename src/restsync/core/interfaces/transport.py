"""Transport gateway contract.

Why a Protocol:
- The core only builds request descriptions and consumes responses; any
  object with a compatible `submit` coroutine can perform the exchange
  (httpx, a test double, a recorded cassette).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from restsync.core.domain.models import RequestDescription, TransportResponse


@runtime_checkable
class TransportGateway(Protocol):
    """Performs one network exchange.

    Design rules:
    - `submit` is asynchronous and must not block the event loop.
    - Any status code is a *response*; only network/protocol faults raise
      `restsync.core.domain.errors.TransportError`.
    - Timeouts are the gateway's business.
    """

    async def submit(self, request: RequestDescription) -> TransportResponse:
        ...
