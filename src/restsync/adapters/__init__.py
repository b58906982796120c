"""Concrete adapters for the core contracts.

Why a package:
- Groups I/O-bound implementations (httpx transport, JSON wire format).
- Each module implements a Protocol from `restsync.core.interfaces`.
"""

from restsync.adapters.http_client import HttpxTransport, build_async_client
from restsync.adapters.json_serializer import (
    DateTimeTransform,
    DateTransform,
    DecimalTransform,
    JSONSerializer,
)

__all__ = [
    "DateTimeTransform",
    "DateTransform",
    "DecimalTransform",
    "HttpxTransport",
    "JSONSerializer",
    "build_async_client",
]
