"""restsync: REST resource synchronization core."""

from restsync.adapters.http_client import HttpxTransport
from restsync.adapters.json_serializer import JSONSerializer
from restsync.core.config import AdapterSettings
from restsync.core.domain.errors import (
    ResourceDefinitionError,
    ResourceDestroyedError,
    RestSyncError,
    SerializationError,
    TransportError,
)
from restsync.core.domain.models import (
    NormalizedError,
    Operation,
    RequestDescription,
    ResourceType,
    SyncEvent,
    SyncResult,
    TransportResponse,
)
from restsync.core.domain.resource import CollectionResult, Resource
from restsync.core.services.adapter import RESTAdapter

__version__ = "0.1.0"

__all__ = [
    "AdapterSettings",
    "CollectionResult",
    "HttpxTransport",
    "JSONSerializer",
    "NormalizedError",
    "Operation",
    "RESTAdapter",
    "RequestDescription",
    "Resource",
    "ResourceDefinitionError",
    "ResourceDestroyedError",
    "ResourceType",
    "RestSyncError",
    "SerializationError",
    "SyncEvent",
    "SyncResult",
    "TransportError",
    "TransportResponse",
]
