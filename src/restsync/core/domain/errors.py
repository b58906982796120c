"""Exception hierarchy of the sync layer.

Two families:
- Caller defects (destroyed resource, malformed resource type) are raised
  immediately and never absorbed.
- Environmental failures (transport, parsing) are raised by collaborators and
  turned into resource state by the adapter.
"""

from __future__ import annotations


class RestSyncError(Exception):
    """Base class for every error raised by restsync."""


class ResourceDefinitionError(RestSyncError):
    """A resource class declares a primary key that is not one of its fields."""


class ResourceDestroyedError(RestSyncError):
    """An operation was attempted on a resource removed by a successful delete."""


class TransportError(RestSyncError):
    """Network or protocol failure reported by a transport gateway."""


class SerializationError(RestSyncError):
    """A body could not be parsed into structured data."""
