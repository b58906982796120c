"""Core interfaces.

Why:
- Defines the contracts (Protocol) that concrete adapters implement.
- Inverts dependencies: the core depends on abstractions, not on httpx.
"""

from restsync.core.interfaces.serializer import Serializer, Transform
from restsync.core.interfaces.transport import TransportGateway

__all__ = ["Serializer", "Transform", "TransportGateway"]
