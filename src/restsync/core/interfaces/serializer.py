"""Serializer contract (wire format <-> resource fields)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from restsync.core.domain.resource import Resource


@runtime_checkable
class Transform(Protocol):
    """Converts one field type to and from its wire representation."""

    def serialize(self, value: Any) -> Any:
        ...

    def deserialize(self, value: Any) -> Any:
        ...


@runtime_checkable
class Serializer(Protocol):
    """Minimal contract the adapter relies on.

    `parse` raises `SerializationError` on malformed input; the other hooks
    receive already-parsed data.
    """

    data_type: str
    content_type: str

    def serialize(self, resource: Resource) -> dict[str, Any]:
        ...

    def prepare_data(self, data: Any) -> str:
        ...

    def parse(self, body: str) -> Any:
        ...

    def deserialize(self, resource: Resource, data: Any) -> None:
        ...

    def deserialize_many(self, resource_class: type[Resource], data: Any) -> list[Resource]:
        ...

    def register_transform(self, field_type: type, transform: Transform) -> None:
        ...
