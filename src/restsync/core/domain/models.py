"""Domain value objects (Pydantic v2).

Why Pydantic here:
- Validation at the boundary (resource metadata, transport responses) without
  coupling the core to httpx or any wire format.
- Frozen models make request descriptions and errors true value objects: built
  once, consumed once.

Note:
- These models describe *what* travels between components, not *how* it is sent.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field
from pydantic.config import ConfigDict


class Operation(str, Enum):
    """Logical operation requested on a resource."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def method(self) -> str:
        return _METHODS[self]


_METHODS: dict[Operation, str] = {
    Operation.CREATE: "POST",
    Operation.READ: "GET",
    Operation.UPDATE: "PUT",
    Operation.DELETE: "DELETE",
}


class SyncEvent(str, Enum):
    """Notification names fired on resources and collections."""

    DID_LOAD = "did_load"
    DID_CREATE = "did_create"
    DID_UPDATE = "did_update"
    DID_DELETE = "did_delete"
    BECAME_ERROR = "became_error"


class ResourceType(BaseModel):
    """Static metadata shared by every instance of a resource class.

    Why it is frozen:
    - It is read concurrently by all instances and must never be mutated once
      the class is defined.
    """

    model_config = ConfigDict(frozen=True)

    resource_name: str = Field(
        ...,
        min_length=1,
        description="Type name used to derive the URL segment (e.g. 'PostGroup').",
    )
    primary_key: str = Field(
        default="id",
        min_length=1,
        description="Name of the field holding the server-assigned identifier.",
    )


class RequestDescription(BaseModel):
    """Fully specified request handed to a transport gateway."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., pattern="^(GET|POST|PUT|DELETE)$")
    url: str = Field(..., description="Absolute (or root-relative) target URL.")
    params: dict[str, Any] | None = Field(
        default=None,
        description="Query parameters; only set for GET requests.",
    )
    payload: str | None = Field(
        default=None,
        description="Prepared request body, already encoded by the serializer.",
    )
    content_type: str | None = Field(
        default=None,
        description="Media type of `payload` (absent when there is no body).",
    )
    accept: str | None = Field(default=None, description="Accept header value.")
    data_type: str | None = Field(
        default=None,
        description="Short serializer tag (e.g. 'json').",
    )


class TransportResponse(BaseModel):
    """What a transport gateway returns once the exchange completed."""

    model_config = ConfigDict(frozen=True)

    status: int = Field(..., ge=100, le=599)
    body: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class NormalizedError(BaseModel):
    """Best-effort structured form of a failure body."""

    model_config = ConfigDict(frozen=True)

    status: int | None = Field(
        default=None,
        description="HTTP status, absent when the transport itself failed.",
    )
    raw: str | None = Field(default=None, description="Body exactly as received.")
    errors: Any = Field(
        default=None,
        description="Parsed error structure, or None when the body was unparsable.",
    )
    parsed: bool = False


class SyncResult(BaseModel):
    """Outcome of awaiting a request handle."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    skipped: bool = False
    superseded: bool = False
    status: int | None = None
    errors: Any = None
