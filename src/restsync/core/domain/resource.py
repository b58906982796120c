"""Resources and query results.

Why explicit state instead of observable properties:
- Every lifecycle flag lives in one plain `SyncState` struct that only the
  state machine mutates, so a transition is a handful of synchronous
  assignments and observers never see a half-applied state.
- Observers subscribe through `on(event, callback)`; nothing fires implicitly
  when an attribute changes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Iterator, Mapping, overload

from pydantic import BaseModel, PrivateAttr
from pydantic.config import ConfigDict

from restsync.core.domain.errors import ResourceDefinitionError, ResourceDestroyedError
from restsync.core.domain.models import ResourceType, SyncEvent

Listener = Callable[[Any, SyncEvent], None]


@dataclass
class SyncState:
    """Lifecycle flags of one resource or collection."""

    is_saving: bool = False
    is_loaded: bool = False
    is_dirty: bool = False
    is_error: bool = False
    errors: Any = None
    is_destroyed: bool = False
    generation: int = 0
    current_request: asyncio.Task[Any] | None = None


@dataclass
class EventHooks:
    """Per-target notification registry."""

    listeners: dict[SyncEvent, list[Listener]] = field(default_factory=dict)

    def add(self, event: SyncEvent, callback: Listener) -> None:
        self.listeners.setdefault(SyncEvent(event), []).append(callback)

    def remove(self, event: SyncEvent, callback: Listener) -> None:
        callbacks = self.listeners.get(SyncEvent(event), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def fire(self, target: Any, event: SyncEvent) -> None:
        for callback in list(self.listeners.get(event, ())):
            callback(target, event)


class Resource(BaseModel):
    """Base class for synchronized entities.

    Subclasses declare their fields as regular pydantic fields and optionally a
    `resource_type`. Without one, the class name is the resource name and the
    primary key is inherited (default `id`).

    Field names `errors` and `primary_key` are reserved for sync state.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    resource_type: ClassVar[ResourceType | None] = None

    _sync: SyncState = PrivateAttr(default_factory=SyncState)
    _hooks: EventHooks = PrivateAttr(default_factory=EventHooks)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        declared = cls.__dict__.get("resource_type")
        if declared is None:
            inherited = cls.resource_type
            declared = ResourceType(
                resource_name=cls.__name__,
                primary_key=inherited.primary_key if inherited else "id",
            )
            cls.resource_type = declared
        if declared.primary_key not in cls.model_fields:
            raise ResourceDefinitionError(
                f"{cls.__name__} declares primary key {declared.primary_key!r} "
                "but has no such field"
            )

    @classmethod
    def get_resource_type(cls) -> ResourceType:
        if cls.resource_type is None:
            raise ResourceDefinitionError(f"{cls.__name__} has no resource type")
        return cls.resource_type

    def __setattr__(self, name: str, value: Any) -> None:
        if self._is_data_field(name):
            if self._sync.is_destroyed:
                raise ResourceDestroyedError(f"cannot modify destroyed {type(self).__name__}")
            super().__setattr__(name, value)
            self._sync.is_dirty = True
            return
        super().__setattr__(name, value)

    def _is_data_field(self, name: str) -> bool:
        if name.startswith("_"):
            return False
        if name in type(self).model_fields:
            return True
        return self.model_config.get("extra") == "allow"

    def assign_clean(self, values: Mapping[str, Any]) -> None:
        """Set field values received from the server without marking the resource dirty."""

        allow_extra = self.model_config.get("extra") == "allow"
        fields = type(self).model_fields
        for name, value in values.items():
            if name in fields:
                BaseModel.__setattr__(self, name, value)
            elif allow_extra and not name.startswith("_") and not hasattr(type(self), name):
                # Extra keys never shadow sync state (`errors`, `is_new`, ...).
                BaseModel.__setattr__(self, name, value)

    # Sync state (read-only views)

    @property
    def sync_state(self) -> SyncState:
        return self._sync

    @property
    def primary_key(self) -> Any:
        return getattr(self, self.get_resource_type().primary_key, None)

    @property
    def is_new(self) -> bool:
        return self.primary_key is None

    @property
    def is_dirty(self) -> bool:
        return self._sync.is_dirty

    @property
    def is_saving(self) -> bool:
        return self._sync.is_saving

    @property
    def is_loaded(self) -> bool:
        return self._sync.is_loaded

    @property
    def is_error(self) -> bool:
        return self._sync.is_error

    @property
    def errors(self) -> Any:
        return self._sync.errors

    @property
    def is_destroyed(self) -> bool:
        return self._sync.is_destroyed

    @property
    def current_request(self) -> asyncio.Task[Any] | None:
        return self._sync.current_request

    # Notifications

    def on(self, event: SyncEvent | str, callback: Listener) -> None:
        self._hooks.add(SyncEvent(event), callback)

    def off(self, event: SyncEvent | str, callback: Listener) -> None:
        self._hooks.remove(SyncEvent(event), callback)

    def trigger_event(self, event: SyncEvent) -> None:
        self._hooks.fire(self, event)

    async def settled(self) -> "Resource":
        """Wait for the current request (if any) and return the resource."""

        while (request := self._sync.current_request) is not None and not request.done():
            await asyncio.shield(request)
        return self


class CollectionResult(Sequence[Resource]):
    """Ordered result of a multi-record query.

    Its own lifecycle (`is_loaded`, `is_error`, `errors`) tracks the query, not
    the members; each member keeps its individual state.
    """

    def __init__(self, resource_class: type[Resource]) -> None:
        self.resource_class = resource_class
        self._items: tuple[Resource, ...] = ()
        self._sync = SyncState()
        self._hooks = EventHooks()

    def __repr__(self) -> str:
        return (
            f"CollectionResult({self.resource_class.__name__}, "
            f"len={len(self._items)}, loaded={self._sync.is_loaded}, error={self._sync.is_error})"
        )

    @overload
    def __getitem__(self, index: int) -> Resource: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Resource, ...]: ...

    def __getitem__(self, index: int | slice) -> Resource | tuple[Resource, ...]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._items)

    def populate(self, items: Sequence[Resource]) -> None:
        self._items = tuple(items)

    @property
    def sync_state(self) -> SyncState:
        return self._sync

    @property
    def is_loaded(self) -> bool:
        return self._sync.is_loaded

    @property
    def is_error(self) -> bool:
        return self._sync.is_error

    @property
    def errors(self) -> Any:
        return self._sync.errors

    @property
    def is_destroyed(self) -> bool:
        return False

    @property
    def current_request(self) -> asyncio.Task[Any] | None:
        return self._sync.current_request

    def on(self, event: SyncEvent | str, callback: Listener) -> None:
        self._hooks.add(SyncEvent(event), callback)

    def off(self, event: SyncEvent | str, callback: Listener) -> None:
        self._hooks.remove(SyncEvent(event), callback)

    def trigger_event(self, event: SyncEvent) -> None:
        self._hooks.fire(self, event)

    async def settled(self) -> "CollectionResult":
        while (request := self._sync.current_request) is not None and not request.done():
            await asyncio.shield(request)
        return self
