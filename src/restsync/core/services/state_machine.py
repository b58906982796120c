"""Lifecycle transitions of resources and collections.

Why explicit transitions:
- Each method is a short synchronous block of assignments on `SyncState`, so
  observers (notifications fire only after a transition completes) never see a
  half-applied state.
- Supersession: every issued operation takes a fresh generation token; only
  the holder of the current token may settle the target.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Protocol

from restsync.core.domain.errors import ResourceDestroyedError
from restsync.core.domain.models import NormalizedError
from restsync.core.domain.resource import Resource, SyncState

logger = logging.getLogger(__name__)


class SyncTarget(Protocol):
    """Anything carrying a `SyncState` (resources and collections)."""

    @property
    def sync_state(self) -> SyncState: ...

    @property
    def is_destroyed(self) -> bool: ...


class SyncStateMachine:
    def should_skip_save(self, resource: Resource) -> bool:
        return not resource.is_new and not resource.is_dirty

    def ensure_alive(self, target: SyncTarget) -> None:
        if target.is_destroyed:
            raise ResourceDestroyedError(f"{type(target).__name__} was deleted and cannot be used")

    def issue(
        self,
        target: SyncTarget,
        run: Callable[[int], Coroutine[Any, Any, Any]],
    ) -> asyncio.Task[Any]:
        """Start `run(token)` as the target's current request.

        Must be called from inside a running event loop.
        """

        self.ensure_alive(target)
        loop = asyncio.get_running_loop()
        state = target.sync_state
        state.generation += 1
        token = state.generation
        if state.current_request is not None and not state.current_request.done():
            logger.debug("%s: request %d supersedes an outstanding request", type(target).__name__, token)
        task = loop.create_task(run(token))
        state.current_request = task
        return task

    def is_current(self, target: SyncTarget, token: int) -> bool:
        return target.sync_state.generation == token

    def begin_save(self, resource: Resource) -> None:
        resource.sync_state.is_saving = True

    def succeed(self, target: SyncTarget) -> None:
        state = target.sync_state
        state.is_error = False
        state.errors = None

    def fail(self, target: SyncTarget, error: NormalizedError) -> None:
        state = target.sync_state
        state.is_error = True
        state.errors = error.errors

    def mark_clean(self, resource: Resource) -> None:
        resource.sync_state.is_dirty = False

    def mark_loaded(self, target: SyncTarget) -> None:
        target.sync_state.is_loaded = True

    def settle(self, target: SyncTarget) -> None:
        """Always-finally phase of an operation held by the current token.

        `is_saving` is cleared whatever the operation was: a save superseded by
        a reload never settles on its own.
        """

        state = target.sync_state
        state.current_request = None
        state.is_saving = False
        state.is_loaded = True

    def release(self, target: SyncTarget) -> None:
        """Drop the request handle without touching load state (failed delete)."""

        state = target.sync_state
        state.current_request = None
        state.is_saving = False

    def destroy(self, resource: Resource) -> None:
        state = resource.sync_state
        state.current_request = None
        state.is_saving = False
        state.is_destroyed = True
