"""Merging transport responses back into resources."""

from __future__ import annotations

import logging
from typing import Any

from restsync.core.domain.errors import SerializationError
from restsync.core.domain.models import NormalizedError, SyncResult, TransportResponse
from restsync.core.domain.resource import CollectionResult, Resource
from restsync.core.interfaces.serializer import Serializer
from restsync.core.services.error_normalizer import ErrorNormalizer
from restsync.core.services.state_machine import SyncStateMachine, SyncTarget

logger = logging.getLogger(__name__)


class ResponseReconciler:
    """Applies the success or failure branch of a settled operation.

    `None` as outcome means the transport itself failed (no status, no body).
    Every method returns the `SyncResult` handed back to the caller; none of
    them raises for environmental failures.
    """

    def __init__(
        self,
        serializer: Serializer,
        state: SyncStateMachine,
        normalizer: ErrorNormalizer | None = None,
    ) -> None:
        self.serializer = serializer
        self.state = state
        self.normalizer = normalizer or ErrorNormalizer(serializer.parse)

    def reconcile_save(self, resource: Resource, outcome: TransportResponse | None) -> SyncResult:
        if outcome is None or not outcome.ok:
            return self.fail(resource, outcome)
        try:
            data = self._parse(outcome)
            # 204 No Content: local values stay authoritative.
            if data is not None:
                self.serializer.deserialize(resource, data)
        except SerializationError as exc:
            return self._unreadable(resource, outcome, exc)

        self.state.succeed(resource)
        self.state.mark_clean(resource)
        return SyncResult(ok=True, status=outcome.status)

    def reconcile_find(self, resource: Resource, outcome: TransportResponse | None) -> SyncResult:
        if outcome is None or not outcome.ok:
            return self.fail(resource, outcome)
        try:
            data = self._parse(outcome)
            if data is not None:
                self.serializer.deserialize(resource, data)
        except SerializationError as exc:
            return self._unreadable(resource, outcome, exc)

        self.state.succeed(resource)
        return SyncResult(ok=True, status=outcome.status)

    def reconcile_find_many(
        self,
        collection: CollectionResult,
        outcome: TransportResponse | None,
    ) -> SyncResult:
        if outcome is None or not outcome.ok:
            return self.fail(collection, outcome)
        try:
            data = self._parse(outcome)
            items = self.serializer.deserialize_many(collection.resource_class, data if data is not None else [])
        except SerializationError as exc:
            return self._unreadable(collection, outcome, exc)

        for item in items:
            self.state.mark_loaded(item)
        collection.populate(items)
        self.state.succeed(collection)
        return SyncResult(ok=True, status=outcome.status)

    def reconcile_delete(self, resource: Resource, outcome: TransportResponse | None) -> SyncResult:
        if outcome is None or not outcome.ok:
            return self.fail(resource, outcome)
        self.state.succeed(resource)
        return SyncResult(ok=True, status=outcome.status)

    def fail(self, target: SyncTarget, outcome: TransportResponse | None) -> SyncResult:
        if outcome is None:
            error = NormalizedError()
        else:
            error = self.normalizer.normalize(outcome.body, outcome.status)
        logger.info("%s became error (status=%s)", type(target).__name__, error.status)
        self.state.fail(target, error)
        return SyncResult(ok=False, status=error.status, errors=error.errors)

    def _parse(self, outcome: TransportResponse) -> Any:
        if outcome.body is None or not outcome.body.strip():
            return None
        return self.serializer.parse(outcome.body)

    def _unreadable(
        self,
        target: SyncTarget,
        outcome: TransportResponse,
        exc: SerializationError,
    ) -> SyncResult:
        logger.warning("unreadable response for %s (status=%s): %s", type(target).__name__, outcome.status, exc)
        self.state.fail(target, NormalizedError(status=outcome.status, raw=outcome.body))
        return SyncResult(ok=False, status=outcome.status)
