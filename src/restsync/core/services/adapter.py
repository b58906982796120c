"""REST adapter: the public entry point of the sync core.

Flow of every operation:
1. Synchronous part (caller's frame): preconditions, state flips, request
   description, `asyncio.Task` registered as the target's current request.
2. Asynchronous part (the task): transport exchange, supersession check,
   reconciliation, always-finally settlement, notifications.

The returned task resolves to a `SyncResult`; environmental failures never
raise out of it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, TypeVar

from restsync.adapters.json_serializer import JSONSerializer
from restsync.core.config import AdapterSettings
from restsync.core.domain.errors import TransportError
from restsync.core.domain.models import (
    Operation,
    RequestDescription,
    SyncEvent,
    SyncResult,
    TransportResponse,
)
from restsync.core.domain.resource import CollectionResult, Resource
from restsync.core.interfaces.serializer import Serializer, Transform
from restsync.core.interfaces.transport import TransportGateway
from restsync.core.services.paths import resource_path, root_path
from restsync.core.services.reconciler import ResponseReconciler
from restsync.core.services.requests import RequestBuilder
from restsync.core.services.state_machine import SyncStateMachine, SyncTarget

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Resource)


class RESTAdapter:
    """Builds REST URLs for resources and synchronizes them with the service."""

    def __init__(
        self,
        transport: TransportGateway,
        serializer: Serializer | None = None,
        settings: AdapterSettings | None = None,
    ) -> None:
        serializer = serializer or JSONSerializer()
        self.transport = transport
        self.serializer = serializer
        self.settings = settings or AdapterSettings()
        self.root_path = root_path(self.settings.url, self.settings.namespace)
        self.state = SyncStateMachine()
        self.reconciler = ResponseReconciler(serializer, self.state)
        self.builder = RequestBuilder(
            root=self.root_path,
            serializer=serializer,
            use_content_type_extension=self.settings.use_content_type_extension,
        )

    def resource_path(self, resource_name: str) -> str:
        return resource_path(resource_name)

    def build_url(self, target: Resource | type[Resource], resource_key: Any = None) -> str:
        if isinstance(target, Resource):
            return self.builder.build_url(type(target).get_resource_type(), resource_key, target.primary_key)
        return self.builder.build_url(target.get_resource_type(), resource_key)

    def register_transform(self, field_type: type, transform: Transform) -> None:
        """Forward a custom field transform to the serializer (configuration time only)."""

        self.serializer.register_transform(field_type, transform)

    # Operations

    def save_record(self, resource: Resource) -> asyncio.Future[SyncResult]:
        """POST a new resource or PUT a dirty one.

        A clean, already persisted resource is not sent: the returned future is
        already resolved with `SyncResult(ok=True, skipped=True)`.
        """

        self.state.ensure_alive(resource)
        if self.state.should_skip_save(resource):
            skipped: asyncio.Future[SyncResult] = asyncio.get_running_loop().create_future()
            skipped.set_result(SyncResult(ok=True, skipped=True))
            return skipped

        # Captured before any mutation: the response may assign the key.
        was_new = resource.is_new
        operation = Operation.CREATE if was_new else Operation.UPDATE
        request = self.builder.build_request(resource, operation)

        async def run(token: int) -> SyncResult:
            outcome = await self._exchange(request)
            if not self._still_current(resource, token, request):
                return _superseded(outcome)
            try:
                result = self.reconciler.reconcile_save(resource, outcome)
            finally:
                self.state.settle(resource)
            if result.ok:
                resource.trigger_event(SyncEvent.DID_CREATE if was_new else SyncEvent.DID_UPDATE)
            else:
                resource.trigger_event(SyncEvent.BECAME_ERROR)
            resource.trigger_event(SyncEvent.DID_LOAD)
            return result

        task = self.state.issue(resource, run)
        self.state.begin_save(resource)
        return task

    def delete_record(self, resource: Resource) -> asyncio.Task[SyncResult]:
        """DELETE the resource; on success it is destroyed, on failure left intact."""

        self.state.ensure_alive(resource)
        request = self.builder.build_request(resource, Operation.DELETE)

        async def run(token: int) -> SyncResult:
            outcome = await self._exchange(request)
            if not self._still_current(resource, token, request):
                return _superseded(outcome)
            destroyed = False
            try:
                result = self.reconciler.reconcile_delete(resource, outcome)
                destroyed = result.ok
            finally:
                if destroyed:
                    self.state.destroy(resource)
                else:
                    self.state.release(resource)
            resource.trigger_event(SyncEvent.DID_DELETE if destroyed else SyncEvent.BECAME_ERROR)
            return result

        return self.state.issue(resource, run)

    def find_all(self, resource_class: type[Resource]) -> CollectionResult:
        return self.find_query(resource_class, None)

    def find_query(
        self,
        resource_class: type[Resource],
        query_params: Mapping[str, Any] | None,
    ) -> CollectionResult:
        """GET the collection; returns the (still empty) result immediately."""

        result = CollectionResult(resource_class)
        request = self.builder.build_request(resource_class, Operation.READ, query_params)

        async def run(token: int) -> SyncResult:
            outcome = await self._exchange(request)
            if not self._still_current(result, token, request):
                return _superseded(outcome)
            try:
                sync = self.reconciler.reconcile_find_many(result, outcome)
            finally:
                self.state.settle(result)
            self._notify_load(result, sync)
            return sync

        self.state.issue(result, run)
        return result

    def find_by_key(
        self,
        resource_class: type[R],
        key: Any,
        query_params: Mapping[str, Any] | None = None,
    ) -> R:
        """GET one record; returns the resource immediately, populated on settlement."""

        primary_key = resource_class.get_resource_type().primary_key
        resource = resource_class.model_validate({primary_key: key})
        request = self.builder.build_request(resource, Operation.READ, query_params, resource_key=key)
        self._issue_load(resource, request)
        return resource

    def reload_record(
        self,
        resource: Resource,
        query_params: Mapping[str, Any] | None = None,
    ) -> asyncio.Task[SyncResult]:
        """GET the resource's own URL and merge the server state into it."""

        self.state.ensure_alive(resource)
        request = self.builder.build_request(resource, Operation.READ, query_params)
        return self._issue_load(resource, request)

    # Internals

    def _issue_load(self, resource: Resource, request: RequestDescription) -> asyncio.Task[SyncResult]:
        async def run(token: int) -> SyncResult:
            outcome = await self._exchange(request)
            if not self._still_current(resource, token, request):
                return _superseded(outcome)
            try:
                sync = self.reconciler.reconcile_find(resource, outcome)
            finally:
                self.state.settle(resource)
            self._notify_load(resource, sync)
            return sync

        return self.state.issue(resource, run)

    def _notify_load(self, target: Resource | CollectionResult, result: SyncResult) -> None:
        if not result.ok:
            target.trigger_event(SyncEvent.BECAME_ERROR)
        target.trigger_event(SyncEvent.DID_LOAD)

    async def _exchange(self, request: RequestDescription) -> TransportResponse | None:
        logger.debug("-> %s %s", request.method, request.url)
        try:
            response = await self.transport.submit(request)
        except TransportError as exc:
            logger.warning("%s %s failed: %s", request.method, request.url, exc)
            return None
        logger.info("<- %s %s %d", request.method, request.url, response.status)
        return response

    def _still_current(self, target: SyncTarget, token: int, request: RequestDescription) -> bool:
        if self.state.is_current(target, token):
            return True
        logger.debug("discarding superseded %s %s", request.method, request.url)
        return False


def _superseded(outcome: TransportResponse | None) -> SyncResult:
    return SyncResult(
        ok=outcome is not None and outcome.ok,
        superseded=True,
        status=outcome.status if outcome is not None else None,
    )
