"""Request descriptions for resource operations."""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

from restsync.core.domain.models import Operation, RequestDescription, ResourceType
from restsync.core.domain.resource import Resource
from restsync.core.interfaces.serializer import Serializer
from restsync.core.services.paths import resource_path

logger = logging.getLogger(__name__)

_ACCEPT_BY_DATA_TYPE: dict[str, str] = {
    "json": "application/json",
    "xml": "application/xml",
}


def build_url(
    root: str,
    resource_type: ResourceType,
    resource_key: Any = None,
    primary_key_value: Any = None,
    *,
    use_content_type_extension: bool = False,
    data_type: str | None = None,
) -> str:
    """`{root}/{resource_path}[/{key}][.{data_type}]`.

    An explicit `resource_key` wins over the resource's own primary key; with
    neither the URL addresses the collection.
    """

    parts = [root, resource_path(resource_type.resource_name)]
    key = resource_key if resource_key not in (None, "") else primary_key_value
    if key not in (None, ""):
        parts.append(quote(str(key), safe=""))

    url = "/".join(parts)
    if use_content_type_extension and data_type:
        url = f"{url}.{data_type}"
    return url


class RequestBuilder:
    """Turns (resource, operation) into a `RequestDescription`."""

    def __init__(
        self,
        *,
        root: str,
        serializer: Serializer,
        use_content_type_extension: bool = False,
    ) -> None:
        self.root = root
        self.serializer = serializer
        self.use_content_type_extension = use_content_type_extension

    def build_url(
        self,
        resource_type: ResourceType,
        resource_key: Any = None,
        primary_key_value: Any = None,
    ) -> str:
        return build_url(
            self.root,
            resource_type,
            resource_key,
            primary_key_value,
            use_content_type_extension=self.use_content_type_extension,
            data_type=self.serializer.data_type,
        )

    def build_request(
        self,
        target: Resource | type[Resource],
        operation: Operation,
        query_params: Mapping[str, Any] | None = None,
        resource_key: Any = None,
    ) -> RequestDescription:
        if isinstance(target, Resource):
            resource_class: type[Resource] = type(target)
            primary_key_value = target.primary_key
        else:
            resource_class = target
            primary_key_value = None

        url = self.build_url(resource_class.get_resource_type(), resource_key, primary_key_value)
        method = operation.method

        payload: str | None = None
        params: dict[str, Any] | None = None
        if method == "GET":
            params = dict(query_params) if query_params else None
        elif isinstance(target, Resource):
            payload = self.serializer.prepare_data(self.serializer.serialize(target))

        data_type = self.serializer.data_type
        request = RequestDescription(
            method=method,
            url=url,
            params=params,
            payload=payload,
            content_type=self.serializer.content_type if payload is not None else None,
            accept=_ACCEPT_BY_DATA_TYPE.get(data_type, "*/*") if data_type else None,
            data_type=data_type,
        )
        logger.debug("built %s %s", request.method, request.url)
        return request
