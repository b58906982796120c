"""JSON serializer for resources.

Why pydantic does the heavy lifting:
- Field coercion and validation already exist on the resource model; the
  serializer only maps wire keys, applies registered transforms and unwraps
  root keys.
- Deserialization validates the merged state *before* touching the resource,
  so a bad payload leaves every field as it was.

Wire shapes accepted:
- single record: `{...}` or `{"post_group": {...}}`
- collection: `[...]` or `{"post_groups": [...]}`
"""

from __future__ import annotations

import json
import logging
import types
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Union, get_args, get_origin

from pydantic import ValidationError

from restsync.core.domain.errors import SerializationError
from restsync.core.domain.resource import Resource
from restsync.core.interfaces.serializer import Transform
from restsync.core.services.paths import decamelize, resource_path

logger = logging.getLogger(__name__)


class DateTimeTransform:
    """ISO 8601 on the wire; also accepts epoch seconds from the server."""

    def serialize(self, value: datetime) -> str:
        return value.isoformat()

    def deserialize(self, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        if isinstance(value, str) and value.endswith("Z"):
            return datetime.fromisoformat(value[:-1] + "+00:00")
        return value


class DateTransform:
    def serialize(self, value: date) -> str:
        return value.isoformat()

    def deserialize(self, value: Any) -> Any:
        return value


class DecimalTransform:
    """Decimals travel as strings to keep their precision."""

    def serialize(self, value: Decimal) -> str:
        return str(value)

    def deserialize(self, value: Any) -> Any:
        if isinstance(value, float):
            return Decimal(repr(value))
        return value


def default_transforms() -> dict[type, Transform]:
    return {
        datetime: DateTimeTransform(),
        date: DateTransform(),
        Decimal: DecimalTransform(),
    }


def _field_type(annotation: Any) -> Any:
    """Unwrap `X | None` / `Optional[X]` to `X`."""

    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


class JSONSerializer:
    data_type = "json"
    content_type = "application/json"

    def __init__(self, *, wrap_root: bool = False) -> None:
        self.wrap_root = wrap_root
        self._transforms: dict[type, Transform] = default_transforms()

    def register_transform(self, field_type: type, transform: Transform) -> None:
        """Configuration-time hook; not safe while requests are in flight."""

        self._transforms[field_type] = transform
        logger.debug("registered transform for %s", getattr(field_type, "__name__", field_type))

    def transform_for(self, annotation: Any) -> Transform | None:
        field_type = _field_type(annotation)
        for base in getattr(field_type, "__mro__", ()):
            if base in self._transforms:
                return self._transforms[base]
        return None

    # Outgoing

    def serialize(self, resource: Resource) -> dict[str, Any]:
        fields = type(resource).model_fields
        transforms = {
            name: transform
            for name, info in fields.items()
            if (transform := self.transform_for(info.annotation)) is not None
        }
        data = resource.model_dump(mode="json", by_alias=True, exclude=set(transforms))
        for name, transform in transforms.items():
            value = getattr(resource, name)
            data[fields[name].alias or name] = transform.serialize(value) if value is not None else None
        if self.wrap_root:
            return {self._singular_key(type(resource)): data}
        return data

    def prepare_data(self, data: Any) -> str:
        return json.dumps(data, ensure_ascii=False)

    # Incoming

    def parse(self, body: str) -> Any:
        try:
            return json.loads(body)
        except (ValueError, RecursionError) as exc:
            raise SerializationError(f"invalid JSON: {type(exc).__name__}: {exc}") from exc

    def deserialize(self, resource: Resource, data: Any) -> None:
        resource_class = type(resource)
        record = self._unwrap_record(resource_class, data)
        wire_values = self._from_wire(resource_class, record)
        merged = resource.model_dump(by_alias=True)
        merged.update(wire_values)
        try:
            fresh = resource_class.model_validate(merged)
        except ValidationError as exc:
            raise SerializationError(f"invalid {resource_class.__name__} payload: {exc}") from exc

        names = self._field_names(resource_class, wire_values)
        resource.assign_clean({name: getattr(fresh, name) for name in names})

    def deserialize_many(self, resource_class: type[Resource], data: Any) -> list[Resource]:
        if isinstance(data, dict):
            plural = resource_path(resource_class.get_resource_type().resource_name)
            if plural not in data:
                raise SerializationError(f"expected a list or a {plural!r} key")
            data = data[plural]
        if not isinstance(data, list):
            raise SerializationError(f"expected a list of records, got {type(data).__name__}")

        items: list[Resource] = []
        for record in data:
            if not isinstance(record, dict):
                raise SerializationError(f"expected a record object, got {type(record).__name__}")
            try:
                items.append(resource_class.model_validate(self._from_wire(resource_class, record)))
            except ValidationError as exc:
                raise SerializationError(f"invalid {resource_class.__name__} record: {exc}") from exc
        return items

    # Helpers

    def _singular_key(self, resource_class: type[Resource]) -> str:
        return decamelize(resource_class.get_resource_type().resource_name)

    def _unwrap_record(self, resource_class: type[Resource], data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise SerializationError(f"expected a record object, got {type(data).__name__}")
        key = self._singular_key(resource_class)
        wire_keys = {info.alias or name for name, info in resource_class.model_fields.items()}
        if key not in wire_keys and isinstance(data.get(key), dict):
            return data[key]
        return data

    def _from_wire(self, resource_class: type[Resource], record: dict[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, info in resource_class.model_fields.items():
            key = info.alias or name
            if key not in record:
                continue
            raw = record[key]
            transform = self.transform_for(info.annotation)
            if transform is None or raw is None:
                values[key] = raw
                continue
            try:
                values[key] = transform.deserialize(raw)
            except (TypeError, ValueError, ArithmeticError, OSError) as exc:
                # Out-of-range epoch values raise OverflowError or OSError depending on the platform.
                raise SerializationError(f"{resource_class.__name__}.{name}: {exc}") from exc

        if resource_class.model_config.get("extra") == "allow":
            for key, raw in record.items():
                values.setdefault(key, raw)
        return values

    def _field_names(self, resource_class: type[Resource], wire_values: dict[str, Any]) -> list[str]:
        by_wire_key = {info.alias or name: name for name, info in resource_class.model_fields.items()}
        return [by_wire_key.get(key, key) for key in wire_values]
