"""restsync command line.

Thin layer over `RESTAdapter`: resolves URLs, fetches records into a
schemaless resource type and renders them with Rich.
"""

from __future__ import annotations

import asyncio
import types
from typing import Any, Optional

import typer
from pydantic.config import ConfigDict
from rich.console import Console

from restsync.adapters.http_client import HttpxTransport
from restsync.adapters.json_serializer import JSONSerializer
from restsync.cli import doctor
from restsync.cli.ui_components import (
    build_collection_table,
    build_error_panel,
    build_record_table,
)
from restsync.core.config import AdapterSettings, configure_logging
from restsync.core.domain.models import ResourceType
from restsync.core.domain.resource import CollectionResult, Resource
from restsync.core.services.adapter import RESTAdapter
from restsync.core.services.paths import root_path
from restsync.core.services.requests import RequestBuilder

app = typer.Typer(no_args_is_help=True, help="Synchronize REST resources from the command line.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


class Record(Resource):
    """Schemaless resource: keeps every key the service returns."""

    model_config = ConfigDict(validate_assignment=True, extra="allow")

    id: Any = None


def record_type(resource_name: str) -> type[Record]:
    """A `Record` subclass bound to `resource_name`."""

    namespace = {
        "__module__": __name__,
        "resource_type": ResourceType(resource_name=resource_name, primary_key="id"),
    }
    return types.new_class(resource_name, (Record,), exec_body=lambda body: body.update(namespace))


def _parse_query(values: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in values:
        if "=" not in item:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--query")
        key, value = item.split("=", 1)
        params[key.strip()] = value.strip()
    return params


@app.callback()
def main(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Base URL of the service."),
    namespace: Optional[str] = typer.Option(None, "--namespace", help="Endpoint path (e.g. api/v1)."),
    extension: Optional[bool] = typer.Option(
        None,
        "--extension/--no-extension",
        help="Append the content-type extension (.json) to URLs.",
    ),
) -> None:
    overrides: dict[str, Any] = {}
    if url is not None:
        overrides["url"] = url
    if namespace is not None:
        overrides["namespace"] = namespace
    if extension is not None:
        overrides["use_content_type_extension"] = extension

    settings = AdapterSettings(**overrides)
    configure_logging(settings.log_level)
    ctx.obj = settings


@app.command()
def url(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource type name, e.g. PostGroup."),
    key: Optional[str] = typer.Option(None, "--key", "-k", help="Record key."),
) -> None:
    """Print the URL a resource (or one record) maps to."""

    settings: AdapterSettings = ctx.obj
    builder = RequestBuilder(
        root=root_path(settings.url, settings.namespace),
        serializer=JSONSerializer(),
        use_content_type_extension=settings.use_content_type_extension,
    )
    typer.echo(builder.build_url(ResourceType(resource_name=resource), key))


async def _get(settings: AdapterSettings, resource: str, key: str) -> Resource:
    async with HttpxTransport(settings=settings) as transport:
        adapter = RESTAdapter(transport, settings=settings)
        return await adapter.find_by_key(record_type(resource), key).settled()


async def _list(
    settings: AdapterSettings,
    resource: str,
    params: dict[str, str],
) -> CollectionResult:
    async with HttpxTransport(settings=settings) as transport:
        adapter = RESTAdapter(transport, settings=settings)
        return await adapter.find_query(record_type(resource), params or None).settled()


@app.command()
def get(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource type name, e.g. PostGroup."),
    key: str = typer.Argument(..., help="Record key."),
) -> None:
    """Fetch one record by key."""

    record = asyncio.run(_get(ctx.obj, resource, key))
    if record.is_error:
        _console.print(build_error_panel(record.errors))
        raise typer.Exit(code=1)
    _console.print(build_record_table(record))


@app.command(name="list")
def list_records(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource type name, e.g. PostGroup."),
    query: list[str] = typer.Option([], "--query", "-q", help="Query parameter as key=value."),
) -> None:
    """Fetch a collection, optionally filtered by query parameters."""

    params = _parse_query(query)
    collection = asyncio.run(_list(ctx.obj, resource, params))
    if collection.is_error:
        _console.print(build_error_panel(collection.errors))
        raise typer.Exit(code=1)
    _console.print(build_collection_table(collection))


def run() -> None:
    app()
