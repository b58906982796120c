"""Doctor command for configuration and connectivity diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console

from restsync.adapters.http_client import build_async_client
from restsync.cli.ui_components import build_settings_table
from restsync.core.config import AdapterSettings
from restsync.core.services.paths import root_path

app = typer.Typer(no_args_is_help=True, help="Configuration and connectivity checks.")

_console = Console()


async def _check_http(settings: AdapterSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return False, str(exc) or type(exc).__name__
    return True, f"HTTP {response.status_code}"


def _settings(ctx: typer.Context) -> AdapterSettings:
    return ctx.obj if isinstance(ctx.obj, AdapterSettings) else AdapterSettings()


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _settings(ctx)
    root = root_path(settings.url, settings.namespace)

    rows: list[tuple[str, str, str]] = []
    if settings.url:
        rows.append(("Base URL", "OK", settings.url))
    else:
        rows.append(("Base URL", "MISSING", "Set RESTSYNC_URL or pass --url"))
    rows.append(("Namespace", "OK", settings.namespace or "(none)"))
    rows.append(("Root path", "OK" if root else "EMPTY", root or "-"))
    rows.append(("Content-type extension", "ON" if settings.use_content_type_extension else "OFF", ""))
    rows.append(("Timeout", "OK", f"{settings.http_timeout_seconds:g}s"))

    ok_http = False
    if root.startswith(("http://", "https://")):
        ok_http, detail_http = asyncio.run(_check_http(settings, root))
        rows.append(("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http))
    else:
        rows.append(("HTTP connectivity", "SKIPPED", "Root path is not an absolute http(s) URL"))

    _console.print(build_settings_table(rows, title="restsync doctor"))

    if not settings.url:
        _console.print("\n[yellow]Note:[/yellow] without a base URL every request is root-relative.")
    if settings.url and not ok_http:
        raise typer.Exit(code=1)


@app.command(name="config")
def show_config(ctx: typer.Context) -> None:
    """Print the effective settings (environment, .env and CLI overrides)."""

    settings = _settings(ctx)
    rows = [(name, "", str(value)) for name, value in settings.model_dump().items()]
    _console.print(build_settings_table(rows, title="restsync settings"))
