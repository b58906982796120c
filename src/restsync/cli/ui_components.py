"""Rich components for the CLI.

Why separate components:
- Keeps command logic apart from rendering details.
- Tables and panels are reused by `get`, `list` and `doctor`.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from restsync.core.domain.resource import CollectionResult, Resource

_MAX_CELL = 80


def _cell(value: Any) -> str:
    if value is None:
        return ""
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    return text if len(text) <= _MAX_CELL else text[: _MAX_CELL - 1] + "…"


def build_record_table(record: Resource) -> Table:
    """Field/value table for a single record."""

    resource_name = type(record).get_resource_type().resource_name
    table = Table(title=f"{resource_name} {record.primary_key}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for name, value in record.model_dump(mode="json").items():
        table.add_row(name, _cell(value))
    return table


def build_collection_table(collection: CollectionResult) -> Table:
    """One row per record; columns are the union of record keys in order of appearance."""

    rows = [item.model_dump(mode="json") for item in collection]
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)

    resource_name = collection.resource_class.get_resource_type().resource_name
    table = Table(title=f"{resource_name} ({len(rows)})")
    for column in columns:
        table.add_column(column, style="cyan" if column == columns[0] else "white")
    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))
    return table


def build_error_panel(errors: Any) -> Panel:
    """Panel for a normalized error (unparsable bodies show as unknown cause)."""

    body = Text()
    if errors is None:
        body.append("The service reported an error without a readable body.", style="dim")
    elif isinstance(errors, dict):
        for field_name, messages in errors.items():
            items: Iterable[Any] = messages if isinstance(messages, list) else [messages]
            for message in items:
                body.append(f"{field_name}: ", style="bold")
                body.append(f"{_cell(message)}\n")
    else:
        body.append(_cell(errors))

    return Panel(body, title=Text("Error", style="bold red"), border_style="red")


def build_settings_table(rows: Iterable[tuple[str, str, str]], *, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    for row in rows:
        table.add_row(*row)
    return table
