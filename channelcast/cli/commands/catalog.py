"""``channelcast catalog`` — print the channel, event and entity catalogs."""

from __future__ import annotations

from typing import Mapping

from rich.console import Console
from rich.table import Table

from channelcast.models.catalog import CHANNELS, ENTITIES, EVENTS

console = Console()


def _catalog_table(title: str, catalog: Mapping[str, str]) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Value", style="green")
    for name, value in catalog.items():
        table.add_row(name, value)
    return table


def catalog_cmd() -> None:
    """Print the symbolic names producers and consumers share."""
    console.print(_catalog_table("Channels", CHANNELS))
    console.print(_catalog_table("Events", EVENTS))
    console.print(_catalog_table("Entities", ENTITIES))
