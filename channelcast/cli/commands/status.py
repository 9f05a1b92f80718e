"""``channelcast status`` — show the effective configuration."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from channelcast.config import ChannelcastConfig

console = Console()


def status_cmd() -> None:
    """Show transport settings and whether broadcasting is enabled."""
    config = ChannelcastConfig()

    table = Table(title="channelcast configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    enabled = "[green]Yes[/green]" if config.enabled else "[red]No[/red]"
    table.add_row("Enabled", enabled)
    table.add_row("Transport", config.transport)
    if config.is_redis:
        table.add_row("Redis URL", config.redis_url)
        table.add_row("Poll interval", f"{config.poll_interval}s")
    else:
        table.add_row("History size", str(config.history_size))
    table.add_row("Log level", config.log_level)

    console.print(table)
