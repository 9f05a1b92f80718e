"""``channelcast publish`` — publish one payload on a channel."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from channelcast.config import ChannelcastConfig
from channelcast.core.factory import create_router

console = Console()


def publish_cmd(
    channel: str = typer.Argument(..., help="Channel to publish on."),
    data: str = typer.Option(
        "{}",
        "--data",
        "-d",
        help="JSON object to publish.",
    ),
) -> None:
    """Publish a JSON payload on CHANNEL (and on the "all" channel)."""
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON payload:[/red] {exc}")
        raise typer.Exit(code=1)
    if not isinstance(payload, dict):
        console.print("[red]Payload must be a JSON object.[/red]")
        raise typer.Exit(code=1)

    config = ChannelcastConfig()
    with create_router(config) as router:
        if router.disabled:
            console.print("[red]Broadcasting is disabled (CHANNELCAST_ENABLED).[/red]")
            raise typer.Exit(code=1)
        try:
            envelope = router.publish(channel, payload)
        except ValueError as exc:
            console.print(f"[red]Cannot publish:[/red] {escape(str(exc))}")
            raise typer.Exit(code=1)
        targets = router.broadcast_targets(channel)

    console.print(
        Panel(
            Text(json.dumps(envelope, indent=2, ensure_ascii=False)),
            title=f"[bold]Published on {', '.join(targets)}[/bold]",
            border_style="green",
        )
    )
