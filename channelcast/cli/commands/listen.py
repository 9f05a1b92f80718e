"""``channelcast listen`` — print envelopes arriving on channels."""

from __future__ import annotations

import json
import threading
from typing import Any, List

import typer
from rich.console import Console
from rich.markup import escape

from channelcast.config import ChannelcastConfig
from channelcast.core.factory import create_router

console = Console()


def listen_cmd(
    channels: List[str] = typer.Argument(..., help="Channels to listen on."),
    count: int = typer.Option(
        0,
        "--count",
        "-n",
        help="Stop after this many messages (0 = until interrupted).",
    ),
    timeout: float = typer.Option(
        0.0,
        "--timeout",
        "-t",
        help="Stop after this many seconds (0 = no limit).",
    ),
) -> None:
    """Subscribe to CHANNELS and print each envelope as it arrives."""
    config = ChannelcastConfig()
    done = threading.Event()
    received: list[Any] = []

    def _print(envelope: Any) -> None:
        received.append(envelope)
        console.print(
            f"[cyan]{escape(str(envelope.get('channel', '?')))}[/cyan] "
            f"{escape(json.dumps(envelope, ensure_ascii=False))}"
        )
        if count and len(received) >= count:
            done.set()

    with create_router(config) as router:
        if router.disabled:
            console.print("[red]Broadcasting is disabled (CHANNELCAST_ENABLED).[/red]")
            raise typer.Exit(code=1)
        for channel in channels:
            router.subscribe(channel, _print)
        console.print(f"[dim]Listening on {', '.join(channels)}. Ctrl+C to stop.[/dim]")
        try:
            done.wait(timeout or None)
        except KeyboardInterrupt:
            pass

    console.print(f"[dim]{len(received)} message(s) received.[/dim]")
