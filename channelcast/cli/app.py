"""Main Typer application — imports and registers all CLI commands.

Entry point: ``channelcast`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from channelcast.cli.commands.catalog import catalog_cmd
from channelcast.cli.commands.listen import listen_cmd
from channelcast.cli.commands.publish import publish_cmd
from channelcast.cli.commands.status import status_cmd
from channelcast.config import ChannelcastConfig, configure_logging

app = typer.Typer(
    name="channelcast",
    help="channelcast: channel multiplexing and broadcast duplication over pub/sub.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _setup() -> None:
    configure_logging(ChannelcastConfig().log_level)


app.command(name="publish", help="Publish a JSON payload on a channel.")(publish_cmd)
app.command(name="listen", help="Print envelopes arriving on channels.")(listen_cmd)
app.command(name="catalog", help="Print the channel, event and entity catalogs.")(catalog_cmd)
app.command(name="status", help="Show the effective configuration.")(status_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
