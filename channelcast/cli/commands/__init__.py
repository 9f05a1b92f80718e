"""Subcommands registered on the ``channelcast`` Typer app."""
