"""channelcast CLI — Typer-based command-line interface.

Provides the ``channelcast`` command with subcommands for publishing a
payload, listening on channels, printing the name catalogs and showing the
effective configuration.

All output uses Rich for formatted terminal display.
"""
