"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from genbridge.cli_commands.generate import generate
    from genbridge.cli_commands.models import models
    from genbridge.cli_commands.tokens import count_tokens_cmd

    cli.add_command(generate)
    cli.add_command(models)
    cli.add_command(count_tokens_cmd)
