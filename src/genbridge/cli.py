"""genbridge CLI entrypoint."""

from __future__ import annotations

import click

from genbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="genbridge")
def main() -> None:
    """genbridge: canonical content generation over chat-completion APIs."""


# Register subcommands
from genbridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
