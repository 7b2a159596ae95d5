"""``genbridge models``: list chat models offered by the endpoint."""

from __future__ import annotations

import asyncio

import click

from genbridge.cli_commands._output import print_models_json, print_models_table
from genbridge.core.discovery import default_model, fetch_chat_models
from genbridge.core.interface.config import ModelConfig


@click.command("models")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def models(as_json: bool) -> None:
    """List chat models from the configured endpoint.

    Falls back to a built-in list when the endpoint cannot be reached.
    """
    config = ModelConfig.from_env()
    found = asyncio.run(fetch_chat_models(config))

    if as_json:
        print_models_json(found)
    else:
        print_models_table(found, default=default_model())
