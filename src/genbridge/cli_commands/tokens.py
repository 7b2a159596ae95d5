"""``genbridge count-tokens``: approximate token count, computed locally."""

from __future__ import annotations

import click

from genbridge.cli_commands._output import console
from genbridge.core.context.counter import TiktokenEncoder, count_tokens
from genbridge.core.interface.config import ModelConfig


@click.command("count-tokens")
@click.argument("text")
@click.option("--model", default=None, help="Model whose tokenizer to use.")
def count_tokens_cmd(text: str, model: str | None) -> None:
    """Count the tokens in TEXT."""
    encoder = TiktokenEncoder(model or ModelConfig.from_env().model)
    console.print(count_tokens(text, encoder))
