"""Shared CLI output formatters."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from genbridge.core.discovery import ModelInfo  # noqa: TC001
from genbridge.core.interface.models import CanonicalResponse, FunctionCallPart

console = Console()


def print_models_table(models: list[ModelInfo], *, default: str | None = None) -> None:
    """Pretty-print discovered models as a table."""
    table = Table(title="Chat Models")
    table.add_column("Model", style="cyan")
    table.add_column("Owner")
    table.add_column("Default")

    for model in models:
        table.add_row(model.id, model.owned_by or "-", "*" if model.id == default else "")

    console.print(table)


def print_models_json(models: list[ModelInfo]) -> None:
    console.print_json(json.dumps([m.model_dump() for m in models]))


def print_response(response: CanonicalResponse) -> None:
    """Print a complete response: its text, then any function calls."""
    if response.text:
        console.print(response.text, markup=False, highlight=False)
    for part in response.turn.parts:
        if isinstance(part, FunctionCallPart):
            console.print(f"[magenta]call[/magenta] {part.name}({json.dumps(part.args)})")
    if response.usage is not None:
        console.print(
            f"[dim]tokens: prompt={response.usage.prompt_tokens} "
            f"completion={response.usage.completion_tokens} "
            f"total={response.usage.total_tokens}[/dim]"
        )
