"""``genbridge generate``: run one generate call against the endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any
from uuid import uuid4

import click
from rich.logging import RichHandler

from genbridge.cli_commands._output import console, print_response
from genbridge.core.interface.config import ModelConfig
from genbridge.core.interface.generator import OpenAIContentGenerator
from genbridge.core.interface.models import GenerateContentRequest, GenerationConfig
from genbridge.core.interface.request import JSON_MIME_TYPE
from genbridge.utils.observer import LoggingObserver


@click.command("generate")
@click.argument("prompt")
@click.option("--model", default=None, help="Model to call (defaults to OPENAI_MODEL).")
@click.option("--system", "system_instruction", default=None, help="System instruction.")
@click.option(
    "--json-schema",
    "schema_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON schema file; requests JSON-only output.",
)
@click.option("--temperature", type=float, default=None)
@click.option("--max-tokens", type=int, default=None)
@click.option("--stream", is_flag=True, help="Print deltas as they arrive.")
@click.option("--debug", is_flag=True, help="Log raw wire chunks and empty responses.")
def generate(
    prompt: str,
    model: str | None,
    system_instruction: str | None,
    schema_file: str | None,
    temperature: float | None,
    max_tokens: int | None,
    stream: bool,
    debug: bool,
) -> None:
    """Send PROMPT as a single user turn and print the reply."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, handlers=[RichHandler(console=console)])

    schema: Any = None
    if schema_file:
        try:
            schema = json.loads(Path(schema_file).read_text())
        except (OSError, ValueError) as exc:
            console.print(f"[red]Error loading schema:[/red] {exc}")
            sys.exit(1)

    request = GenerateContentRequest(
        model=model,
        contents=prompt,
        config=GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            system_instruction=system_instruction,
            response_mime_type=JSON_MIME_TYPE if schema is not None else None,
            response_json_schema=schema,
        ),
    )
    generator = OpenAIContentGenerator(
        ModelConfig.from_env(),
        observer=LoggingObserver() if debug else None,
    )
    prompt_id = uuid4().hex[:12]

    try:
        if stream:
            asyncio.run(_stream(generator, request, prompt_id))
        else:
            print_response(asyncio.run(generator.generate_content(request, prompt_id)))
    except Exception as exc:
        console.print(f"[red]Generation error:[/red] {exc}")
        sys.exit(1)


async def _stream(
    generator: OpenAIContentGenerator, request: GenerateContentRequest, prompt_id: str
) -> None:
    deltas = await generator.generate_content_stream(request, prompt_id)
    async for delta in deltas:
        if delta.text:
            console.print(delta.text, end="", markup=False, highlight=False)
        for call in delta.function_calls:
            console.print(f"\n[magenta]call[/magenta] {call.name}({json.dumps(call.args)})")
    console.print()
