"""OpenTelemetry tracing helpers for genbridge.

A thin wrapper around the OpenTelemetry API so the generator can call
``get_tracer()`` without caring whether the SDK is installed. Without a
configured SDK the API hands back no-op spans.

Usage::

    from genbridge.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("genbridge.generate") as span:
        span.set_attribute(ATTR_MODEL, "gpt-4o")

Call :func:`configure_telemetry` once at startup to export spans
(requires the ``otel`` extra: ``pip install genbridge[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_MODEL = "genbridge.model"
ATTR_PROMPT_ID = "genbridge.prompt_id"
ATTR_MESSAGE_COUNT = "genbridge.messages"
ATTR_TOOL_COUNT = "genbridge.tools"
ATTR_JSON_MODE = "genbridge.json_mode"
ATTR_TOKENS_PROMPT = "genbridge.tokens.prompt"
ATTR_TOKENS_COMPLETION = "genbridge.tokens.completion"
ATTR_TOKENS_TOTAL = "genbridge.tokens.total"
ATTR_FINISH_REASON = "genbridge.finish_reason"
ATTR_STREAM_CHUNKS = "genbridge.stream.chunks"

_INSTRUMENTATION_NAME = "genbridge"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "genbridge",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Configure OpenTelemetry tracing (requires ``genbridge[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to stdout.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install genbridge[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    provider = TracerProvider(resource=resource)  # pyright: ignore[reportUnknownVariableType]

    if export_to_console:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    """Attach the OTLP gRPC exporter."""
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install genbridge[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
