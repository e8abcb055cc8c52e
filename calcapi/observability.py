"""OpenTelemetry wiring for the calculator service.

Tracing is opt-in (``CALC_OTEL_ENABLED=1``). Each app gets its own tracer
provider, kept in ``app.config["CALC_TRACER"]``; the global provider is left
alone so several apps can live in one process.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from flask import current_app
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

from calcapi.errors import CalculationError


logger = logging.getLogger("calcapi.observability")

EVALUATE_SPAN = "calcapi.evaluate"


def init_otel(app, exporter: Optional[SpanExporter] = None) -> None:
    """Attach a tracer to ``app`` when tracing is enabled.

    ``exporter`` replaces the OTLP exporter and is flushed synchronously.
    """
    app.config["CALC_OTEL_ENABLED"] = os.getenv("CALC_OTEL_ENABLED", "0") == "1"
    app.config["CALC_TRACER"] = None
    if not app.config["CALC_OTEL_ENABLED"]:
        return

    service_name = os.getenv("CALC_SERVICE_NAME", "calcapi")
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if exporter is None:
        endpoint = os.getenv("CALC_OTEL_EXPORTER_OTLP_ENDPOINT", "http://127.0.0.1:4318/v1/traces")
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        logger.info("OpenTelemetry enabled", extra={"extra": {"endpoint": endpoint}})
    else:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    FlaskInstrumentor().instrument_app(app, tracer_provider=provider)
    app.config["CALC_TRACER"] = provider.get_tracer("calcapi")


@contextmanager
def evaluation_span(expression: str) -> Iterator[Optional[trace.Span]]:
    tracer = current_app.config.get("CALC_TRACER")
    if tracer is None:
        yield None
        return
    # Failed evaluations are recorded by record_evaluation, not as exceptions.
    with tracer.start_as_current_span(
        EVALUATE_SPAN,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.set_attribute("calc.expression_length", len(expression))
        yield span


def record_evaluation(span: Optional[trace.Span], error: Optional[CalculationError] = None) -> None:
    if span is None:
        return
    if error is None:
        span.set_attribute("calc.outcome", "ok")
        return
    span.set_attribute("calc.outcome", error.kind.value)
    attributes = {"error_type": error.kind.value, "message": error.message}
    if error.position is not None:
        span.set_attribute("calc.error_position", error.position)
        attributes["position"] = error.position
    span.add_event("calculation_failed", attributes=attributes)


def get_current_trace_context() -> dict[str, str] | None:
    if not current_app.config.get("CALC_OTEL_ENABLED"):
        return None

    span = trace.get_current_span()
    if not span:
        return None

    ctx = span.get_span_context()
    if not ctx or not ctx.is_valid:
        return None

    return {
        "trace_id": f"{ctx.trace_id:032x}",
        "span_id": f"{ctx.span_id:016x}",
    }
