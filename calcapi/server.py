from __future__ import annotations

import json
import logging
import os
import time
import uuid

from dotenv import load_dotenv
from flask import Flask, g, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from opentelemetry.sdk.trace.export import SpanExporter
from prometheus_client import CollectorRegistry, Counter, Histogram

from calcapi.http_routes import register_routes
from calcapi.observability import get_current_trace_context, init_otel

load_dotenv()


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - logging
        base = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "timestamp": int(record.created * 1000),
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            base.update(record.extra)
        return json.dumps(base, separators=(",", ":"))


logger = logging.getLogger("calcapi")


def configure_logging() -> None:
    logger.setLevel(os.getenv("CALC_LOG_LEVEL", "INFO").upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    if os.getenv("CALC_LOG_JSON", "1") == "1":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)


def _build_metrics(registry: CollectorRegistry) -> dict:
    return {
        "requests": Counter(
            "calc_requests_total",
            "Total requests",
            ["route", "method", "status"],
            registry=registry,
        ),
        "latency": Histogram(
            "calc_request_latency_seconds",
            "Request latency",
            ["route", "method"],
            registry=registry,
        ),
        "errors": Counter(
            "calc_errors_total",
            "Total server errors",
            ["route", "method", "status"],
            registry=registry,
        ),
        "evaluations": Counter(
            "calc_evaluations_total",
            "Expression evaluations by outcome",
            ["outcome"],
            registry=registry,
        ),
    }


def _build_limiter(app: Flask) -> Limiter | None:
    if os.getenv("CALC_RATE_LIMIT_ENABLED", "1") != "1":
        return None
    return Limiter(
        key_func=get_remote_address,
        app=app,
        storage_uri=os.getenv("CALC_RATE_LIMIT_STORAGE_URL", "memory://"),
    )


def create_app(span_exporter: SpanExporter | None = None) -> Flask:
    configure_logging()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = int(os.getenv("CALC_MAX_REQUEST_BYTES", "65536"))
    init_otel(app, exporter=span_exporter)

    registry = CollectorRegistry(auto_describe=True)
    metrics = _build_metrics(registry)
    app.config["CALC_METRICS_REGISTRY"] = registry
    app.config["CALC_METRICS"] = metrics
    app.config["CALC_LIMITER"] = _build_limiter(app)
    app.config["CALC_RATE_LIMIT"] = os.getenv("CALC_RATE_LIMIT", "120 per minute")

    @app.before_request
    def start_request():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        g.request_start = time.time()
        otel_context = get_current_trace_context()
        if otel_context:
            g.otel_trace_id = otel_context.get("trace_id")

    @app.after_request
    def finalize_request(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers["X-Request-ID"] = request_id
        route = request.url_rule.rule if request.url_rule else request.path
        method = request.method
        status = str(response.status_code)
        duration = time.time() - getattr(g, "request_start", time.time())
        metrics["requests"].labels(route, method, status).inc()
        metrics["latency"].labels(route, method).observe(duration)
        if response.status_code >= 500:
            metrics["errors"].labels(route, method, status).inc()

        fields = {
            "request_id": request_id,
            "route": route,
            "method": method,
            "status": response.status_code,
            "latency_ms": int(duration * 1000),
        }
        otel_trace_id = getattr(g, "otel_trace_id", None)
        if otel_trace_id:
            fields["otel_trace_id"] = otel_trace_id
        logger.info("request", extra={"extra": fields})
        return response

    register_routes(app)
    return app


if __name__ == "__main__":
    port = int(os.getenv("CALC_PORT", "8080"))
    host = os.getenv("CALC_HOST", "127.0.0.1")
    create_app().run(host=host, port=port, debug=False)
