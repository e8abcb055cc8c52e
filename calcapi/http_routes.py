from __future__ import annotations

import logging
import os
from typing import Any, Dict, Tuple

from flask import Response, current_app, g, jsonify, request
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from calcapi.calculator import evaluate
from calcapi.errors import CalculationError
from calcapi.observability import evaluation_span, record_evaluation

logger = logging.getLogger("calcapi.http")


def register_routes(app) -> None:
    limiter = app.config.get("CALC_LIMITER")
    rate_limit = app.config.get("CALC_RATE_LIMIT")

    def _limit_route(func):
        if limiter:
            return limiter.limit(rate_limit)(func)
        return func

    def _api_enabled() -> bool:
        return os.getenv("CALC_ENABLE_API", "1") == "1"

    def _auth_required() -> bool:
        if os.getenv("CALC_ENV", "development").lower() == "production":
            return True
        return os.getenv("CALC_REQUIRE_BEARER", "0") == "1"

    def require_bearer() -> Tuple[bool, Dict[str, Any] | None]:
        if not _auth_required():
            return True, None
        token = os.getenv("CALC_BEARER_TOKEN", "")
        got = request.headers.get("Authorization", "")
        if not token or got != f"Bearer {token}":
            return False, {"error": {"message": "Unauthorized", "type": "auth_error", "code": 401}}
        return True, None

    @app.get("/health")
    def health():
        return {"status": "ok", "service": "calcapi"}

    @app.get("/ready")
    def ready():
        if not _api_enabled():
            return {"status": "disabled", "service": "calcapi"}, 503
        return {"status": "ready", "service": "calcapi"}

    @app.get("/metrics")
    def metrics():
        if os.getenv("CALC_METRICS_ENABLED", "1") != "1":
            return {"status": "disabled", "service": "calcapi"}, 503
        ok, err = require_bearer()
        if not ok:
            return jsonify(err), 401
        registry = current_app.config["CALC_METRICS_REGISTRY"]
        return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)

    @app.post("/api/v1/calculate")
    @_limit_route
    def calculate():
        if not _api_enabled():
            return jsonify({"error": {"message": "API disabled", "type": "service_unavailable", "code": 503}}), 503
        ok, err = require_bearer()
        if not ok:
            return jsonify(err), 401

        payload = request.get_json(force=True, silent=True)
        if not isinstance(payload, dict) or not isinstance(payload.get("expression"), str):
            return jsonify({"error": "Invalid request payload"}), 400

        expression = payload["expression"]
        evaluations = current_app.config["CALC_METRICS"]["evaluations"]
        with evaluation_span(expression) as span:
            try:
                result = evaluate(expression)
            except CalculationError as exc:
                record_evaluation(span, exc)
                error = exc
            else:
                record_evaluation(span)
                error = None

        if error is not None:
            evaluations.labels(error.kind.value).inc()
            logger.info(
                "calculation_failed",
                extra={"extra": {"request_id": getattr(g, "request_id", None), "error_type": error.kind.value}},
            )
            return jsonify(error.to_dict()), 422

        evaluations.labels("ok").inc()
        return jsonify({"result": result}), 200
