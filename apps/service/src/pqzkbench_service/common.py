from __future__ import annotations
"""Request handling shared by the lattice and zk Flask apps."""

import logging
from typing import Any, Callable, Dict, Tuple

from flask import Flask, jsonify, request

from pqzkbench import InvalidParameter, MalformedRequest, OperationIdentity, OperationInvoker
from pqzkbench.measurement import Measurement, run_measurement
from pqzkbench.wire import HEALTH_PATH, health_response

log = logging.getLogger(__name__)

Parser = Callable[[Any], Tuple[OperationIdentity, int]]
Renderer = Callable[[Measurement], Dict[str, Any]]


def new_app(name: str) -> Flask:
    app = Flask(name)
    # keep wire field order as rendered
    app.json.sort_keys = False

    @app.get(HEALTH_PATH)
    def health():
        return jsonify(health_response(name))

    return app


def handle_measurement(invoker: OperationInvoker, parse: Parser, render: Renderer):
    payload = request.get_json(force=True, silent=True)
    try:
        identity, iterations = parse(payload)
        measurement = run_measurement(invoker, identity, iterations)
    except (InvalidParameter, MalformedRequest) as exc:
        log.info("rejected %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:
        log.exception("benchmark error on %s: %s", request.path, exc)
        return jsonify({"error": "Internal server error"}), 500
    log.info(
        "%s x%d avg=%.1fus failed=%d",
        identity,
        measurement.iterations,
        measurement.stats.avg,
        measurement.failed_iterations,
    )
    return jsonify(render(measurement))
