from __future__ import annotations
"""Request contract shared by the measurement endpoints.

A request is parsed and validated, the iteration count is clamped into the
family's range (never rejected), the invoker prepares the operation, the
sampler times it and the statistics engine reduces the durations. Everything
runs synchronously on the calling thread.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple

from .errors import MalformedRequest
from .invoker import OperationInvoker
from .operations import (
    Family,
    OperationIdentity,
    clamp_iterations,
    parse_kem_operation,
    parse_param_set,
)
from .sampling import sample
from .stats import MeasurementStats, reduce


@dataclass(frozen=True)
class Measurement:
    identity: OperationIdentity
    iterations: int
    stats: MeasurementStats  # microseconds
    failed_iterations: int
    timestamp: int
    artifact_size: Optional[int] = None


def _require(body: Mapping[str, Any], name: str, kind: type) -> Any:
    if name not in body:
        raise MalformedRequest(f"Missing field '{name}'")
    value = body[name]
    # bool is an int subclass; reject it for counts
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise MalformedRequest(f"Field '{name}' must be of type {kind.__name__}")
    return value


def _as_object(body: Any) -> Mapping[str, Any]:
    if not isinstance(body, Mapping):
        raise MalformedRequest("Request body must be a JSON object")
    return body


def parse_kem_request(body: Any) -> Tuple[OperationIdentity, int]:
    """Parse ``{param_set, operation, iterations}``."""
    body = _as_object(body)
    param_set = parse_param_set(_require(body, "param_set", str))
    operation = parse_kem_operation(_require(body, "operation", str))
    iterations = _require(body, "iterations", int)
    return OperationIdentity.kem(param_set, operation), iterations


def parse_zk_request(body: Any, family: Family) -> Tuple[OperationIdentity, int]:
    """Parse ``{circuit_id, iterations}``; the circuit id is checked on prepare."""
    body = _as_object(body)
    circuit_id = _require(body, "circuit_id", str)
    iterations = _require(body, "iterations", int)
    return OperationIdentity(family, circuit_id), iterations


def run_measurement(
    invoker: OperationInvoker,
    identity: OperationIdentity,
    requested_iterations: int,
    *,
    wall_clock: Callable[[], float] = time.time,
) -> Measurement:
    iterations = clamp_iterations(identity.family, requested_iterations)
    prepared = invoker.prepare(identity)
    try:
        run = sample(prepared.run, iterations, on_result=prepared.observe)
    finally:
        if prepared.close is not None:
            prepared.close()
    return Measurement(
        identity=identity,
        iterations=iterations,
        stats=reduce(run.durations_us),
        failed_iterations=run.failed_iterations,
        timestamp=int(wall_clock()),
        artifact_size=prepared.artifact_size,
    )
