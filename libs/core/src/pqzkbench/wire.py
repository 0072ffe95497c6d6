from __future__ import annotations
"""JSON wire contract between the services and the benchmark client.

KEM statistics travel in microseconds, zk statistics in milliseconds. Both
sides render and parse through the field maps below.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict

from .measurement import Measurement

KEM_PATH = "/kem_bench"
PROVE_PATH = "/zk_prove_bench"
VERIFY_PATH = "/zk_verify_bench"
HEALTH_PATH = "/health"

LATTICE_SERVICE = "lattice_service"
ZK_SERVICE = "zk_service"

PROOF_SIZE_FIELD = "avg_proof_size_bytes"
FAILED_FIELD = "failed_iterations"


@dataclass(frozen=True)
class StatFields:
    avg: str
    min: str
    max: str
    p95: str
    throughput: str
    unit: str  # "us" | "ms"

    @property
    def names(self) -> tuple[str, ...]:
        return (self.avg, self.min, self.max, self.p95, self.throughput)

    @property
    def ms_scale(self) -> float:
        """Factor turning this endpoint's latency unit into milliseconds."""
        return 0.001 if self.unit == "us" else 1.0


KEM_FIELDS = StatFields("avg_us", "min_us", "max_us", "p95_us", "throughput_ops_sec", "us")
PROVE_FIELDS = StatFields(
    "avg_prove_ms", "min_prove_ms", "max_prove_ms", "p95_prove_ms", "throughput_proofs_sec", "ms"
)
VERIFY_FIELDS = StatFields(
    "avg_verify_ms", "min_verify_ms", "max_verify_ms", "p95_verify_ms", "throughput_verifies_sec", "ms"
)


def _stats_block(m: Measurement, fields: StatFields) -> Dict[str, Any]:
    stats = m.stats.to_milliseconds() if fields.unit == "ms" else m.stats
    return {
        fields.avg: stats.avg,
        fields.min: stats.min,
        fields.max: stats.max,
        fields.p95: stats.p95,
        fields.throughput: stats.throughput,
    }


def kem_response(m: Measurement) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "operation": m.identity.kind.value if m.identity.kind else None,
        "param_set": m.identity.variant,
        "iterations": m.iterations,
    }
    body.update(_stats_block(m, KEM_FIELDS))
    body[FAILED_FIELD] = m.failed_iterations
    body["timestamp"] = m.timestamp
    return body


def prove_response(m: Measurement) -> Dict[str, Any]:
    body: Dict[str, Any] = {"circuit_id": m.identity.variant, "iterations": m.iterations}
    stats = _stats_block(m, PROVE_FIELDS)
    throughput = stats.pop(PROVE_FIELDS.throughput)
    body.update(stats)
    body[PROOF_SIZE_FIELD] = m.artifact_size or 0
    body[PROVE_FIELDS.throughput] = throughput
    body[FAILED_FIELD] = m.failed_iterations
    body["timestamp"] = m.timestamp
    return body


def verify_response(m: Measurement) -> Dict[str, Any]:
    body: Dict[str, Any] = {"circuit_id": m.identity.variant, "iterations": m.iterations}
    body.update(_stats_block(m, VERIFY_FIELDS))
    body[FAILED_FIELD] = m.failed_iterations
    body["timestamp"] = m.timestamp
    return body


def health_response(service: str) -> Dict[str, Any]:
    return {"status": "healthy", "service": service, "timestamp": int(time.time())}
