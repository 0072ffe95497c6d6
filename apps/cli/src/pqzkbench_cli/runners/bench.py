from __future__ import annotations
"""Benchmark runners: one batch per call, one AggregatedResult out."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from pqzkbench import Family
from pqzkbench.metrics import AggregatedResult
from pqzkbench.operations import kem_matrix
from pqzkbench.wire import (
    KEM_FIELDS,
    KEM_PATH,
    LATTICE_SERVICE,
    PROVE_FIELDS,
    PROVE_PATH,
    VERIFY_FIELDS,
    VERIFY_PATH,
    ZK_SERVICE,
    StatFields,
)

from .aggregate import aggregate
from .common import response_parser, run_batch

log = logging.getLogger(__name__)

SUITE_CIRCUITS = ("multiply", "cube_root")
VERIFY_MULTIPLIER = 10


@dataclass(frozen=True)
class Endpoint:
    service: str
    path: str
    fields: StatFields


KEM_ENDPOINT = Endpoint(LATTICE_SERVICE, KEM_PATH, KEM_FIELDS)
ZK_ENDPOINTS = {
    Family.ZK_PROVE: (Endpoint(ZK_SERVICE, PROVE_PATH, PROVE_FIELDS), "prove"),
    Family.ZK_VERIFY: (Endpoint(ZK_SERVICE, VERIFY_PATH, VERIFY_FIELDS), "verify"),
}


def _join(base: str, path: str) -> str:
    return base.rstrip("/") + path


def _run(
    transport: Any,
    endpoint: Endpoint,
    base_url: str,
    body: Dict[str, Any],
    *,
    operation: str,
    param_set: str,
    iterations: int,
    requests: int,
    concurrency: int,
    label: str,
    **batch_opts: Any,
) -> AggregatedResult:
    outcome = run_batch(
        transport,
        _join(base_url, endpoint.path),
        body,
        requests,
        concurrency,
        response_parser(endpoint.fields),
        **batch_opts,
    )
    return aggregate(
        outcome,
        label=label,
        service=endpoint.service,
        operation=operation,
        param_set=param_set,
        iterations=iterations,
        requests=requests,
        concurrency=concurrency,
    )


def run_kem_benchmark(
    transport: Any,
    url: str,
    param_set: str,
    operation: str,
    iterations: int,
    requests: int = 1,
    concurrency: int = 1,
    label: str = "default",
    **batch_opts: Any,
) -> AggregatedResult:
    body = {"param_set": param_set, "iterations": iterations, "operation": operation}
    return _run(
        transport, KEM_ENDPOINT, url, body,
        operation=operation, param_set=param_set, iterations=iterations,
        requests=requests, concurrency=concurrency, label=label, **batch_opts,
    )


def run_zk_benchmark(
    transport: Any,
    url: str,
    family: Family,
    circuit_id: str,
    iterations: int,
    requests: int = 1,
    concurrency: int = 1,
    label: str = "default",
    **batch_opts: Any,
) -> AggregatedResult:
    endpoint, operation = ZK_ENDPOINTS[family]
    body = {"circuit_id": circuit_id, "iterations": iterations}
    return _run(
        transport, endpoint, url, body,
        operation=operation, param_set=circuit_id, iterations=iterations,
        requests=requests, concurrency=concurrency, label=label, **batch_opts,
    )


def run_suite(
    transport: Any,
    lattice_url: str,
    zk_url: str,
    kem_iterations: int,
    zk_iterations: int,
    label: str = "default",
    circuits: Sequence[str] = SUITE_CIRCUITS,
    progress: Optional[Callable[[str], None]] = None,
    **batch_opts: Any,
) -> List[AggregatedResult]:
    """Every KEM parameter set and operation, then prove and verify per circuit."""
    notify = progress or (lambda msg: log.info(msg))
    results: List[AggregatedResult] = []
    for param_set, operation in kem_matrix():
        notify(f"KEM {param_set.value} {operation.value}")
        results.append(
            run_kem_benchmark(
                transport, lattice_url, param_set.value, operation.value,
                kem_iterations, 1, 1, label, **batch_opts,
            )
        )
    for circuit_id in circuits:
        notify(f"ZK prove {circuit_id}")
        results.append(
            run_zk_benchmark(
                transport, zk_url, Family.ZK_PROVE, circuit_id,
                zk_iterations, 1, 1, label, **batch_opts,
            )
        )
        notify(f"ZK verify {circuit_id}")
        results.append(
            run_zk_benchmark(
                transport, zk_url, Family.ZK_VERIFY, circuit_id,
                zk_iterations * VERIFY_MULTIPLIER, 1, 1, label, **batch_opts,
            )
        )
    return results
