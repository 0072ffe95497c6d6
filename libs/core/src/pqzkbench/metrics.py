from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, List

"""Client-side result record, one per benchmark invocation.

Latencies are milliseconds regardless of the endpoint's wire unit.
"""

@dataclass(frozen=True)
class AggregatedResult:
    timestamp: str
    label: str
    service: str
    operation: str
    param_set: str
    iterations: int
    requests: int
    concurrency: int
    avg_latency_ms: float
    min_latency_ms: float
    max_latency_ms: float
    p95_latency_ms: float
    throughput_ops_sec: float
    client_total_time_ms: float
    client_avg_request_ms: float
    error_count: int
    failed_iterations: int = 0

    def as_row(self) -> Dict[str, Any]:
        return asdict(self)


FIELDNAMES: List[str] = [f.name for f in fields(AggregatedResult)]
