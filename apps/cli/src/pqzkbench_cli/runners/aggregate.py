from __future__ import annotations
from datetime import datetime, timezone
from statistics import fmean
from typing import Optional

from pqzkbench.metrics import AggregatedResult

from .common import BatchOutcome


def aggregate(
    outcome: BatchOutcome,
    *,
    label: str,
    service: str,
    operation: str,
    param_set: str,
    iterations: int,
    requests: int,
    concurrency: int,
    now: Optional[datetime] = None,
) -> AggregatedResult:
    """Fold one batch into a result record.

    Averages, p95 and throughput are means of the per-response values; the
    minimum and maximum are taken across responses. With no successful
    response every statistic is zero.
    """
    results = outcome.results
    if results:
        avg = fmean(r.avg_ms for r in results)
        lo = min(r.min_ms for r in results)
        hi = max(r.max_ms for r in results)
        p95 = fmean(r.p95_ms for r in results)
        tp = fmean(r.throughput for r in results)
    else:
        avg = lo = hi = p95 = tp = 0.0
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return AggregatedResult(
        timestamp=stamp,
        label=label,
        service=service,
        operation=operation,
        param_set=param_set,
        iterations=iterations,
        requests=requests,
        concurrency=concurrency,
        avg_latency_ms=avg,
        min_latency_ms=lo,
        max_latency_ms=hi,
        p95_latency_ms=p95,
        throughput_ops_sec=tp,
        client_total_time_ms=outcome.total_time_ms,
        client_avg_request_ms=outcome.total_time_ms / requests if requests else 0.0,
        error_count=outcome.errors,
        failed_iterations=sum(r.failed_iterations for r in results),
    )
