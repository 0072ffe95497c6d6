from __future__ import annotations
"""Descriptive statistics over one duration sequence.

p95 uses nearest-rank selection on the ascending sort: index
``min(floor(len * 0.95), len - 1)``. Existing clients depend on this exact
rank, so it is not interpolated.
"""

from dataclasses import dataclass, replace
from typing import Sequence

_US_PER_SECOND = 1_000_000.0


@dataclass(frozen=True)
class MeasurementStats:
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0
    p95: float = 0.0
    throughput: float = 0.0

    def to_milliseconds(self) -> "MeasurementStats":
        """Rescale latencies from microseconds; throughput is unit-free."""
        return replace(
            self,
            avg=self.avg / 1000.0,
            min=self.min / 1000.0,
            max=self.max / 1000.0,
            p95=self.p95 / 1000.0,
        )


def percentile(samples: Sequence[int], fraction: float) -> float:
    if not samples:
        return 0.0
    ordered = sorted(samples)
    idx = int(len(ordered) * fraction)
    return float(ordered[min(idx, len(ordered) - 1)])


def throughput(avg_us: float) -> float:
    """Operations per second for a mean latency in microseconds."""
    return _US_PER_SECOND / avg_us if avg_us > 0 else 0.0


def reduce(samples_us: Sequence[int]) -> MeasurementStats:
    if not samples_us:
        return MeasurementStats()
    avg = sum(samples_us) / len(samples_us)
    return MeasurementStats(
        avg=avg,
        min=float(min(samples_us)),
        max=float(max(samples_us)),
        p95=percentile(samples_us, 0.95),
        throughput=throughput(avg),
    )
