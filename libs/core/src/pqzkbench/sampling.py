from __future__ import annotations
"""Timing sampler: run one prepared operation N times, sequentially.

Durations are whole microseconds taken from a monotonic clock. An iteration
that raises `SamplingFailure` contributes no duration and is counted in
`failed_iterations`; the remaining iterations still run.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .errors import SamplingFailure

log = logging.getLogger(__name__)


@dataclass
class SampleRun:
    requested: int
    durations_us: List[int] = field(default_factory=list)
    failed_iterations: int = 0

    @property
    def completed(self) -> int:
        return len(self.durations_us)


def sample(
    fn: Callable[[], Any],
    iterations: int,
    *,
    on_result: Optional[Callable[[Any], None]] = None,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> SampleRun:
    """Time `fn` `iterations` times on the calling thread.

    `on_result` receives each successful return value after the clock has
    stopped, so inspecting artifacts (e.g. proof size) is never timed.
    """
    run = SampleRun(requested=iterations)
    last_error: Optional[SamplingFailure] = None
    for _ in range(iterations):
        t0 = clock()
        try:
            result = fn()
        except SamplingFailure as exc:
            run.failed_iterations += 1
            last_error = exc
            continue
        elapsed_ns = clock() - t0
        run.durations_us.append(max(0, elapsed_ns // 1000))
        if on_result is not None:
            on_result(result)
    if run.failed_iterations:
        log.warning(
            "%d of %d iterations failed; last error: %s",
            run.failed_iterations,
            iterations,
            last_error,
        )
    return run
