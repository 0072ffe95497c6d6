from __future__ import annotations
"""Concurrent request orchestration for the benchmark client."""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Callable, Dict, List, Optional

import requests

from pqzkbench import BatchCancelled, MalformedResponse, TransportFailure
from pqzkbench.wire import FAILED_FIELD, StatFields

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseStats:
    """One successful response, latencies already in milliseconds."""
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float
    throughput: float
    failed_iterations: int = 0


@dataclass
class BatchOutcome:
    results: List[ResponseStats] = field(default_factory=list)
    errors: int = 0
    total_time_ms: float = 0.0


class HttpTransport:
    """POSTs JSON bodies, one `requests.Session` per worker thread."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def post_json(self, url: str, body: Dict[str, Any]) -> Any:
        resp = self._session().post(url, json=body, timeout=self.timeout)
        if not 200 <= resp.status_code < 300:
            raise TransportFailure(f"HTTP {resp.status_code} from {url}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponse(f"Response from {url} is not JSON") from exc

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()


def response_parser(fields: StatFields) -> Callable[[Any], ResponseStats]:
    """Build a parser that validates one endpoint's JSON body."""

    def _number(payload: Dict[str, Any], name: str) -> float:
        value = payload.get(name)
        if isinstance(value, bool) or not isinstance(value, Real):
            raise MalformedResponse(f"Response field '{name}' missing or not numeric")
        return float(value)

    def _parse(payload: Any) -> ResponseStats:
        if not isinstance(payload, dict):
            raise MalformedResponse("Response body is not a JSON object")
        scale = fields.ms_scale
        failed = payload.get(FAILED_FIELD, 0)
        if isinstance(failed, bool) or not isinstance(failed, int):
            raise MalformedResponse(f"Response field '{FAILED_FIELD}' is not an integer")
        return ResponseStats(
            avg_ms=_number(payload, fields.avg) * scale,
            min_ms=_number(payload, fields.min) * scale,
            max_ms=_number(payload, fields.max) * scale,
            p95_ms=_number(payload, fields.p95) * scale,
            throughput=_number(payload, fields.throughput),
            failed_iterations=failed,
        )

    return _parse


def run_batch(
    transport: Any,
    url: str,
    body: Dict[str, Any],
    n_requests: int,
    concurrency: int,
    parse: Callable[[Any], ResponseStats],
    *,
    cancel: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
) -> BatchOutcome:
    """Issue `n_requests` identical POSTs with at most `concurrency` in flight.

    Failures are counted, never raised. Once `cancel` is set or the
    `deadline` (a `time.monotonic()` value) passes, calls not yet issued are
    skipped and counted as failures; calls already in flight are awaited.
    """
    n_requests = max(1, n_requests)
    workers = max(1, min(concurrency, n_requests))
    outcome = BatchOutcome()

    def _stopped() -> bool:
        if cancel is not None and cancel.is_set():
            return True
        return deadline is not None and time.monotonic() >= deadline

    def _call() -> ResponseStats:
        if _stopped():
            raise BatchCancelled("batch cancelled before the call was issued")
        return parse(transport.post_json(url, body))

    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_call) for _ in range(n_requests)]
        for fut in as_completed(futures):
            try:
                outcome.results.append(fut.result())
            except (requests.RequestException, TransportFailure) as exc:
                outcome.errors += 1
                log.warning("request to %s failed: %s", url, exc)
            except Exception:
                outcome.errors += 1
                log.exception("unexpected failure calling %s", url)
    outcome.total_time_ms = (time.perf_counter() - start) * 1000.0
    return outcome
