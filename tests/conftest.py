from __future__ import annotations

import random
import sys
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_DIRS = (
    ROOT / "libs" / "core" / "src",
    ROOT / "libs" / "adapters" / "liboqs" / "src",
    ROOT / "libs" / "adapters" / "groth16" / "src",
    ROOT / "apps" / "service" / "src",
    ROOT / "apps" / "cli" / "src",
)

for candidate in SRC_DIRS:
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from pqzkbench import OperationInvoker, ParamSet  # noqa: E402
from pqzkbench.wire import KEM_PATH, PROVE_PATH, VERIFY_PATH  # noqa: E402


class FakeKem:
    """Deterministic KEM; every `corrupt_every`-th decapsulation returns garbage."""

    name = "fake-kem"

    def __init__(self, corrupt_every: int = 0) -> None:
        self._counter = 0
        self.corrupt_every = corrupt_every
        self.decaps_calls = 0
        self.closed = False

    def keygen(self) -> tuple[bytes, bytes]:
        tag = self._counter.to_bytes(4, "big", signed=False)
        self._counter += 1
        return b"pk" + tag, b"sk" + tag

    def encapsulate(self, public_key: bytes) -> tuple[bytes, bytes]:
        suffix = public_key[2:]
        return b"ct" + suffix, b"ss" + suffix

    def decapsulate(self, secret_key: bytes, ciphertext: bytes) -> bytes:
        self.decaps_calls += 1
        if self.corrupt_every and self.decaps_calls % self.corrupt_every == 0:
            return b"garbage"
        return b"ss" + ciphertext[2:]

    def close(self) -> None:
        self.closed = True


class KemFactory:
    """Backend factory that remembers every backend it handed out."""

    def __init__(self, **kem_kwargs: Any) -> None:
        self.kem_kwargs = kem_kwargs
        self.created: List[FakeKem] = []

    def __call__(self) -> FakeKem:
        kem = FakeKem(**self.kem_kwargs)
        self.created.append(kem)
        return kem


def kem_payload(**overrides: Any) -> Dict[str, Any]:
    body = {
        "operation": "keygen",
        "param_set": "ml_kem_768",
        "iterations": 10,
        "avg_us": 2000.0,
        "min_us": 1000.0,
        "max_us": 4000.0,
        "p95_us": 3500.0,
        "throughput_ops_sec": 500.0,
        "failed_iterations": 0,
        "timestamp": 1700000000,
    }
    body.update(overrides)
    return body


def prove_payload(**overrides: Any) -> Dict[str, Any]:
    body = {
        "circuit_id": "multiply",
        "iterations": 10,
        "avg_prove_ms": 20.0,
        "min_prove_ms": 10.0,
        "max_prove_ms": 40.0,
        "p95_prove_ms": 35.0,
        "avg_proof_size_bytes": 128,
        "throughput_proofs_sec": 50.0,
        "failed_iterations": 0,
        "timestamp": 1700000000,
    }
    body.update(overrides)
    return body


def verify_payload(**overrides: Any) -> Dict[str, Any]:
    body = {
        "circuit_id": "multiply",
        "iterations": 100,
        "avg_verify_ms": 5.0,
        "min_verify_ms": 4.0,
        "max_verify_ms": 8.0,
        "p95_verify_ms": 7.0,
        "throughput_verifies_sec": 200.0,
        "failed_iterations": 0,
        "timestamp": 1700000000,
    }
    body.update(overrides)
    return body


def _default_responder(url: str, body: Dict[str, Any], call: int) -> Any:
    if url.endswith(KEM_PATH):
        return kem_payload(
            operation=body["operation"], param_set=body["param_set"], iterations=body["iterations"]
        )
    if url.endswith(PROVE_PATH):
        return prove_payload(circuit_id=body["circuit_id"], iterations=body["iterations"])
    if url.endswith(VERIFY_PATH):
        return verify_payload(circuit_id=body["circuit_id"], iterations=body["iterations"])
    raise AssertionError(f"unexpected url {url}")


class FakeTransport:
    """Stands in for HttpTransport; tracks concurrency and every call made.

    `responder(url, body, call_number)` returns the decoded JSON payload or an
    exception instance to raise.
    """

    def __init__(
        self,
        responder: Optional[Callable[[str, Dict[str, Any], int], Any]] = None,
        delay: float = 0.0,
    ) -> None:
        self.responder = responder or _default_responder
        self.delay = delay
        self.calls: List[tuple[str, Dict[str, Any]]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._lock = threading.Lock()

    def post_json(self, url: str, body: Dict[str, Any]) -> Any:
        with self._lock:
            self.calls.append((url, dict(body)))
            call = len(self.calls)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            result = self.responder(url, body, call)
            if isinstance(result, BaseException):
                raise result
            return result
        finally:
            with self._lock:
                self.in_flight -= 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def kem_factory() -> KemFactory:
    return KemFactory()


@pytest.fixture
def kem_invoker(kem_factory: KemFactory) -> OperationInvoker:
    return OperationInvoker(kem_backends={ps: kem_factory for ps in ParamSet})


@pytest.fixture
def lattice_client(kem_invoker: OperationInvoker):
    from pqzkbench_service import create_lattice_app

    app = create_lattice_app(kem_invoker)
    app.config.update(TESTING=True)
    return app.test_client()


@pytest.fixture(scope="session")
def zk_keys():
    from pqzkbench_groth16 import build_key_cache

    return build_key_cache(random.Random(1234))


@pytest.fixture
def zk_invoker(zk_keys) -> OperationInvoker:
    return OperationInvoker(proof_systems=zk_keys, rng=random.Random(99))


@pytest.fixture
def zk_client(zk_invoker: OperationInvoker):
    from pqzkbench_service import create_zk_app

    app = create_zk_app(zk_invoker)
    app.config.update(TESTING=True)
    return app.test_client()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
