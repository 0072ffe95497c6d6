from __future__ import annotations
"""Operation invoker: resolve an identity to a prepared, timed callable.

Setup (key generation, ciphertexts, witnesses, reference proofs) runs once in
`prepare`, outside the timed closure, so a sampling run measures only the
operation under test.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import SamplingFailure, UnknownOperation
from .interfaces import KemBackend, ProofSystem, RandomSource
from .operations import Family, KemOperation, OperationIdentity, ParamSet

log = logging.getLogger(__name__)

KemFactory = Callable[[], KemBackend]


@dataclass
class PreparedOperation:
    identity: OperationIdentity
    run: Callable[[], Any]
    observe: Optional[Callable[[Any], None]] = None
    close: Optional[Callable[[], None]] = None
    artifacts: Dict[str, int] = field(default_factory=dict)

    @property
    def artifact_size(self) -> Optional[int]:
        return self.artifacts.get("size_bytes")


def _guarded(identity: OperationIdentity, fn: Callable[[], Any]) -> Callable[[], Any]:
    """Turn backend errors into per-iteration sampling failures."""

    def _op() -> Any:
        try:
            return fn()
        except SamplingFailure:
            raise
        except Exception as exc:
            raise SamplingFailure(f"{identity}: {exc}") from exc

    return _op


def _kem_keygen_factory(kem: KemBackend) -> Callable[[], Any]:
    def _op() -> None:
        kem.keygen()

    return _op


def _kem_encaps_factory(kem: KemBackend) -> Callable[[], Any]:
    """Prepare one keypair, return op that only runs encapsulate."""
    pk, _ = kem.keygen()

    def _op() -> None:
        kem.encapsulate(pk)

    return _op


def _kem_decaps_factory(kem: KemBackend) -> Callable[[], Any]:
    """Prepare keys and ciphertext, return op that decapsulates and checks."""
    pk, sk = kem.keygen()
    ct, expected = kem.encapsulate(pk)

    def _op() -> None:
        if kem.decapsulate(sk, ct) != expected:
            raise SamplingFailure("decapsulated secret does not match encapsulated secret")

    return _op


def _kem_handshake_factory(kem: KemBackend) -> Callable[[], Any]:
    def _op() -> None:
        pk, sk = kem.keygen()
        ct, sent = kem.encapsulate(pk)
        if kem.decapsulate(sk, ct) != sent:
            raise SamplingFailure("handshake secrets differ")

    return _op


_KEM_FACTORIES: Dict[KemOperation, Callable[[KemBackend], Callable[[], Any]]] = {
    KemOperation.KEYGEN: _kem_keygen_factory,
    KemOperation.ENCAPS: _kem_encaps_factory,
    KemOperation.DECAPS: _kem_decaps_factory,
    KemOperation.FULL_HANDSHAKE: _kem_handshake_factory,
}


class OperationInvoker:
    """Registry of timed operations for both services.

    `kem_backends` maps a parameter set to a factory producing a fresh backend
    per prepared operation (backends hold native handles and are not shared
    between requests). `proof_systems` is the read-only cache of circuit keys
    built once at service start.
    """

    def __init__(
        self,
        *,
        kem_backends: Optional[Mapping[ParamSet, KemFactory]] = None,
        proof_systems: Optional[Mapping[str, ProofSystem]] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self._kem_backends = dict(kem_backends or {})
        self._proof_systems = proof_systems if proof_systems is not None else {}
        self._rng = rng

    def param_sets(self) -> list[str]:
        return [p.value for p in ParamSet if p in self._kem_backends]

    def circuit_ids(self) -> list[str]:
        return list(self._proof_systems.keys())

    def prepare(self, identity: OperationIdentity) -> PreparedOperation:
        if identity.family is Family.KEM:
            return self._prepare_kem(identity)
        if identity.family is Family.ZK_PROVE:
            return self._prepare_prove(identity)
        if identity.family is Family.ZK_VERIFY:
            return self._prepare_verify(identity)
        raise UnknownOperation("family", identity.family, [f.value for f in Family])

    def _prepare_kem(self, identity: OperationIdentity) -> PreparedOperation:
        factory = None
        for param_set, candidate in self._kem_backends.items():
            if param_set.value == identity.variant:
                factory = candidate
                break
        if factory is None:
            raise UnknownOperation("param_set", identity.variant, self.param_sets())
        if identity.kind is None:
            raise UnknownOperation("operation", None, [k.value for k in KemOperation])
        kem = factory()
        log.debug("preparing %s with backend %s", identity, getattr(kem, "name", kem))
        close = getattr(kem, "close", None)
        try:
            op = _KEM_FACTORIES[identity.kind](kem)
        except Exception:
            if close is not None:
                close()
            raise
        return PreparedOperation(identity, _guarded(identity, op), close=close)

    def _proof_system(self, identity: OperationIdentity) -> ProofSystem:
        system = self._proof_systems.get(identity.variant)
        if system is None:
            raise UnknownOperation("circuit_id", identity.variant, self.circuit_ids())
        if self._rng is None:
            raise RuntimeError("zk operations need a randomness provider")
        return system

    def _prepare_prove(self, identity: OperationIdentity) -> PreparedOperation:
        system = self._proof_system(identity)
        rng = self._rng
        assignment, _ = system.witness()

        def _op() -> Any:
            return system.prove(assignment, rng)

        prepared = PreparedOperation(identity, _guarded(identity, _op))

        def _observe(proof: Any) -> None:
            if "size_bytes" not in prepared.artifacts:
                prepared.artifacts["size_bytes"] = system.proof_size(proof)

        prepared.observe = _observe
        return prepared

    def _prepare_verify(self, identity: OperationIdentity) -> PreparedOperation:
        system = self._proof_system(identity)
        assignment, public_inputs = system.witness()
        proof = system.prove(assignment, self._rng)

        def _op() -> None:
            if not system.verify(public_inputs, proof):
                raise SamplingFailure("proof rejected by verifier")

        return PreparedOperation(identity, _guarded(identity, _op))
