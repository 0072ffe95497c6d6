from __future__ import annotations
"""Proving/verifying key cache, built once per process.

The cache is a read-only mapping shared by every request handler; nothing
writes to it after `build_key_cache` returns.
"""

import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from pqzkbench import circuit_registry
from pqzkbench.interfaces import RandomSource

from . import groth16
from .r1cs import Circuit

log = logging.getLogger(__name__)


class CircuitKeys:
    """Groth16 keys for one circuit, exposed through the ProofSystem contract."""

    def __init__(self, circuit: Circuit, pk: groth16.ProvingKey, vk: groth16.VerifyingKey) -> None:
        self._circuit = circuit
        self._pk = pk
        self._pvk = groth16.prepare_verifying_key(vk)

    @property
    def circuit_id(self) -> str:
        return self._circuit.circuit_id

    @property
    def circuit(self) -> Circuit:
        return self._circuit

    def witness(self) -> Tuple[List[int], List[int]]:
        assignment = self._circuit.witness()
        return assignment, self._circuit.public_inputs(assignment)

    def prove(self, witness: Sequence[int], rng: RandomSource) -> groth16.Proof:
        return groth16.prove(self._pk, self._circuit, witness, rng)

    def verify(self, public_inputs: Sequence[int], proof: groth16.Proof) -> bool:
        return groth16.verify(self._pvk, public_inputs, proof)

    def proof_size(self, proof: groth16.Proof) -> int:
        return len(groth16.serialize_proof(proof))


def build_key_cache(
    rng: RandomSource, circuit_ids: Optional[Iterable[str]] = None
) -> Mapping[str, CircuitKeys]:
    """Run the trusted setup for each registered circuit (or the given subset)."""
    ids = list(circuit_ids) if circuit_ids is not None else circuit_registry.names()
    cache = {}
    log.info("Running trusted setup for circuits: %s", ", ".join(ids))
    for cid in ids:
        circuit = circuit_registry.get(cid)
        pk, vk = groth16.setup(circuit, rng)
        cache[cid] = CircuitKeys(circuit, pk, vk)
    log.info("Trusted setup complete.")
    return MappingProxyType(cache)
