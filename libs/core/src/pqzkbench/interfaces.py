from __future__ import annotations
from typing import Any, Protocol, Sequence, Tuple

"""Contracts the operation invoker times against.

The liboqs and Groth16 adapter packages provide the concrete backends; the
core never imports a cryptography library itself.
"""

class KemBackend(Protocol):
    """Key Encapsulation Mechanism contract for one parameter set."""
    name: str
    def keygen(self) -> Tuple[bytes, bytes]: ...
    def encapsulate(self, public_key: bytes) -> Tuple[bytes, bytes]: ...
    def decapsulate(self, secret_key: bytes, ciphertext: bytes) -> bytes: ...

class RandomSource(Protocol):
    """Randomness provider; `secrets.SystemRandom()` and `random.Random` fit."""
    def randrange(self, start: int, stop: int) -> int: ...

class ProofSystem(Protocol):
    """SNARK contract over pre-generated keys for one circuit."""
    circuit_id: str
    def witness(self) -> Tuple[Sequence[int], Sequence[int]]: ...
    def prove(self, witness: Sequence[int], rng: RandomSource) -> Any: ...
    def verify(self, public_inputs: Sequence[int], proof: Any) -> bool: ...
    def proof_size(self, proof: Any) -> int: ...
