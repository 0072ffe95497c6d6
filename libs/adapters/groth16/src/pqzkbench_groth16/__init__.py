"""Groth16 proof system over BN254 for the zk benchmark service.

Importing the package registers the benchmark circuits (`multiply`,
`cube_root`) into the circuit registry.
"""

from .r1cs import Circuit, Constraint, MULTIPLY, CUBE_ROOT
from .groth16 import Proof, setup, prove, verify, prepare_verifying_key, serialize_proof
from .keys import CircuitKeys, build_key_cache

__all__ = [
    "Circuit",
    "Constraint",
    "MULTIPLY",
    "CUBE_ROOT",
    "Proof",
    "setup",
    "prove",
    "verify",
    "prepare_verifying_key",
    "serialize_proof",
    "CircuitKeys",
    "build_key_cache",
]
