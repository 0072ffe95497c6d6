"""Adapter package for liboqs-backed ML-KEM parameter sets.

Importing the package registers one backend factory per parameter set. The
`oqs` module is only imported when a backend is instantiated.
"""

from .kem_adapters import MlKem, kem_backends, probe

__all__ = ["MlKem", "kem_backends", "probe"]
