from __future__ import annotations
import logging
import os
from functools import partial
from typing import Any, Dict, Mapping, Optional, Tuple

from pqzkbench import ParamSet, kem_registry

log = logging.getLogger(__name__)

# NIST names first, then the round-3 Kyber names older liboqs builds expose.
_CANDIDATES: Dict[ParamSet, Tuple[str, ...]] = {
    ParamSet.ML_KEM_512: ("ML-KEM-512", "Kyber512"),
    ParamSet.ML_KEM_768: ("ML-KEM-768", "Kyber768"),
    ParamSet.ML_KEM_1024: ("ML-KEM-1024", "Kyber1024"),
}


def _env_var(param_set: ParamSet) -> str:
    return f"PQZKBENCH_{param_set.value.upper()}_ALG"


def _load_oqs() -> Optional[Any]:
    """The `oqs` module, or None when liboqs-python is unusable."""
    try:
        import oqs  # type: ignore
    except Exception as exc:
        log.debug("liboqs-python unavailable: %s", exc)
        return None
    return oqs


def resolve_mechanism(oqs: Any, param_set: ParamSet) -> Optional[str]:
    """liboqs mechanism for `param_set`: the env override if enabled, else the first enabled candidate."""
    enabled = set(oqs.get_enabled_kem_mechanisms())
    override = os.getenv(_env_var(param_set))
    if override:
        if override in enabled:
            return override
        log.warning("%s=%s is not enabled in liboqs; ignoring", _env_var(param_set), override)
    for name in _CANDIDATES[param_set]:
        if name in enabled:
            return name
    return None


class MlKem:
    """liboqs-backed ML-KEM for one parameter set.

    One native KeyEncapsulation handle is kept open for the lifetime of the
    adapter so timed calls never pay for handle construction. Decapsulation
    with the most recently generated secret key reuses that handle.
    """

    def __init__(self, param_set: ParamSet) -> None:
        oqs = _load_oqs()
        if oqs is None:
            raise RuntimeError(
                "liboqs-python is not installed; run 'pip install pqzk-bench[liboqs]'"
            )
        alg = resolve_mechanism(oqs, param_set)
        if not alg:
            raise RuntimeError(f"No supported {param_set.value} mechanism enabled in liboqs")
        self.name = param_set.value
        self.alg = alg
        self._oqs = oqs
        self._kem = oqs.KeyEncapsulation(alg)
        self._sk: Optional[bytes] = None

    def keygen(self) -> Tuple[bytes, bytes]:
        pk = self._kem.generate_keypair()
        sk = self._kem.export_secret_key()
        self._sk = sk
        return pk, sk

    def encapsulate(self, public_key: bytes) -> Tuple[bytes, bytes]:
        ct, ss = self._kem.encap_secret(public_key)
        return ct, ss

    def decapsulate(self, secret_key: bytes, ciphertext: bytes) -> bytes:
        if secret_key == self._sk:
            return self._kem.decap_secret(ciphertext)
        with self._oqs.KeyEncapsulation(self.alg, secret_key=secret_key) as kem:
            return kem.decap_secret(ciphertext)

    def close(self) -> None:
        self._kem.free()


for _param_set in ParamSet:
    kem_registry.register(_param_set.value)(partial(MlKem, _param_set))


def kem_backends() -> Mapping[ParamSet, partial]:
    """Factories for every registered parameter set, keyed by ParamSet."""
    return {ps: kem_registry.get(ps.value) for ps in ParamSet if ps.value in kem_registry}


def probe() -> Dict[str, Optional[str]]:
    """Resolve the liboqs mechanism name behind each parameter set."""
    oqs = _load_oqs()
    if oqs is None:
        return {ps.value: None for ps in ParamSet}
    return {ps.value: resolve_mechanism(oqs, ps) for ps in ParamSet}
