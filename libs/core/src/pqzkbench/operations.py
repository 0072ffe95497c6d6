from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple, Type, TypeVar

from .errors import InvalidParameter

"""Operation identities and the per-family iteration bounds."""


class Family(str, Enum):
    KEM = "kem"
    ZK_PROVE = "zk_prove"
    ZK_VERIFY = "zk_verify"


class ParamSet(str, Enum):
    ML_KEM_512 = "ml_kem_512"
    ML_KEM_768 = "ml_kem_768"
    ML_KEM_1024 = "ml_kem_1024"


class KemOperation(str, Enum):
    KEYGEN = "keygen"
    ENCAPS = "encaps"
    DECAPS = "decaps"
    FULL_HANDSHAKE = "full_handshake"


# Inclusive [low, high] per family; out-of-range requests are clamped.
ITERATION_BOUNDS: Dict[Family, Tuple[int, int]] = {
    Family.KEM: (1, 10000),
    Family.ZK_PROVE: (1, 1000),
    Family.ZK_VERIFY: (1, 5000),
}

_E = TypeVar("_E", bound=Enum)


def _parse(enum_cls: Type[_E], field: str, value: object) -> _E:
    for member in enum_cls:
        if member.value == value:
            return member
    raise InvalidParameter(field, value, [m.value for m in enum_cls])


def parse_param_set(value: object) -> ParamSet:
    return _parse(ParamSet, "param_set", value)


def parse_kem_operation(value: object) -> KemOperation:
    return _parse(KemOperation, "operation", value)


@dataclass(frozen=True)
class OperationIdentity:
    """Which operation to time.

    `variant` is a parameter-set name for the KEM family and a circuit id for
    the zk families; `kind` is only set for the KEM family.
    """
    family: Family
    variant: str
    kind: Optional[KemOperation] = None

    @classmethod
    def kem(cls, param_set: ParamSet, operation: KemOperation) -> "OperationIdentity":
        return cls(Family.KEM, param_set.value, operation)

    @classmethod
    def prove(cls, circuit_id: str) -> "OperationIdentity":
        return cls(Family.ZK_PROVE, circuit_id)

    @classmethod
    def verify(cls, circuit_id: str) -> "OperationIdentity":
        return cls(Family.ZK_VERIFY, circuit_id)

    def __str__(self) -> str:
        if self.kind is not None:
            return f"{self.family.value}:{self.variant}:{self.kind.value}"
        return f"{self.family.value}:{self.variant}"


def clamp_iterations(family: Family, requested: int) -> int:
    low, high = ITERATION_BOUNDS[family]
    return max(low, min(high, int(requested)))


def kem_matrix() -> Iterable[Tuple[ParamSet, KemOperation]]:
    for param_set in ParamSet:
        for operation in KemOperation:
            yield param_set, operation
