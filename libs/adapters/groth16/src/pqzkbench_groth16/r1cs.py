from __future__ import annotations
"""Rank-1 constraint systems for the benchmark circuits.

Variable 0 is the constant one, variables 1..num_public are public inputs,
the rest are private witness values. Each constraint reads
``<a, w> * <b, w> = <c, w>``.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from pqzkbench import circuit_registry

from .field import R

LinearCombination = Dict[int, int]


@dataclass(frozen=True)
class Constraint:
    a: LinearCombination
    b: LinearCombination
    c: LinearCombination


def _dot(lc: LinearCombination, w: Sequence[int]) -> int:
    return sum(coef * w[i] for i, coef in lc.items()) % R


@dataclass(frozen=True)
class Circuit:
    circuit_id: str
    num_public: int
    num_variables: int
    constraints: Tuple[Constraint, ...]
    assign: Callable[..., List[int]]
    default_inputs: Tuple[int, ...]

    def witness(self, *inputs: int) -> List[int]:
        """Full assignment for the given private inputs (defaults if omitted)."""
        w = self.assign(*(inputs or self.default_inputs))
        if len(w) != self.num_variables:
            raise ValueError(f"{self.circuit_id}: expected {self.num_variables} values, got {len(w)}")
        return [x % R for x in w]

    def public_inputs(self, w: Sequence[int]) -> List[int]:
        return list(w[1 : 1 + self.num_public])

    def is_satisfied(self, w: Sequence[int]) -> bool:
        return all(
            _dot(k.a, w) * _dot(k.b, w) % R == _dot(k.c, w) for k in self.constraints
        )


# a * b = c
MULTIPLY = Circuit(
    circuit_id="multiply",
    num_public=1,
    num_variables=4,  # [one, c, a, b]
    constraints=(Constraint(a={2: 1}, b={3: 1}, c={1: 1}),),
    assign=lambda a, b: [1, a * b, a, b],
    default_inputs=(3, 7),
)

# x * x = s, s * x = y
CUBE_ROOT = Circuit(
    circuit_id="cube_root",
    num_public=1,
    num_variables=4,  # [one, y, x, s]
    constraints=(
        Constraint(a={2: 1}, b={2: 1}, c={3: 1}),
        Constraint(a={3: 1}, b={2: 1}, c={1: 1}),
    ),
    assign=lambda x: [1, x ** 3, x, x * x],
    default_inputs=(3,),
)

for _circuit in (MULTIPLY, CUBE_ROOT):
    circuit_registry.register(_circuit.circuit_id)(_circuit)
