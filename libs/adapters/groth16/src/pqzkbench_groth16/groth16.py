from __future__ import annotations
"""Groth16 over BN254 (py_ecc optimized curve arithmetic).

QAP over the evaluation domain 1..n (n = number of constraints). Setup
samples the toxic waste from the supplied randomness provider; callers
that need soundness must pass a cryptographic source.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from py_ecc.optimized_bn128 import (
    G1,
    G2,
    Z1,
    Z2,
    add,
    final_exponentiate,
    is_inf,
    multiply,
    neg,
    normalize,
    pairing,
)

from pqzkbench.interfaces import RandomSource

from .field import R, inv, interpolate, lagrange_basis_at, poly_divmod, poly_mul, poly_sub, vanishing, poly_eval
from .r1cs import Circuit

Point = Tuple[Any, Any, Any]


@dataclass(frozen=True)
class ProvingKey:
    alpha_g1: Point
    beta_g1: Point
    beta_g2: Point
    delta_g1: Point
    delta_g2: Point
    a_query: Tuple[Point, ...]
    b_g1_query: Tuple[Point, ...]
    b_g2_query: Tuple[Point, ...]
    l_query: Tuple[Point, ...]  # private variables only
    h_query: Tuple[Point, ...]


@dataclass(frozen=True)
class VerifyingKey:
    alpha_g1: Point
    beta_g2: Point
    gamma_g2: Point
    delta_g2: Point
    ic: Tuple[Point, ...]  # constant one + public inputs


@dataclass(frozen=True)
class PreparedVerifyingKey:
    vk: VerifyingKey
    alpha_beta: Any  # e(alpha, beta), FQ12


@dataclass(frozen=True)
class Proof:
    a: Point
    b: Point
    c: Point


def _domain(circuit: Circuit) -> List[int]:
    return list(range(1, len(circuit.constraints) + 1))


def _mul(pt: Point, k: int) -> Point:
    k %= R
    if k == 0 or is_inf(pt):
        return multiply(pt, 0)
    return multiply(pt, k)


def _lincomb(points: Sequence[Point], scalars: Sequence[int], zero: Point) -> Point:
    acc = zero
    for pt, k in zip(points, scalars):
        if k % R and not is_inf(pt):
            acc = add(acc, multiply(pt, k % R))
    return acc


def _qap_at(circuit: Circuit, tau: int) -> Tuple[List[int], List[int], List[int]]:
    """u_i(tau), v_i(tau), w_i(tau) for every variable i."""
    basis = lagrange_basis_at(_domain(circuit), tau)
    u = [0] * circuit.num_variables
    v = [0] * circuit.num_variables
    w = [0] * circuit.num_variables
    for lj, k in zip(basis, circuit.constraints):
        for i, coef in k.a.items():
            u[i] = (u[i] + coef * lj) % R
        for i, coef in k.b.items():
            v[i] = (v[i] + coef * lj) % R
        for i, coef in k.c.items():
            w[i] = (w[i] + coef * lj) % R
    return u, v, w


def setup(circuit: Circuit, rng: RandomSource) -> Tuple[ProvingKey, VerifyingKey]:
    tau, alpha, beta, gamma, delta = (rng.randrange(1, R) for _ in range(5))
    u, v, w = _qap_at(circuit, tau)
    n = len(circuit.constraints)
    t_tau = poly_eval(vanishing(_domain(circuit)), tau)
    gamma_inv, delta_inv = inv(gamma), inv(delta)
    ell = circuit.num_public

    def _k(i: int) -> int:
        return (beta * u[i] + alpha * v[i] + w[i]) % R

    pk = ProvingKey(
        alpha_g1=_mul(G1, alpha),
        beta_g1=_mul(G1, beta),
        beta_g2=_mul(G2, beta),
        delta_g1=_mul(G1, delta),
        delta_g2=_mul(G2, delta),
        a_query=tuple(_mul(G1, x) for x in u),
        b_g1_query=tuple(_mul(G1, x) for x in v),
        b_g2_query=tuple(_mul(G2, x) for x in v),
        l_query=tuple(
            _mul(G1, _k(i) * delta_inv) for i in range(ell + 1, circuit.num_variables)
        ),
        h_query=tuple(
            _mul(G1, pow(tau, j, R) * t_tau * delta_inv) for j in range(n - 1)
        ),
    )
    vk = VerifyingKey(
        alpha_g1=pk.alpha_g1,
        beta_g2=pk.beta_g2,
        gamma_g2=_mul(G2, gamma),
        delta_g2=pk.delta_g2,
        ic=tuple(_mul(G1, _k(i) * gamma_inv) for i in range(ell + 1)),
    )
    return pk, vk


def prepare_verifying_key(vk: VerifyingKey) -> PreparedVerifyingKey:
    return PreparedVerifyingKey(vk=vk, alpha_beta=pairing(vk.beta_g2, vk.alpha_g1))


def _h_coefficients(circuit: Circuit, assignment: Sequence[int]) -> List[int]:
    xs = _domain(circuit)
    a_vals, b_vals, c_vals = [], [], []
    for k in circuit.constraints:
        a_vals.append(sum(coef * assignment[i] for i, coef in k.a.items()) % R)
        b_vals.append(sum(coef * assignment[i] for i, coef in k.b.items()) % R)
        c_vals.append(sum(coef * assignment[i] for i, coef in k.c.items()) % R)
    p = poly_sub(poly_mul(interpolate(xs, a_vals), interpolate(xs, b_vals)), interpolate(xs, c_vals))
    h, rem = poly_divmod(p, vanishing(xs))
    if rem:
        raise ValueError(f"assignment does not satisfy circuit '{circuit.circuit_id}'")
    return h


def prove(pk: ProvingKey, circuit: Circuit, assignment: Sequence[int], rng: RandomSource) -> Proof:
    h = _h_coefficients(circuit, assignment)
    r, s = rng.randrange(1, R), rng.randrange(1, R)

    a = add(add(pk.alpha_g1, _lincomb(pk.a_query, assignment, Z1)), _mul(pk.delta_g1, r))
    b2 = add(add(pk.beta_g2, _lincomb(pk.b_g2_query, assignment, Z2)), _mul(pk.delta_g2, s))
    b1 = add(add(pk.beta_g1, _lincomb(pk.b_g1_query, assignment, Z1)), _mul(pk.delta_g1, s))

    private = assignment[circuit.num_public + 1 :]
    c = _lincomb(pk.l_query, private, Z1)
    c = add(c, _lincomb(pk.h_query, h, Z1))
    c = add(c, _mul(a, s))
    c = add(c, _mul(b1, r))
    c = add(c, _mul(pk.delta_g1, -r * s))
    return Proof(a=a, b=b2, c=c)


def verify(pvk: PreparedVerifyingKey, public_inputs: Sequence[int], proof: Proof) -> bool:
    vk = pvk.vk
    if len(public_inputs) != len(vk.ic) - 1:
        raise ValueError(f"expected {len(vk.ic) - 1} public inputs, got {len(public_inputs)}")
    acc = add(vk.ic[0], _lincomb(vk.ic[1:], public_inputs, Z1))
    # e(A, B) * e(-IC, gamma) * e(-C, delta) == e(alpha, beta), one final exponentiation
    f = pairing(proof.b, proof.a, final_exponentiate=False)
    f = f * pairing(vk.gamma_g2, neg(acc), final_exponentiate=False)
    f = f * pairing(vk.delta_g2, neg(proof.c), final_exponentiate=False)
    return final_exponentiate(f) == pvk.alpha_beta


def _g1_bytes(pt: Point) -> bytes:
    if is_inf(pt):
        return b"\x40" + bytes(31)
    x, y = normalize(pt)
    raw = bytearray(x.n.to_bytes(32, "big"))
    if y.n & 1:
        raw[0] |= 0x80
    return bytes(raw)


def _g2_bytes(pt: Point) -> bytes:
    if is_inf(pt):
        return b"\x40" + bytes(63)
    x, y = normalize(pt)
    c0, c1 = (int(c) for c in x.coeffs)
    raw = bytearray(c1.to_bytes(32, "big") + c0.to_bytes(32, "big"))
    if int(y.coeffs[0]) & 1:
        raw[0] |= 0x80
    return bytes(raw)


def serialize_proof(proof: Proof) -> bytes:
    """Compressed encoding: A (32 bytes) || B (64 bytes) || C (32 bytes)."""
    return _g1_bytes(proof.a) + _g2_bytes(proof.b) + _g1_bytes(proof.c)
