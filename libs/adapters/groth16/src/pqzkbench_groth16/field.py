from __future__ import annotations
"""Polynomial arithmetic over the BN254 scalar field.

Polynomials are coefficient lists, lowest degree first.
"""

from typing import List, Sequence, Tuple

from py_ecc.optimized_bn128 import curve_order

R = curve_order

Poly = List[int]


def inv(a: int) -> int:
    if a % R == 0:
        raise ZeroDivisionError("zero has no inverse in Fr")
    return pow(a, R - 2, R)


def trim(p: Sequence[int]) -> Poly:
    out = [c % R for c in p]
    while out and out[-1] == 0:
        out.pop()
    return out


def poly_add(a: Sequence[int], b: Sequence[int]) -> Poly:
    n = max(len(a), len(b))
    return trim([(a[i] if i < len(a) else 0) + (b[i] if i < len(b) else 0) for i in range(n)])


def poly_sub(a: Sequence[int], b: Sequence[int]) -> Poly:
    return poly_add(a, [-c for c in b])


def poly_scale(a: Sequence[int], k: int) -> Poly:
    return trim([c * k for c in a])


def poly_mul(a: Sequence[int], b: Sequence[int]) -> Poly:
    if not a or not b:
        return []
    out = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x == 0:
            continue
        for j, y in enumerate(b):
            out[i + j] = (out[i + j] + x * y) % R
    return trim(out)


def poly_eval(p: Sequence[int], x: int) -> int:
    acc = 0
    for c in reversed(p):
        acc = (acc * x + c) % R
    return acc


def poly_divmod(num: Sequence[int], den: Sequence[int]) -> Tuple[Poly, Poly]:
    den = trim(den)
    if not den:
        raise ZeroDivisionError("polynomial division by zero")
    rem = trim(num)
    if len(rem) < len(den):
        return [], rem
    quot = [0] * (len(rem) - len(den) + 1)
    lead_inv = inv(den[-1])
    while len(rem) >= len(den) and rem:
        shift = len(rem) - len(den)
        coef = rem[-1] * lead_inv % R
        quot[shift] = coef
        rem = poly_sub(rem, [0] * shift + poly_scale(den, coef))
    return trim(quot), rem


def vanishing(xs: Sequence[int]) -> Poly:
    """t(x) = prod (x - x_j)."""
    out: Poly = [1]
    for x in xs:
        out = poly_mul(out, [-x, 1])
    return out


def lagrange_basis_at(xs: Sequence[int], point: int) -> List[int]:
    """Values L_j(point) of the Lagrange basis over the points `xs`."""
    values = []
    for j, xj in enumerate(xs):
        num, den = 1, 1
        for k, xk in enumerate(xs):
            if k == j:
                continue
            num = num * (point - xk) % R
            den = den * (xj - xk) % R
        values.append(num * inv(den) % R)
    return values


def interpolate(xs: Sequence[int], ys: Sequence[int]) -> Poly:
    """Coefficients of the unique polynomial of degree < len(xs) through (xs, ys)."""
    out: Poly = []
    for j, (xj, yj) in enumerate(zip(xs, ys)):
        if yj % R == 0:
            continue
        basis: Poly = [1]
        den = 1
        for k, xk in enumerate(xs):
            if k == j:
                continue
            basis = poly_mul(basis, [-xk, 1])
            den = den * (xj - xk) % R
        out = poly_add(out, poly_scale(basis, yj * inv(den)))
    return out
