from __future__ import annotations

import random

import pytest

from pqzkbench import InvalidParameter
from pqzkbench_groth16 import CUBE_ROOT, MULTIPLY, build_key_cache, serialize_proof
from pqzkbench_groth16.field import R, interpolate, poly_divmod, poly_eval, poly_mul, vanishing


def test_interpolation_passes_through_points():
    xs = [1, 2, 3]
    ys = [5, R - 1, 42]
    poly = interpolate(xs, ys)
    assert [poly_eval(poly, x) for x in xs] == [5, R - 1, 42]


def test_vanishing_divides_exactly():
    t = vanishing([1, 2])
    q, rem = poly_divmod(poly_mul(t, [7, 3]), t)
    assert q == [7, 3]
    assert rem == []


def test_circuit_witnesses():
    w = MULTIPLY.witness()
    assert w == [1, 21, 3, 7]
    assert MULTIPLY.public_inputs(w) == [21]
    assert MULTIPLY.is_satisfied(w)
    w = CUBE_ROOT.witness()
    assert CUBE_ROOT.public_inputs(w) == [27]
    assert CUBE_ROOT.is_satisfied(w)
    assert not CUBE_ROOT.is_satisfied([1, 28, 3, 9])


@pytest.mark.parametrize("circuit_id", ["multiply", "cube_root"])
def test_prove_verify_round_trip(zk_keys, circuit_id):
    keys = zk_keys[circuit_id]
    rng = random.Random(7)
    assignment, public = keys.witness()
    proof = keys.prove(assignment, rng)
    assert keys.verify(public, proof)
    assert keys.proof_size(proof) == 128
    assert len(serialize_proof(proof)) == 128


def test_wrong_public_input_is_rejected(zk_keys):
    keys = zk_keys["multiply"]
    assignment, _ = keys.witness()
    proof = keys.prove(assignment, random.Random(3))
    assert not keys.verify([22], proof)


def test_public_input_count_is_checked(zk_keys):
    keys = zk_keys["multiply"]
    assignment, public = keys.witness()
    proof = keys.prove(assignment, random.Random(3))
    with pytest.raises(ValueError):
        keys.verify(public + [1], proof)


def test_unsatisfied_assignment_cannot_be_proven(zk_keys):
    keys = zk_keys["multiply"]
    with pytest.raises(ValueError, match="does not satisfy"):
        keys.prove([1, 22, 3, 7], random.Random(3))


def test_key_cache_is_read_only(zk_keys):
    assert set(zk_keys) == {"multiply", "cube_root"}
    with pytest.raises(TypeError):
        zk_keys["multiply"] = None  # type: ignore[index]


def test_key_cache_rejects_unknown_circuit():
    with pytest.raises(InvalidParameter, match="circuit_id"):
        build_key_cache(random.Random(1), ["sha256"])
