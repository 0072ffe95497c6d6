from __future__ import annotations

import itertools

from pqzkbench import SamplingFailure, sample


def _ticking_clock(step_ns: int):
    counter = itertools.count(0, step_ns)
    return lambda: next(counter)


def test_sample_records_whole_microseconds():
    run = sample(lambda: None, 4, clock=_ticking_clock(2_500))
    assert run.durations_us == [2, 2, 2, 2]
    assert run.completed == 4
    assert run.failed_iterations == 0


def test_failed_iterations_are_skipped_not_fatal():
    calls = {"n": 0}

    def flaky():
        calls["n"] += 1
        if calls["n"] % 3 == 0:
            raise SamplingFailure("mismatch")
        return calls["n"]

    run = sample(flaky, 9)
    assert calls["n"] == 9
    assert run.failed_iterations == 3
    assert run.completed == 6
    assert run.requested == 9


def test_on_result_sees_successful_results_only():
    seen = []
    values = iter([1, SamplingFailure("x"), 3])

    def op():
        v = next(values)
        if isinstance(v, Exception):
            raise v
        return v

    sample(op, 3, on_result=seen.append)
    assert seen == [1, 3]


def test_other_exceptions_propagate():
    def boom():
        raise KeyError("not a sampling failure")

    try:
        sample(boom, 2)
    except KeyError:
        pass
    else:
        raise AssertionError("expected KeyError")
