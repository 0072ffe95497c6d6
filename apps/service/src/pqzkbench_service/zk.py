from __future__ import annotations
"""zk service: Groth16 prove/verify timing over HTTP.

The trusted setup for every circuit runs once in `create_zk_app`; handlers
only read the resulting key cache.
"""

import secrets
from functools import partial
from typing import Iterable, Optional

from flask import Flask

from pqzkbench import Family, OperationInvoker
from pqzkbench.interfaces import RandomSource
from pqzkbench.measurement import parse_zk_request
from pqzkbench.wire import PROVE_PATH, VERIFY_PATH, ZK_SERVICE, prove_response, verify_response

from .common import handle_measurement, new_app


def default_invoker(
    rng: Optional[RandomSource] = None, circuit_ids: Optional[Iterable[str]] = None
) -> OperationInvoker:
    from pqzkbench_groth16 import build_key_cache

    rng = rng if rng is not None else secrets.SystemRandom()
    return OperationInvoker(proof_systems=build_key_cache(rng, circuit_ids), rng=rng)


def create_zk_app(invoker: Optional[OperationInvoker] = None) -> Flask:
    invoker = invoker if invoker is not None else default_invoker()
    app = new_app(ZK_SERVICE)

    @app.post(PROVE_PATH)
    def zk_prove_bench():
        return handle_measurement(
            invoker, partial(parse_zk_request, family=Family.ZK_PROVE), prove_response
        )

    @app.post(VERIFY_PATH)
    def zk_verify_bench():
        return handle_measurement(
            invoker, partial(parse_zk_request, family=Family.ZK_VERIFY), verify_response
        )

    return app
