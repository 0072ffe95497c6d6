from __future__ import annotations
"""Lattice service: ML-KEM operation timing over HTTP."""

import logging
from typing import Optional

from flask import Flask

from pqzkbench import OperationInvoker
from pqzkbench.measurement import parse_kem_request
from pqzkbench.wire import KEM_PATH, LATTICE_SERVICE, kem_response

from .common import handle_measurement, new_app

log = logging.getLogger(__name__)


def default_invoker() -> OperationInvoker:
    """Invoker over every parameter set liboqs can serve; fails fast if none."""
    from pqzkbench_liboqs import kem_backends, probe

    mechanisms = probe()
    enabled = {ps: f for ps, f in kem_backends().items() if mechanisms.get(ps.value)}
    if not enabled:
        raise RuntimeError(
            "No ML-KEM mechanism available; install liboqs-python (pip install 'pqzk-bench[liboqs]')"
        )
    for ps in enabled:
        log.info("%s -> %s", ps.value, mechanisms[ps.value])
    return OperationInvoker(kem_backends=enabled)


def create_lattice_app(invoker: Optional[OperationInvoker] = None) -> Flask:
    invoker = invoker if invoker is not None else default_invoker()
    app = new_app(LATTICE_SERVICE)

    @app.post(KEM_PATH)
    def kem_bench():
        return handle_measurement(invoker, parse_kem_request, kem_response)

    return app
