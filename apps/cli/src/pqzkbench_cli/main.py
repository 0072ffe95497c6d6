from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from pqzkbench import Family
from pqzkbench.metrics import AggregatedResult
from .runners.bench import run_kem_benchmark, run_suite, run_zk_benchmark
from .runners.common import HttpTransport
from .runners.export import FORMATS, write_results

app = typer.Typer(add_completion=False, help="Benchmark client for the lattice and zk services")

LATTICE_URL = "http://localhost:8000"
ZK_URL = "http://localhost:8001"


@dataclass
class _Options:
    output: str = "json"
    file: Optional[Path] = None
    label: str = "default"
    timeout: Optional[float] = None


def _make_transport(timeout: Optional[float]) -> HttpTransport:
    return HttpTransport(timeout=timeout)


def _opts(ctx: typer.Context) -> _Options:
    return ctx.obj if isinstance(ctx.obj, _Options) else _Options()


def _emit(opts: _Options, results: List[AggregatedResult]) -> None:
    text = write_results(results, opts.output, opts.file)
    if opts.file is None:
        typer.echo(text, nl=False)
    else:
        typer.echo(f"Wrote {len(results)} result(s) to {opts.file}", err=True)


@app.callback()
def main(
    ctx: typer.Context,
    output: str = typer.Option("json", "--output", help="Output format: json or csv"),
    file: Optional[Path] = typer.Option(None, "--file", help="Write results to this file instead of stdout"),
    label: str = typer.Option("default", "--label", help="Free-form label copied into every record"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0.0, help="Per-request timeout in seconds"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level for client diagnostics"),
) -> None:
    """Run benchmark batches against the services and report aggregated results."""
    if output not in FORMATS:
        raise typer.BadParameter(f"Valid options: {', '.join(FORMATS)}", param_hint="--output")
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = _Options(output=output, file=file, label=label, timeout=timeout)


@app.command()
def kem(
    ctx: typer.Context,
    url: str = typer.Option(LATTICE_URL, help="Lattice service URL"),
    param_set: str = typer.Option("ml_kem_768", help="ml_kem_512, ml_kem_768 or ml_kem_1024"),
    operation: str = typer.Option("full_handshake", help="keygen, encaps, decaps or full_handshake"),
    iterations: int = typer.Option(100, help="Iterations per request"),
    requests: int = typer.Option(1, min=1, help="Number of requests"),
    concurrency: int = typer.Option(1, min=1, help="Requests in flight at once"),
) -> None:
    """Benchmark a KEM operation."""
    opts = _opts(ctx)
    transport = _make_transport(opts.timeout)
    try:
        result = run_kem_benchmark(
            transport, url, param_set, operation, iterations, requests, concurrency, opts.label
        )
    finally:
        transport.close()
    _emit(opts, [result])


def _zk(ctx: typer.Context, family: Family, url: str, circuit_id: str,
        iterations: int, requests: int, concurrency: int) -> None:
    opts = _opts(ctx)
    transport = _make_transport(opts.timeout)
    try:
        result = run_zk_benchmark(
            transport, url, family, circuit_id, iterations, requests, concurrency, opts.label
        )
    finally:
        transport.close()
    _emit(opts, [result])


@app.command("zk-prove")
def zk_prove(
    ctx: typer.Context,
    url: str = typer.Option(ZK_URL, help="zk service URL"),
    circuit_id: str = typer.Option("multiply", help="multiply or cube_root"),
    iterations: int = typer.Option(10, help="Iterations per request"),
    requests: int = typer.Option(1, min=1, help="Number of requests"),
    concurrency: int = typer.Option(1, min=1, help="Requests in flight at once"),
) -> None:
    """Benchmark Groth16 proof generation."""
    _zk(ctx, Family.ZK_PROVE, url, circuit_id, iterations, requests, concurrency)


@app.command("zk-verify")
def zk_verify(
    ctx: typer.Context,
    url: str = typer.Option(ZK_URL, help="zk service URL"),
    circuit_id: str = typer.Option("multiply", help="multiply or cube_root"),
    iterations: int = typer.Option(100, help="Iterations per request"),
    requests: int = typer.Option(1, min=1, help="Number of requests"),
    concurrency: int = typer.Option(1, min=1, help="Requests in flight at once"),
) -> None:
    """Benchmark Groth16 proof verification."""
    _zk(ctx, Family.ZK_VERIFY, url, circuit_id, iterations, requests, concurrency)


@app.command()
def suite(
    ctx: typer.Context,
    lattice_url: str = typer.Option(LATTICE_URL, help="Lattice service URL"),
    zk_url: str = typer.Option(ZK_URL, help="zk service URL"),
    kem_iterations: int = typer.Option(100, help="Iterations for each KEM benchmark"),
    zk_iterations: int = typer.Option(10, help="Prove iterations; verify runs 10x this"),
) -> None:
    """Run the full KEM matrix and prove/verify for every circuit."""
    opts = _opts(ctx)
    transport = _make_transport(opts.timeout)
    try:
        results = run_suite(
            transport,
            lattice_url,
            zk_url,
            kem_iterations,
            zk_iterations,
            opts.label,
            progress=lambda msg: typer.echo(f"Running {msg}...", err=True),
        )
    finally:
        transport.close()
    _emit(opts, results)
