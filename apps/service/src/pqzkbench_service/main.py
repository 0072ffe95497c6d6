from __future__ import annotations
from typing import Optional

import typer

from .config import ServiceSettings, configure_logging

app = typer.Typer(add_completion=False, help="Run the lattice or zk benchmark service")


@app.command()
def lattice(
    host: Optional[str] = typer.Option(None, help="Bind address (default: $PQZKBENCH_LATTICE_HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, help="Port (default: $PQZKBENCH_LATTICE_PORT or 8000)"),
) -> None:
    """Serve /health and /kem_bench."""
    from .lattice import create_lattice_app

    settings = ServiceSettings.from_env()
    configure_logging(settings.log_level)
    try:
        flask_app = create_lattice_app()
    except RuntimeError as exc:
        typer.echo(f"lattice_service failed to start: {exc}", err=True)
        raise typer.Exit(code=1)
    flask_app.run(host=host or settings.lattice_host, port=port or settings.lattice_port, threaded=True)


@app.command()
def zk(
    host: Optional[str] = typer.Option(None, help="Bind address (default: $PQZKBENCH_ZK_HOST or 127.0.0.1)"),
    port: Optional[int] = typer.Option(None, help="Port (default: $PQZKBENCH_ZK_PORT or 8001)"),
) -> None:
    """Serve /health, /zk_prove_bench and /zk_verify_bench."""
    from .zk import create_zk_app

    settings = ServiceSettings.from_env()
    configure_logging(settings.log_level)
    flask_app = create_zk_app()
    flask_app.run(host=host or settings.zk_host, port=port or settings.zk_port, threaded=True)
