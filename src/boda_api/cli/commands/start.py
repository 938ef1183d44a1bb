"""Start command."""

from __future__ import annotations

import typer

from boda_api.cli.commands import common


def run_start(port: int = 8000, host: str = "0.0.0.0") -> None:
    """Serve the API without autoreload (production mode)."""

    cmd = common.uvicorn_command(host=host, port=port, reload=False)
    typer.echo(f"🚀 Starting Boda API on http://{host}:{port}")
    common.run(cmd, env=common.build_env())


def register(app: typer.Typer) -> None:
    @app.command(name="start", help=run_start.__doc__)
    def start(
        port: int = typer.Option(8000, "--port", "-p", help="Port for the FastAPI server."),
        host: str = typer.Option("0.0.0.0", "--host", help="Host/interface to bind to."),
    ) -> None:
        run_start(port=port, host=host)
