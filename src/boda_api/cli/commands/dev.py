"""Dev command."""

from __future__ import annotations

import os

import typer

from boda_api.cli.commands import common
from boda_api.cli.commands.migrate import run_migrate


def run_dev(port: int | None = None, host: str = "127.0.0.1", migrate: bool = True) -> None:
    """
    Run the API with uvicorn --reload.

    Migrations are applied first unless --no-migrate is given. The port comes
    from --port, then DEV_PORT, then 8000.
    """
    resolved_port = port if port is not None else int(os.environ.get("DEV_PORT", "8000"))
    if migrate:
        run_migrate("head")

    env = common.build_env()
    env.setdefault("BODA_API_DOCS_ENABLED", "true")
    env.setdefault("BODA_LOGGING_LEVEL", "DEBUG")

    typer.echo(f"🔧 Dev server on http://{host}:{resolved_port} (docs at /docs)")
    common.run(common.uvicorn_command(host=host, port=resolved_port, reload=True), env=env)


def register(app: typer.Typer) -> None:
    @app.command(name="dev", help="Run the API with autoreload; applies migrations first.")
    def dev(
        port: int | None = typer.Option(None, "--port", "-p", help="Port (default 8000)."),
        host: str = typer.Option("127.0.0.1", "--host", help="Host/interface to bind to."),
        migrate: bool = typer.Option(
            True, "--migrate/--no-migrate", help="Run `alembic upgrade head` before starting."
        ),
    ) -> None:
        run_dev(port=port, host=host, migrate=migrate)
