"""Migrate command."""

from __future__ import annotations

import sys

import typer

from boda_api.cli.commands import common
from boda_api.settings import get_settings


def run_migrate(revision: str = "head") -> None:
    """Run Alembic migrations (default upgrade to head) using alembic.ini."""

    common.require_python_module("alembic")
    alembic_ini = get_settings().alembic_ini_path
    if not alembic_ini.exists():
        typer.echo(f"❌ alembic.ini not found at {alembic_ini}", err=True)
        raise typer.Exit(code=1)
    common.run(
        [sys.executable, "-m", "alembic", "-c", str(alembic_ini), "upgrade", revision],
        cwd=alembic_ini.parent,
        env=common.build_env(),
    )


def register(app: typer.Typer) -> None:
    @app.command(help=run_migrate.__doc__)
    def migrate(
        revision: str = typer.Argument("head", help="Alembic revision to upgrade to."),
    ) -> None:
        run_migrate(revision)
