"""Typecheck command."""

from __future__ import annotations

import sys

import typer

from boda_api.cli.commands import common


def run_typecheck() -> None:
    """Run mypy over the boda_api package."""

    common.require_python_module("mypy")
    common.run([sys.executable, "-m", "mypy", "src/boda_api"])
    typer.echo("✅ typecheck complete")


def register(app: typer.Typer) -> None:
    @app.command(help=run_typecheck.__doc__)
    def typecheck() -> None:
        run_typecheck()
