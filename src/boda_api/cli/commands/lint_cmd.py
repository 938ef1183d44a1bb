"""Lint and format commands."""

from __future__ import annotations

import sys

import typer

from boda_api.cli.commands import common

_TARGETS = ["src", "tests", "migrations"]


def run_lint(fix: bool = False) -> None:
    """Run ruff check over the source tree."""

    common.require_python_module("ruff")
    cmd = [sys.executable, "-m", "ruff", "check", *_TARGETS]
    if fix:
        cmd.append("--fix")
    common.run(cmd)
    typer.echo("✅ lint complete")


def run_format(check: bool = False) -> None:
    """Format the source tree with ruff format."""

    common.require_python_module("ruff")
    cmd = [sys.executable, "-m", "ruff", "format", *_TARGETS]
    if check:
        cmd.append("--check")
    common.run(cmd)
    typer.echo("✅ format complete")


def register(app: typer.Typer) -> None:
    @app.command(help=run_lint.__doc__)
    def lint(
        fix: bool = typer.Option(False, "--fix", help="Apply safe automatic fixes."),
    ) -> None:
        run_lint(fix=fix)

    @app.command(name="format", help=run_format.__doc__)
    def format_(
        check: bool = typer.Option(False, "--check", help="Report files that would change."),
    ) -> None:
        run_format(check=check)
