"""Run the test suite."""

from __future__ import annotations

import sys

import typer

from boda_api.cli.commands import common

COVERAGE_THRESHOLD = 80


def run_tests(suite: str = "all", coverage: bool = True, extra: list[str] | None = None) -> None:
    """
    Run pytest; --suite unit|integration|all, coverage gate enforced by default.

    Coverage fails the run below the configured threshold (see pyproject).
    """
    suite_normalized = (suite or "all").lower()
    if suite_normalized not in {"unit", "integration", "all"}:
        typer.echo(f"Unknown suite '{suite_normalized}'. Use unit, integration, or all.", err=True)
        raise typer.Exit(code=1)

    common.require_python_module("pytest")
    cmd = [sys.executable, "-m", "pytest", "-q"]
    if suite_normalized != "all":
        cmd += ["-m", suite_normalized]
    if coverage:
        common.require_python_module("pytest_cov")
        cmd += [
            "--cov=boda_api",
            "--cov-report=term-missing",
            f"--cov-fail-under={COVERAGE_THRESHOLD}",
        ]
    cmd += list(extra or [])

    env = common.build_env()
    env.setdefault("BODA_TEST_FAST_HASH", "1")
    common.run(cmd, env=env)
    typer.echo("✅ Tests complete")


def register(app: typer.Typer) -> None:
    @app.command(
        name="test",
        help="Run pytest with the coverage gate; --suite unit|integration|all.",
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )
    def test(
        ctx: typer.Context,
        suite: str = typer.Option("all", "--suite", "-s", help="unit, integration, or all."),
        coverage: bool = typer.Option(
            True, "--coverage/--no-coverage", help="Measure coverage and enforce the gate."
        ),
    ) -> None:
        run_tests(suite=suite, coverage=coverage, extra=list(ctx.args))
