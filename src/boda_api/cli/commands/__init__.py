"""Command registrations for the Boda CLI."""

from __future__ import annotations

import typer

from . import dev, lint_cmd, migrate, seed, start, tests, types_cmd, users

COMMAND_MODULES = (
    start,
    dev,
    migrate,
    seed,
    users,
    lint_cmd,
    types_cmd,
    tests,
)


def register_all(app: typer.Typer) -> None:
    for module in COMMAND_MODULES:
        module.register(app)
