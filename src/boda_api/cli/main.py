"""boda: developer and operations CLI for the Boda API."""

from __future__ import annotations

import typer

from boda_api.cli.commands import register_all

app = typer.Typer(add_completion=False, help="Boda API CLI (serve, migrate, seed, quality checks).")

register_all(app)


if __name__ == "__main__":
    app()
