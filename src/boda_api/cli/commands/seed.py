"""Seed command."""

from __future__ import annotations

import asyncio

import typer

from boda_api.scripts.seed import DEMO_EMAIL, DEMO_PASSWORD, DEMO_SLUG


async def _seed(email: str, password: str):
    from boda_api.common.logging import setup_logging
    from boda_api.db import DatabaseConfig, db, schema_is_current, session_scope
    from boda_api.scripts.seed import seed_demo
    from boda_api.settings import get_settings

    settings = get_settings()
    setup_logging(settings)
    db.init(DatabaseConfig.from_settings(settings))
    try:
        if not await schema_is_current():
            typer.echo("❌ Database schema missing; run `boda migrate` first.", err=True)
            raise typer.Exit(code=1)
        async with session_scope() as session:
            return await seed_demo(session, settings, email=email, password=password)
    finally:
        await db.dispose()


def run_seed(email: str = DEMO_EMAIL, password: str = DEMO_PASSWORD) -> None:
    """Create a demo couple, a published wedding and a few guests."""

    result = asyncio.run(_seed(email, password))
    if not result.created:
        typer.echo(f"ℹ️  Demo account {email} already exists; nothing to do.")
        return
    typer.echo(f"✅ Seeded {email} / {password}")
    typer.echo(f"   wedding: /es/boda/{DEMO_SLUG} ({result.wedding_id})")
    typer.echo(f"   guests: {len(result.guest_ids)}")


def register(app: typer.Typer) -> None:
    @app.command(help=run_seed.__doc__)
    def seed(
        email: str = typer.Option(DEMO_EMAIL, "--email", help="Demo account email."),
        password: str = typer.Option(DEMO_PASSWORD, "--password", help="Demo account password."),
    ) -> None:
        run_seed(email=email, password=password)
