"""User management commands."""

from __future__ import annotations

import asyncio
import json

import typer

users_app = typer.Typer(add_completion=False, help="Manage organiser accounts.")


def _echo_error(message: str) -> None:
    typer.echo(f"❌ {message}", err=True)


async def _create_user(
    *,
    email: str,
    password: str,
    display_name: str | None,
    inactive: bool,
    json_output: bool,
) -> None:
    from boda_api.common.logging import setup_logging
    from boda_api.core.security.hashing import hash_password
    from boda_api.db import DatabaseConfig, db, session_scope
    from boda_api.features.users.repository import UsersRepository
    from boda_api.features.users.schemas import PASSWORD_MIN_LENGTH, UserProfile
    from boda_api.settings import get_settings

    email_clean = email.strip()
    if not email_clean:
        _echo_error("Email is required.")
        raise typer.Exit(code=1)
    if len(password.strip()) < PASSWORD_MIN_LENGTH:
        _echo_error(f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")
        raise typer.Exit(code=1)

    settings = get_settings()
    setup_logging(settings)
    db.init(DatabaseConfig.from_settings(settings))
    try:
        async with session_scope() as session:
            repo = UsersRepository(session)
            if await repo.get_by_email(email_clean) is not None:
                _echo_error("Email already in use.")
                raise typer.Exit(code=1)
            try:
                user = await repo.create(
                    email=email_clean,
                    password_hash=hash_password(password),
                    display_name=display_name.strip() if display_name else None,
                    is_active=not inactive,
                )
            except ValueError as exc:
                _echo_error(str(exc))
                raise typer.Exit(code=1) from exc
            profile = UserProfile.model_validate(user)
    finally:
        await db.dispose()

    if json_output:
        typer.echo(json.dumps(profile.model_dump(mode="json"), indent=2))
        return
    typer.echo(f"Created user {profile.email} ({profile.id})")
    typer.echo(f"  active: {profile.is_active}")
    if profile.display_name:
        typer.echo(f"  name: {profile.display_name}")


@users_app.command("create", help="Create an organiser account.")
def create(
    email: str = typer.Option(..., "--email", "-e", help="Login email."),
    password: str = typer.Option(
        ...,
        "--password",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password (prompted when omitted).",
    ),
    display_name: str | None = typer.Option(None, "--name", help="Display name."),
    inactive: bool = typer.Option(False, "--inactive", help="Create the account disabled."),
    json_output: bool = typer.Option(False, "--json", help="Print the created user as JSON."),
) -> None:
    asyncio.run(
        _create_user(
            email=email,
            password=password,
            display_name=display_name,
            inactive=inactive,
            json_output=json_output,
        )
    )


def register(app: typer.Typer) -> None:
    app.add_typer(users_app, name="users")
