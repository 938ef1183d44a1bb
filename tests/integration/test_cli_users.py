"""`boda users create` against the migrated test database."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator

import pytest
from sqlalchemy import delete
from typer.testing import CliRunner

from boda_api.cli.main import app
from boda_api.db import DatabaseConfig, db, session_scope
from boda_api.models import User
from boda_api.settings import get_settings
from tests.utils import DEFAULT_PASSWORD, unique_email

runner = CliRunner()


async def _delete_users() -> None:
    db.init(DatabaseConfig.from_settings(get_settings()))
    try:
        async with session_scope() as session:
            await session.execute(delete(User))
    finally:
        await db.dispose()


@pytest.fixture()
def clean_users() -> Iterator[None]:
    yield
    asyncio.run(_delete_users())


def _create(*args: str):
    return runner.invoke(app, ["users", "create", *args])


def test_create_user_prints_profile(clean_users: None) -> None:
    """A new account is stored and echoed as JSON."""
    email = unique_email("cli")

    result = _create("--email", email, "--password", DEFAULT_PASSWORD, "--name", "Ana", "--json")

    assert result.exit_code == 0, result.output
    assert f'"email": "{email}"' in result.output
    assert '"display_name": "Ana"' in result.output
    assert '"is_active": true' in result.output


def test_create_user_rejects_duplicate_email(clean_users: None) -> None:
    email = unique_email("cli")
    first = _create("--email", email, "--password", DEFAULT_PASSWORD)

    second = _create("--email", email, "--password", DEFAULT_PASSWORD)

    assert first.exit_code == 0, first.output
    assert "Created user" in first.output
    assert second.exit_code == 1
    assert "Email already in use." in second.output


@pytest.mark.parametrize(
    ("email", "password", "message"),
    [
        ("   ", DEFAULT_PASSWORD, "Email is required."),
        ("short@example.com", "abc", "Password must be at least"),
    ],
)
def test_create_user_validates_input(email: str, password: str, message: str) -> None:
    """Bad input is refused before the database is touched."""
    result = _create("--email", email, "--password", password)

    assert result.exit_code == 1
    assert message in result.output
    assert not db.initialized
