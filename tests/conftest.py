"""Shared pytest fixtures for Boda API tests."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from alembic import command
from alembic.config import Config
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.db import DatabaseConfig, build_sync_url, db, metadata
from boda_api.main import create_app
from boda_api.settings import DEFAULT_PROJECT_ROOT, Settings, get_settings, reload_settings
from tests.fakes import FakePaymentGateway
from tests.utils import JWT_SECRET, WEBHOOK_SECRET


_TEST_ENV = (
    "BODA_DATABASE_URL",
    "BODA_JWT_SECRET",
    "BODA_MERCADOPAGO_WEBHOOK_SECRET",
    "BODA_SERVER_PUBLIC_URL",
    "BODA_FRONTEND_URL",
    "BODA_TEST_FAST_HASH",
)


def pytest_collection_modifyitems(config, items) -> None:
    for item in items:
        path_str = str(Path(str(item.fspath)))
        if f"{os.sep}integration{os.sep}" in path_str:
            item.add_marker(pytest.mark.integration)
        elif f"{os.sep}unit{os.sep}" in path_str:
            item.add_marker(pytest.mark.unit)


def alembic_config(settings: Settings) -> Config:
    config = Config(str(DEFAULT_PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(DEFAULT_PROJECT_ROOT / "migrations"))
    config.set_main_option("sqlalchemy.url", build_sync_url(DatabaseConfig.from_settings(settings)))
    config.attributes["configure_logger"] = False
    return config


@pytest.fixture(scope="session", autouse=True)
def _configure_environment(tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    """Point settings at an ephemeral SQLite database and migrate it."""

    db_path = tmp_path_factory.mktemp("boda-db") / "boda.sqlite"
    os.environ["BODA_DATABASE_URL"] = f"sqlite:///{db_path.as_posix()}"
    os.environ["BODA_JWT_SECRET"] = JWT_SECRET
    os.environ["BODA_MERCADOPAGO_WEBHOOK_SECRET"] = WEBHOOK_SECRET
    os.environ["BODA_SERVER_PUBLIC_URL"] = "http://testserver"
    os.environ["BODA_FRONTEND_URL"] = "http://frontend.test"
    os.environ["BODA_TEST_FAST_HASH"] = "1"
    settings = reload_settings()

    config = alembic_config(settings)
    command.upgrade(config, "head")

    yield

    command.downgrade(config, "base")
    for env_var in _TEST_ENV:
        os.environ.pop(env_var, None)
    reload_settings()


@pytest.fixture()
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture()
def app(payment_gateway: FakePaymentGateway) -> Iterator[FastAPI]:
    """Return an application wired to the fake payment gateway."""

    application = create_app(get_settings(), payment_gateway=payment_gateway)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def override_settings(app: FastAPI) -> Callable[..., Settings]:
    """Swap request-time settings for a single test."""

    def _apply(**updates: Any) -> Settings:
        updated = get_settings().model_copy(update=updates)
        app.dependency_overrides[get_settings] = lambda: updated
        return updated

    return _apply


async def _truncate_tables() -> None:
    async with db.engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            await conn.execute(table.delete())


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """HTTPX client bound to the app with its lifespan running; tables are emptied afterwards."""

    async with LifespanManager(app) as manager:
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
        await _truncate_tables()


@pytest_asyncio.fixture()
async def session(async_client: AsyncClient) -> AsyncIterator[AsyncSession]:
    """A database session on the same engine the running app uses."""

    async with db.sessionmaker() as db_session:
        yield db_session
