import asyncio
import os
from collections.abc import Awaitable, Callable
from importlib import resources
from typing import Any, TypeVar

import pytest

from intake.config.settings import Settings
from intake.database.connection import close_pool, get_connection, init_pool

T = TypeVar("T")


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "intake_test")
    return Settings(api_timeout_seconds=5)


async def _create_schema() -> None:
    schema = resources.files("intake.database").joinpath("schema.sql").read_text()
    async with get_connection() as conn:
        await conn.execute(schema)
        await conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_database(test_settings: Settings) -> None:
    async def probe() -> None:
        await init_pool(test_settings)
        try:
            await _create_schema()
        finally:
            await close_pool()

    try:
        asyncio.run(probe())
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. Set DB_* env to point at a test database"
        )


@pytest.fixture
def run_with_pool(
    integration_database: None,
    test_settings: Settings,
) -> Callable[[Callable[[], Awaitable[T]]], T]:
    """Run a coroutine factory on a fresh event loop with the pool open."""

    def _run(scenario: Callable[[], Awaitable[Any]]) -> Any:
        async def wrapped() -> Any:
            await init_pool(test_settings)
            try:
                return await scenario()
            finally:
                await close_pool()

        return asyncio.run(wrapped())

    return _run


@pytest.fixture
def integration_cleanup(run_with_pool: Callable[..., Any]) -> Any:
    created: list[int] = []
    yield created
    if not created:
        return

    async def delete_rows() -> None:
        async with get_connection() as conn:
            await conn.execute(
                "DELETE FROM translation_requests WHERE id = ANY(%s)", (created,)
            )
            await conn.commit()

    run_with_pool(delete_rows)
