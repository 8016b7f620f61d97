import os
import uuid
from collections.abc import AsyncGenerator

import pytest
from psycopg import sql

from resume_analyzer.adapters.postgres_kv import PostgresKeyValueStore
from resume_analyzer.config.settings import Settings
from resume_analyzer.database.connection import close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "resume_analyzer_test")
    return Settings(kv_get_timeout_seconds=5)


@pytest.fixture
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    try:
        await init_pool(test_settings)
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        await close_pool()


@pytest.fixture
async def kv_store(integration_pool: None) -> AsyncGenerator[PostgresKeyValueStore, None]:
    table = f"kv_test_{uuid.uuid4().hex[:8]}"
    store = PostgresKeyValueStore(table)
    await store.ensure_schema()
    try:
        yield store
    finally:
        async with get_connection() as conn:
            await conn.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table)))
