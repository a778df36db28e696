import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from intake.config.settings import Settings
from intake.database.connection import apply_schema, close_pool, get_connection, init_pool
from intake.store.postgres_store import PostgresDocumentStore

_TABLES = "activities, analyses, service_connections, documents"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "intake_test")
    return Settings(store_backend="postgres")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Point the DB_* environment variables at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def pg_store(integration_pool: None) -> Generator[PostgresDocumentStore, None, None]:
    """A store over freshly truncated tables; rows are removed again afterwards."""
    _truncate()
    yield PostgresDocumentStore()
    _truncate()


def _truncate() -> None:
    with get_connection() as conn:
        conn.execute(f"TRUNCATE {_TABLES} RESTART IDENTITY CASCADE")
        conn.commit()
