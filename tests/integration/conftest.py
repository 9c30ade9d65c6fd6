"""
Fixtures for PostgreSQL-backed integration tests.

Tests are skipped when the configured database is unreachable.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool and schema for integration tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=3) as conn:
            conn.execute("SELECT 1")
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean users table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield
