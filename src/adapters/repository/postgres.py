"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Atomicity:
----------
1. **Email uniqueness**: INSERT ... ON CONFLICT (email) DO NOTHING. The
   UNIQUE constraint serialises concurrent signups for one address; the
   loser sees rowcount 0 instead of an exception.

2. **Activation**: UPDATE ... WHERE activated = FALSE. Row-level update
   semantics mean exactly one of several concurrent activations reports
   a changed row.

3. **Profile email change**: a UniqueViolation on UPDATE is reported as
   None (email taken) rather than raised.
"""

import logging
from pathlib import Path

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.models import Account

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, email, password_digest, activation_digest, activated, "
    "activated_at, avatar_url, created_at, updated_at"
)


def _to_account(row: dict | None) -> Account | None:
    if row is None:
        return None
    return Account(**row)


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def create(
        self, name: str, email: str, password_digest: str, activation_digest: str
    ) -> Account | None:
        """
        Insert a pending account.

        Returns:
            The stored Account, or None if the email is already taken
        """
        sql = f"""
            INSERT INTO users (name, email, password_digest, activation_digest)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (name, email, password_digest, activation_digest))
            row = cursor.fetchone()
            conn.commit()
            return _to_account(row)

    def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (email,))
            return _to_account(cursor.fetchone())

    def find_by_id(self, account_id: int) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s"

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (account_id,))
            return _to_account(cursor.fetchone())

    def activate(self, account_id: int) -> bool:
        """
        Transition PENDING -> ACTIVATED.

        Returns:
            True if this call changed the row, False if the account was
            already activated (or does not exist)
        """
        sql = """
            UPDATE users
            SET activated = TRUE, activated_at = NOW(), updated_at = NOW()
            WHERE id = %s AND activated = FALSE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (account_id,))
            conn.commit()
            return cursor.rowcount == 1

    def update_profile(
        self, account_id: int, name: str, email: str, password_digest: str | None
    ) -> Account | None:
        """
        Update name, email and optionally the password digest.

        COALESCE keeps the stored digest when no new password was given.

        Returns:
            The updated Account, or None if the email belongs to another account
        """
        sql = f"""
            UPDATE users
            SET name = %s,
                email = %s,
                password_digest = COALESCE(%s, password_digest),
                updated_at = NOW()
            WHERE id = %s
            RETURNING {_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            try:
                cursor.execute(sql, (name, email, password_digest, account_id))
            except psycopg.errors.UniqueViolation:
                conn.rollback()
                return None
            row = cursor.fetchone()
            conn.commit()
            return _to_account(row)

    def set_avatar_url(self, account_id: int, avatar_url: str) -> Account | None:
        sql = f"""
            UPDATE users
            SET avatar_url = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING {_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (avatar_url, account_id))
            row = cursor.fetchone()
            conn.commit()
            return _to_account(row)

    def count(self) -> int:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM users")
            return cursor.fetchone()[0]


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
