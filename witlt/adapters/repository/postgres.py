"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
user repository port using psycopg3 with raw SQL.

Transactions
------------
``create_user`` and ``link_or_create_social_user`` run inside
``conn.transaction()``: the ``users`` row and its ``user_settings`` row are
committed together or not at all, and any exception rolls both back
before propagating.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg import Cursor, sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from witlt.domain.models import User

logger = logging.getLogger(__name__)

# Provider name -> users column holding that provider's account id
_PROVIDER_COLUMNS = {
    "twitter": "twitter_id",
}

_USER_COLUMNS = "id, email, twitter_id, password_hash, nickname, created_at, updated_at"


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

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

    def exists_by_email(self, email: str) -> bool:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT 1 FROM users WHERE email = %s", (email,))
            return cursor.fetchone() is not None

    def get_by_email(self, email: str) -> User | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s", (email,))
            row = cursor.fetchone()
        return _to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
            row = cursor.fetchone()
        return _to_user(row) if row is not None else None

    def create_user(
        self,
        email: str,
        password_hash: str,
        nickname: str,
        settings: dict[str, Any],
    ) -> User:
        """
        Insert a user and its default settings in one transaction.

        Raises:
            psycopg.errors.UniqueViolation: If the email is already registered
        """
        with self._pool.connection() as conn:
            with conn.transaction(), conn.cursor(row_factory=dict_row) as cursor:
                user = _insert_user(cursor, email, password_hash, nickname, settings)
        logger.info("Created user %s", user.id)
        return user

    def link_or_create_social_user(
        self,
        provider: str,
        provider_id: str,
        email: str,
        nickname: str,
        settings: dict[str, Any],
    ) -> User:
        """
        Find, link or create the user for a social identity.

        Rows are locked with SELECT FOR UPDATE so two callbacks for the same
        identity cannot both insert.
        """
        column = sql.Identifier(_provider_column(provider))

        with self._pool.connection() as conn:
            with conn.transaction(), conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(
                    sql.SQL(f"SELECT {_USER_COLUMNS} FROM users WHERE {{}} = %s FOR UPDATE").format(
                        column
                    ),
                    (provider_id,),
                )
                row = cursor.fetchone()
                if row is not None:
                    return _to_user(row)

                cursor.execute(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s FOR UPDATE", (email,)
                )
                row = cursor.fetchone()
                if row is not None:
                    cursor.execute(
                        sql.SQL(
                            f"UPDATE users SET {{}} = %s, updated_at = NOW() "
                            f"WHERE id = %s RETURNING {_USER_COLUMNS}"
                        ).format(column),
                        (provider_id, row["id"]),
                    )
                    linked = cursor.fetchone()
                    logger.info("Linked %s account to user %s", provider, row["id"])
                    return _to_user(linked)

                user = _insert_user(
                    cursor,
                    email,
                    None,
                    nickname,
                    settings,
                    provider_column=column,
                    provider_id=provider_id,
                )
        logger.info("Created user %s from %s login", user.id, provider)
        return user

    def ping(self) -> None:
        with self._pool.connection() as conn:
            conn.execute("SELECT 1")


def _provider_column(provider: str) -> str:
    try:
        return _PROVIDER_COLUMNS[provider]
    except KeyError:
        raise ValueError(f"Unsupported provider: {provider}") from None


def _insert_user(
    cursor: Cursor,
    email: str,
    password_hash: str | None,
    nickname: str,
    settings: dict[str, Any],
    provider_column: sql.Identifier | None = None,
    provider_id: str | None = None,
) -> User:
    """Insert users + user_settings rows using the caller's transaction."""
    if provider_column is None:
        cursor.execute(
            f"""
            INSERT INTO users (email, password_hash, nickname)
            VALUES (%s, %s, %s)
            RETURNING {_USER_COLUMNS}
            """,
            (email, password_hash, nickname),
        )
    else:
        cursor.execute(
            sql.SQL(
                f"""
                INSERT INTO users (email, {{}}, password_hash, nickname)
                VALUES (%s, %s, %s, %s)
                RETURNING {_USER_COLUMNS}
                """
            ).format(provider_column),
            (email, provider_id, password_hash, nickname),
        )
    user = _to_user(cursor.fetchone())

    cursor.execute(
        "INSERT INTO user_settings (user_id, settings_json) VALUES (%s, %s)",
        (user.id, Jsonb(settings)),
    )
    return user


def _to_user(row: dict[str, Any]) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        nickname=row["nickname"],
        password_hash=row["password_hash"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        twitter_id=row["twitter_id"],
    )


MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """
    Apply pending SQL migrations in filename order.

    Applied filenames are recorded in ``schema_migrations``; each file runs
    in its own transaction together with its bookkeeping row, so a failed
    migration leaves no trace and is retried on the next startup.

    Returns:
        Names of the migrations applied by this call
    """
    if not migrations_dir.is_dir():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return []

    with pool.connection() as conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations ("
            " name VARCHAR(255) PRIMARY KEY,"
            " applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW())"
        )
        applied = {row[0] for row in conn.execute("SELECT name FROM schema_migrations")}

    pending = [path for path in sorted(migrations_dir.glob("*.sql")) if path.name not in applied]
    if not pending:
        logger.info("Database schema is up to date")
        return []

    for path in pending:
        logger.info("Applying migration %s", path.name)
        try:
            with pool.connection() as conn, conn.transaction():
                conn.execute(path.read_text())
                conn.execute("INSERT INTO schema_migrations (name) VALUES (%s)", (path.name,))
        except Exception as e:
            raise RuntimeError(f"Database migration failed: {path.name}") from e

    return [path.name for path in pending]
