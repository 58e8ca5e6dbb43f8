"""Async SQLAlchemy engines for the two storage dialects.

Learn: Both backends sit behind one Database interface. Stores write
plain SQL with `?` placeholders and call fetch_one / fetch_all /
execute / insert; the variant decides everything dialect-specific:

- embedded (SQLite via aiosqlite): `?` placeholders, new ids from
  cursor.lastrowid, timestamps stored as text.
- client-server (PostgreSQL via asyncpg): `?` rebound to `$1..$n`,
  new ids from `RETURNING id`, native timestamptz.

Queries go through exec_driver_sql, so parameters are always bound by
the driver and never formatted into the SQL text. The SQLAlchemy pool
makes one Database safe to share across concurrent requests.

Adding a third backend means adding one more Database subclass and a
branch in open_database().
"""

import itertools
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Sequence

import structlog
from sqlalchemy import URL, event
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from secretlane.config import Settings
from secretlane.errors import ConflictError, NotFoundError, StorageError

logger = structlog.get_logger()

# Primary keys are SERIAL (int4) on the client-server dialect; SQLite
# accepts anything up to int8. Ids above this exist on neither.
MAX_ID = 2**31 - 1

DEFAULT_USERNAME = "admin@local"
DEFAULT_PASSWORD = "ChangeMe123!"

_SEED_USER = (
    "INSERT INTO users (username, password) VALUES (?, ?) "
    "ON CONFLICT (username) DO NOTHING"
)


class Database:
    """Shared storage handle. Subclasses supply the dialect."""

    dialect = ""
    schema: tuple[str, ...] = ()

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    # ─── Dialect hooks ──────────────────────────────────

    def prepare(self, sql: str) -> str:
        """Translate `?` placeholders into the driver's paramstyle."""
        return sql

    async def _insert(self, conn: AsyncConnection, sql: str, params: tuple) -> int:
        raise NotImplementedError

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        raise NotImplementedError

    def to_datetime(self, value: Any) -> datetime:
        return value

    # ─── Uniform contract ───────────────────────────────

    async def fetch_one(self, sql: str, *params: Any) -> Row:
        """Return exactly one row, or raise NotFoundError."""
        async with self._translate_errors():
            async with self.engine.connect() as conn:
                result = await conn.exec_driver_sql(self.prepare(sql), params)
                return result.one()

    async def fetch_all(self, sql: str, *params: Any) -> Sequence[Row]:
        async with self._translate_errors():
            async with self.engine.connect() as conn:
                result = await conn.exec_driver_sql(self.prepare(sql), params)
                return result.all()

    async def execute(self, sql: str, *params: Any) -> int:
        """Run a write statement in its own transaction; return affected rows."""
        async with self._translate_errors():
            async with self.engine.begin() as conn:
                result = await conn.exec_driver_sql(self.prepare(sql), params)
                return result.rowcount

    async def insert(self, sql: str, *params: Any) -> int:
        """Run an INSERT in its own transaction; return the new primary key."""
        async with self._translate_errors():
            async with self.engine.begin() as conn:
                return await self._insert(conn, sql, params)

    async def create_schema(self, seed_default_user: bool = False) -> None:
        """Create tables if absent. Never drops anything."""
        async with self._translate_errors():
            async with self.engine.begin() as conn:
                for statement in self.schema:
                    await conn.exec_driver_sql(statement)
                if seed_default_user:
                    await conn.exec_driver_sql(
                        self.prepare(_SEED_USER), (DEFAULT_USERNAME, DEFAULT_PASSWORD)
                    )
        logger.info(
            "db.schema_ready", dialect=self.dialect, seeded=seed_default_user
        )

    async def ping(self) -> None:
        async with self._translate_errors():
            async with self.engine.connect() as conn:
                await conn.exec_driver_sql("SELECT 1")

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def _translate_errors(self):
        try:
            yield
        except NoResultFound as e:
            raise NotFoundError() from e
        except IntegrityError as e:
            if self.is_unique_violation(e):
                raise ConflictError() from e
            logger.error("db.integrity_error", dialect=self.dialect, error=str(e.orig))
            raise StorageError() from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("db.error", dialect=self.dialect, error=str(e))
            raise StorageError() from e
        except OverflowError as e:
            # aiosqlite rejects out-of-range ints before SQLAlchemy sees them
            logger.error("db.overflow", dialect=self.dialect, error=str(e))
            raise StorageError() from e


class SqliteDatabase(Database):
    """Embedded dialect: a local SQLite file through aiosqlite."""

    dialect = "embedded"
    schema = (
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS workspaces (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            created_by INTEGER NOT NULL REFERENCES users(id),
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now')),
            UNIQUE (name, created_by)
        )
        """,
    )

    async def _insert(self, conn: AsyncConnection, sql: str, params: tuple) -> int:
        result = await conn.exec_driver_sql(self.prepare(sql), params)
        return result.lastrowid

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        return "UNIQUE constraint failed" in str(exc.orig)

    def to_datetime(self, value: Any) -> datetime:
        # SQLite hands back the text default, e.g. "2025-01-31 09:15:02.137" (UTC).
        if isinstance(value, str):
            return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)
        return value


class PostgresDatabase(Database):
    """Client-server dialect: PostgreSQL through asyncpg."""

    dialect = "client-server"
    schema = (
        """
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS workspaces (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            created_by INTEGER NOT NULL REFERENCES users(id),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            UNIQUE (name, created_by)
        )
        """,
    )

    _placeholder = re.compile(r"\?")

    def prepare(self, sql: str) -> str:
        counter = itertools.count(1)
        return self._placeholder.sub(lambda _: f"${next(counter)}", sql)

    async def _insert(self, conn: AsyncConnection, sql: str, params: tuple) -> int:
        result = await conn.exec_driver_sql(
            self.prepare(f"{sql} RETURNING id"), params
        )
        return result.scalar_one()

    def is_unique_violation(self, exc: IntegrityError) -> bool:
        # 23505 = unique_violation
        sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
        if sqlstate:
            return sqlstate == "23505"
        return "duplicate key value" in str(exc.orig)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def open_database(settings: Settings) -> Database:
    """Build the Database variant selected by settings.db_dialect.

    No connection is made here; the app lifespan pings storage at startup.
    """
    if settings.db_dialect == "client-server":
        url = settings.database_url or URL.create(
            "postgresql+asyncpg",
            username=settings.postgres_user,
            password=settings.postgres_password or None,
            host=settings.postgres_host,
            port=settings.postgres_port,
            database=settings.postgres_dbname,
        )
        engine = create_async_engine(
            url,
            echo=settings.debug,
            pool_size=5,
            max_overflow=15,
            pool_pre_ping=True,
            connect_args={"ssl": settings.postgres_sslmode},
        )
        return PostgresDatabase(engine)

    url = settings.database_url or f"sqlite+aiosqlite:///{settings.sqlite_path}"
    engine = create_async_engine(url, echo=settings.debug)
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return SqliteDatabase(engine)
