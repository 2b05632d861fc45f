"""
Async database access helpers (raw SQL).

This module owns the store handle. FastAPI opens it on startup and closes it
on shutdown (see `meapi/main.py`). Feature repositories receive the store as
their first argument and never reach for the process-wide handle themselves.

Drivers, picked from the DATABASE_URL scheme:
- postgres:// or postgresql://  -> asyncpg, pool of exactly one connection
- sqlite:///path/to/file.db     -> aiosqlite, one connection in autocommit mode

Either way there is a single connection, so statements run in the order they
were submitted. There is no implicit transaction around multi-statement
operations; `Store.transaction()` is opt-in.

SQL parameter style:
- statements use asyncpg positional placeholders: $1, $2, $3, ...
- the SQLite driver rewrites them to ?1, ?2, ?3 before execution
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import re
import sqlite3
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Iterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiosqlite
import asyncpg

from . import settings

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$(\d+)")

# (store, connection) of the transaction owned by the current task, if any.
_active_transaction: contextvars.ContextVar[tuple[Store, Any] | None] = contextvars.ContextVar(
    "meapi_active_transaction",
    default=None,
)

_store: Store | None = None


class StoreError(RuntimeError):
    """
    I/O or constraint failure from the persistence layer.

    The driver exception is kept on `cause` (and chained as `__cause__`).
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


def _owned_transaction(store: Store) -> Any | None:
    active = _active_transaction.get()
    if active is not None and active[0] is store:
        return active[1]
    return None


class Store:
    """
    Parameterized statement execution over one connection.

    Subclasses implement the driver-specific `_fetch_one`, `_fetch_all`,
    `_execute`, `_execute_script` and `transaction`.
    """

    dialect = ""
    driver_errors: tuple[type[BaseException], ...] = (OSError,)

    async def open(self) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        raise NotImplementedError

    @contextmanager
    def _errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except self.driver_errors as exc:
            raise StoreError(f"{self.dialect} {action} failed: {exc}", cause=exc) from exc

    async def init_schema(self, script: str | None = None) -> None:
        """
        Apply the schema script. All DDL uses IF NOT EXISTS, so re-running it
        on an initialized store is a no-op.
        """
        if script is None:
            path = settings.schema_path(self.dialect)
            try:
                script = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise StoreError(f"Cannot read schema file {path}: {exc}", cause=exc) from exc
        with self._errors("schema init"):
            await self._execute_script(script)

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        with self._errors("query"):
            return await self._fetch_one(sql, *args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        with self._errors("query"):
            return await self._fetch_all(sql, *args)

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE). Returns the affected row count.
        """
        with self._errors("statement"):
            return await self._execute(sql, *args)

    def transaction(self):
        raise NotImplementedError

    async def _fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        raise NotImplementedError

    async def _fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def _execute(self, sql: str, *args: Any) -> int:
        raise NotImplementedError

    async def _execute_script(self, script: str) -> None:
        raise NotImplementedError


def _to_qmark(sql: str) -> str:
    return _PLACEHOLDER.sub(r"?\1", sql)


class SqliteStore(Store):
    dialect = "sqlite"
    driver_errors = (sqlite3.Error, OSError)

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        self._conn: aiosqlite.Connection | None = None
        # Held per statement, or for the whole body of a transaction.
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        if self._conn is not None:
            return None
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self._errors("connect"):
            conn = await aiosqlite.connect(self.path, isolation_level=None)
            conn.row_factory = aiosqlite.Row
            if self.path != ":memory:":
                await conn.execute("PRAGMA journal_mode=WAL")
        self._conn = conn

    async def close(self) -> None:
        if self._conn is None:
            return None
        conn, self._conn = self._conn, None
        with self._errors("close"):
            await conn.close()

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StoreError("SQLite store is not open. Call open() on startup.")
        return self._conn

    @asynccontextmanager
    async def _turn(self) -> AsyncIterator[aiosqlite.Connection]:
        conn = self._connection()
        if _owned_transaction(self) is not None:
            yield conn
            return
        async with self._lock:
            yield conn

    async def _fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with self._turn() as conn:
            async with conn.execute(_to_qmark(sql), args) as cursor:
                row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def _fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with self._turn() as conn:
            async with conn.execute(_to_qmark(sql), args) as cursor:
                rows = await cursor.fetchall()
        return [dict(r) for r in rows]

    async def _execute(self, sql: str, *args: Any) -> int:
        async with self._turn() as conn:
            async with conn.execute(_to_qmark(sql), args) as cursor:
                return max(cursor.rowcount, 0)

    async def _execute_script(self, script: str) -> None:
        async with self._turn() as conn:
            await conn.executescript(script)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if _owned_transaction(self) is not None:
            yield
            return
        conn = self._connection()
        async with self._lock:
            token = _active_transaction.set((self, conn))
            try:
                with self._errors("begin"):
                    await conn.execute("BEGIN")
                try:
                    yield
                except BaseException:
                    with self._errors("rollback"):
                        await conn.execute("ROLLBACK")
                    raise
                with self._errors("commit"):
                    await conn.execute("COMMIT")
            finally:
                _active_transaction.reset(token)


def _command_tag_count(status: str) -> int:
    # asyncpg returns the command tag, e.g. "DELETE 3" or "INSERT 0 1".
    last = (status or "").rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else 0


class PostgresStore(Store):
    dialect = "postgres"
    driver_errors = (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError, OSError)

    def __init__(self, dsn: str, *, command_timeout: float = 30.0) -> None:
        self.dsn = dsn
        self.command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def open(self) -> None:
        if self._pool is not None:
            return None
        with self._errors("connect"):
            self._pool = await asyncpg.create_pool(
                dsn=self.dsn,
                min_size=1,
                max_size=1,
                command_timeout=self.command_timeout,
            )

    async def close(self) -> None:
        if self._pool is None:
            return None
        pool, self._pool = self._pool, None
        with self._errors("close"):
            await pool.close()

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreError("Postgres store is not open. Call open() on startup.")
        return self._pool

    def _executor(self) -> asyncpg.Pool | asyncpg.Connection:
        return _owned_transaction(self) or self.pool()

    async def _fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        row = await self._executor().fetchrow(sql, *args)
        return dict(row) if row is not None else None

    async def _fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        rows = await self._executor().fetch(sql, *args)
        return [dict(r) for r in rows]

    async def _execute(self, sql: str, *args: Any) -> int:
        status = await self._executor().execute(sql, *args)
        return _command_tag_count(status)

    async def _execute_script(self, script: str) -> None:
        # Without arguments asyncpg runs the text as a multi-statement script.
        await self._executor().execute(script)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if _owned_transaction(self) is not None:
            yield
            return
        with self._errors("transaction"):
            async with self.pool().acquire() as conn:
                async with conn.transaction():
                    token = _active_transaction.set((self, conn))
                    try:
                        yield
                    finally:
                        _active_transaction.reset(token)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    scheme = parts.scheme.split("+", 1)[0]
    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((scheme, parts.netloc, parts.path, query, parts.fragment))


def _sqlite_path(url: str) -> str:
    # sqlite:///relative.db, sqlite:////abs/path.db, sqlite:///:memory:
    rest = url.split("://", 1)[1] if "://" in url else ""
    path = rest[1:] if rest.startswith("/") else rest
    return path or ":memory:"


def create_store(url: str | None = None) -> Store:
    """
    Build an unopened store for `url` (defaults to DATABASE_URL).
    """
    url = (url or settings.database_url()).strip()
    scheme = urlsplit(url).scheme.lower().split("+", 1)[0]
    if scheme == "sqlite":
        return SqliteStore(_sqlite_path(url))
    if scheme in {"postgres", "postgresql"}:
        return PostgresStore(_sanitize_database_url(url), command_timeout=settings.db_command_timeout())
    raise StoreError(f"Unsupported DATABASE_URL scheme: {scheme or url!r}")


async def init_store(url: str | None = None) -> Store:
    global _store
    if _store is not None:
        return _store
    candidate = create_store(url)
    await candidate.open()
    _store = candidate
    logger.info("store_opened dialect=%s", candidate.dialect)
    return _store


async def close_store() -> None:
    global _store
    if _store is None:
        return None
    current, _store = _store, None
    await current.close()


def get_store() -> Store:
    """
    FastAPI dependency returning the process-wide store.
    """
    if _store is None:
        raise RuntimeError("Store is not initialized. Call init_store() on startup.")
    return _store
