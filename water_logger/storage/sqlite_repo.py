from __future__ import annotations
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List

import aiosqlite

from ..core.exceptions import StoreError
from ..core.timeutil import as_utc
from ..domain.models import Level, Reading

logger = logging.getLogger(__name__)


def _encode_ts(ts: datetime) -> str:
    # Fixed-width text keeps lexical order equal to time order
    return as_utc(ts).isoformat(timespec="microseconds")


class SQLitePool:
    """Bounded set of aiosqlite connections. Callers beyond max_size wait for a free one."""

    def __init__(self, path: str, max_size: int = 5, timeout: float = 10.0) -> None:
        self._path = path
        self._timeout = timeout
        self._slots = asyncio.Semaphore(max(1, max_size))
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._conns: list[aiosqlite.Connection] = []

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        async with self._slots:
            try:
                conn = self._idle.get_nowait()
            except asyncio.QueueEmpty:
                conn = await aiosqlite.connect(self._path, timeout=self._timeout)
                self._conns.append(conn)
            reusable = True
            try:
                yield conn
            except BaseException:
                # A failed or cancelled caller may leave a write transaction open
                reusable = await self._reset(conn)
                raise
            finally:
                if reusable:
                    self._idle.put_nowait(conn)

    async def _reset(self, conn: aiosqlite.Connection) -> bool:
        try:
            await conn.rollback()
            return True
        except Exception as e:
            logger.warning("Dropping pooled connection after failed rollback: %s", e)
        self._conns.remove(conn)
        try:
            await conn.close()
        except Exception as e:
            logger.warning("Closing dropped connection failed: %s", e)
        return False

    async def close(self) -> None:
        conns, self._conns = self._conns, []
        while not self._idle.empty():
            self._idle.get_nowait()
        for conn in conns:
            await conn.close()


class SQLiteRepository:
    def __init__(self, path: str, pool_size: int = 5, op_timeout: float = 10.0) -> None:
        self._path = path
        self._op_timeout = op_timeout
        self._pool = SQLitePool(path, max_size=pool_size, timeout=op_timeout)

    async def _run(self, coro):
        try:
            return await asyncio.wait_for(coro, timeout=self._op_timeout)
        except asyncio.TimeoutError:
            raise StoreError(f"Database operation timed out after {self._op_timeout}s")
        except aiosqlite.Error as e:
            raise StoreError(str(e)) from e

    async def init(self) -> None:
        await self._run(self._init())
        logger.info("SQLite store ready at %s", self._path)

    async def _init(self) -> None:
        async with self._pool.acquire() as db:
            await db.execute(
                """
                CREATE TABLE IF NOT EXISTS water_levels (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    level REAL NOT NULL,
                    "timestamp" TEXT NOT NULL
                        DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now') || '000+00:00')
                )
                """
            )
            await db.execute(
                'CREATE INDEX IF NOT EXISTS idx_water_levels_ts ON water_levels("timestamp")'
            )
            await db.commit()

    async def close(self) -> None:
        await self._pool.close()

    async def insert_reading(self, level: Level, ts_utc: datetime) -> Reading:
        await self._run(self._insert(level, ts_utc))
        return Reading(level=level, ts_utc=as_utc(ts_utc))

    async def _insert(self, level: Level, ts_utc: datetime) -> None:
        async with self._pool.acquire() as db:
            await db.execute(
                'INSERT INTO water_levels(level, "timestamp") VALUES (?, ?)',
                (float(level), _encode_ts(ts_utc)),
            )
            await db.commit()

    async def query_since(self, start_utc: datetime) -> List[Reading]:
        return await self._run(self._query_since(start_utc))

    async def _query_since(self, start_utc: datetime) -> List[Reading]:
        async with self._pool.acquire() as db:
            cur = await db.execute(
                """
                SELECT level, "timestamp"
                FROM water_levels
                WHERE "timestamp" >= ?
                ORDER BY "timestamp" ASC, id ASC
                """,
                (_encode_ts(start_utc),),
            )
            rows = await cur.fetchall()
        return [
            Reading(level=float(level), ts_utc=datetime.fromisoformat(ts))
            for level, ts in rows
        ]
