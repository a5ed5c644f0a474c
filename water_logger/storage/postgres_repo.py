"""asyncpg-backed reading store."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

import asyncpg  # type: ignore[import-untyped]

from ..core.exceptions import StoreError
from ..core.timeutil import as_utc
from ..domain.models import Level, Reading

logger = logging.getLogger(__name__)


class PostgresRepository:
    """Reading store on a shared asyncpg pool, created once by init()."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        pool_size: int = 5,
        op_timeout: float = 10.0,
    ) -> None:
        self._connect_kwargs = dict(host=host, port=port, user=user, password=password, database=database)
        self._pool_size = max(1, pool_size)
        self._op_timeout = op_timeout
        self._pool: Optional[asyncpg.Pool] = None

    def _get_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreError("Database pool not initialized. Call init() first.")
        return self._pool

    async def init(self) -> None:
        try:
            if self._pool is None:
                self._pool = await asyncio.wait_for(
                    asyncpg.create_pool(
                        min_size=1,
                        max_size=self._pool_size,
                        command_timeout=self._op_timeout,
                        **self._connect_kwargs,
                    ),
                    timeout=self._op_timeout,
                )
            async with self._get_pool().acquire() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS water_levels (
                        id BIGSERIAL PRIMARY KEY,
                        level DOUBLE PRECISION NOT NULL,
                        "timestamp" TIMESTAMPTZ NOT NULL DEFAULT now()
                    )
                    """
                )
                await conn.execute(
                    'CREATE INDEX IF NOT EXISTS idx_water_levels_ts ON water_levels ("timestamp")'
                )
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            raise StoreError(f"Database init failed: {e}") from e
        logger.info(
            "Postgres store ready at %s:%s/%s (pool max=%d)",
            self._connect_kwargs["host"],
            self._connect_kwargs["port"],
            self._connect_kwargs["database"],
            self._pool_size,
        )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def insert_reading(self, level: Level, ts_utc: datetime) -> Reading:
        ts = as_utc(ts_utc)
        pool = self._get_pool()
        try:
            # Waits for a free connection when the pool is exhausted
            async with pool.acquire(timeout=self._op_timeout) as conn:
                await conn.execute(
                    'INSERT INTO water_levels (level, "timestamp") VALUES ($1, $2)',
                    float(level),
                    ts,
                )
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            raise StoreError(str(e) or type(e).__name__) from e
        return Reading(level=level, ts_utc=ts)

    async def query_since(self, start_utc: datetime) -> List[Reading]:
        pool = self._get_pool()
        try:
            async with pool.acquire(timeout=self._op_timeout) as conn:
                rows = await conn.fetch(
                    """
                    SELECT level, "timestamp"
                    FROM water_levels
                    WHERE "timestamp" >= $1
                    ORDER BY "timestamp" ASC, id ASC
                    """,
                    as_utc(start_utc),
                )
        except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
            raise StoreError(str(e) or type(e).__name__) from e
        return [Reading(level=float(r["level"]), ts_utc=as_utc(r["timestamp"])) for r in rows]
