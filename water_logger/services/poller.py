from __future__ import annotations
import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..core.exceptions import StoreError, UpstreamError
from ..core.timeutil import now_utc, to_display
from ..domain.interfaces import Clock, LevelSource, ReadingStore
from ..domain.models import PollOutcome, Reading

logger = logging.getLogger(__name__)


@dataclass
class PollerState:
    running: bool = False
    ticks: int = 0
    last_outcome: Optional[PollOutcome] = None
    next_tick_utc: Optional[datetime] = None


class PollerService:
    """Fetches one upstream reading per tick and stores it.

    Ticks land on multiples of ``interval_seconds`` since the epoch, so the
    default hourly interval fires at the top of every hour. A failed tick is
    logged and skipped; the next scheduled tick is the only retry.
    """

    def __init__(
        self,
        source: LevelSource,
        store: ReadingStore,
        interval_seconds: float = 3600,
        clock: Clock = now_utc,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._source = source
        self._store = store
        self._interval = float(interval_seconds)
        self._clock = clock

        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()

        self.state = PollerState()

    @property
    def source_url(self) -> Optional[str]:
        return getattr(self._source, "url", None)

    def next_tick_after(self, now: datetime) -> datetime:
        epoch = now.timestamp()
        slot = math.floor(epoch / self._interval) + 1
        return datetime.fromtimestamp(slot * self._interval, tz=timezone.utc)

    async def start(self) -> None:
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="poller_loop")
        self.state.running = True

    async def stop(self) -> None:
        self._stop.set()
        if self._task:
            await self._task
            self._task = None
        self.state.running = False

    async def tick(self) -> Optional[Reading]:
        """Run one poll. Never raises; returns the stored reading or None."""
        ts = self._clock()
        self.state.ticks += 1
        try:
            level = await self._source.fetch_level()
            reading = await self._store.insert_reading(level, ts)
        except UpstreamError as e:
            logger.warning("Poll failed: %s", e)
            self.state.last_outcome = PollOutcome(ts_utc=ts, ok=False, error=str(e))
            return None
        except StoreError as e:
            logger.error("Poll insert failed: %s", e)
            self.state.last_outcome = PollOutcome(ts_utc=ts, ok=False, error=str(e))
            return None
        except Exception as e:
            logger.exception("Poll tick error: %s", e)
            self.state.last_outcome = PollOutcome(ts_utc=ts, ok=False, error=str(e) or type(e).__name__)
            return None

        logger.info("Auto-logged: %s at %s", reading.level, to_display(reading.ts_utc))
        self.state.last_outcome = PollOutcome(ts_utc=ts, ok=True, level=reading.level)
        return reading

    async def _run(self) -> None:
        logger.info("Poller loop started (interval_seconds=%s)", self._interval)

        while not self._stop.is_set():
            now = self._clock()
            next_tick = self.next_tick_after(now)
            self.state.next_tick_utc = next_tick
            delay = max(0.0, (next_tick - now).total_seconds())

            # sleep until the next slot, waking early on stop
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
                break
            except asyncio.TimeoutError:
                pass

            await self.tick()

        logger.info("Poller loop stopped")
