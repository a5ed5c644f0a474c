from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.timeutil import to_display
from ..domain.interfaces import ReadingStore
from ..domain.levels import parse_level
from ..domain.ranges import resolve_range
from ..services.poller import PollerService
from .schemas import (
    ChartPoint,
    ErrorResponse,
    ManualLogRequest,
    MessageResponse,
    PollOutcomeOut,
    PollerStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Dependency getters ---
# main.py points these at the real objects via app.dependency_overrides.
def get_store() -> ReadingStore:  # overridden in main
    raise RuntimeError("Store dependency not configured")

def get_clock() -> datetime:  # overridden in main
    raise RuntimeError("Clock dependency not configured")

def get_poller() -> Optional[PollerService]:  # overridden in main
    return None


@router.get(
    "/chart-data",
    response_model=list[ChartPoint],
    responses={500: {"model": ErrorResponse}},
)
async def chart_data(
    range_: Optional[str] = Query(default=None, alias="range"),
    store: ReadingStore = Depends(get_store),
    now: datetime = Depends(get_clock),
):
    window = resolve_range(range_)
    since = window.lower_bound(now)
    rows = await store.query_since(since)
    logger.debug("chart-data range=%s since=%s rows=%d", window.key, since.isoformat(), len(rows))
    return [{"level": r.level, "timestamp": to_display(r.ts_utc)} for r in rows]


@router.post(
    "/manual-log",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def manual_log(
    req: ManualLogRequest,
    store: ReadingStore = Depends(get_store),
    now: datetime = Depends(get_clock),
):
    level = parse_level(req.level)
    reading = await store.insert_reading(level, now)
    logger.info("Manual log: %s", level)
    return {"message": f"Manually inserted level: {level} at {to_display(reading.ts_utc)}"}


@router.get("/poller/status", response_model=PollerStatusResponse)
async def poller_status(poller: Optional[PollerService] = Depends(get_poller)):
    if poller is None:
        return {"enabled": False}
    st = poller.state
    last = st.last_outcome
    return {
        "enabled": True,
        "running": st.running,
        "ticks": st.ticks,
        "upstream_url": poller.source_url,
        "next_tick": to_display(st.next_tick_utc) if st.next_tick_utc else None,
        "last": PollOutcomeOut(
            timestamp=to_display(last.ts_utc),
            ok=last.ok,
            level=last.level,
            error=last.error,
        ) if last else None,
    }
