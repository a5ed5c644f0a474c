from __future__ import annotations
from pydantic import BaseModel
from typing import Any, Optional, Union


class ManualLogRequest(BaseModel):
    # Left untyped so that "5" or true reach parse_level instead of being coerced
    level: Any = None


class ChartPoint(BaseModel):
    level: Union[int, float]
    timestamp: str  # "DD/MM/YYYY HH:MM:SS" in the display timezone


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class PollOutcomeOut(BaseModel):
    timestamp: str
    ok: bool
    level: Optional[Union[int, float]] = None
    error: Optional[str] = None


class PollerStatusResponse(BaseModel):
    enabled: bool
    running: bool = False
    ticks: int = 0
    upstream_url: Optional[str] = None
    next_tick: Optional[str] = None
    last: Optional[PollOutcomeOut] = None
