from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

Level = Union[int, float]


@dataclass(frozen=True)
class Reading:
    level: Level
    ts_utc: datetime


@dataclass(frozen=True)
class PollOutcome:
    ts_utc: datetime
    ok: bool
    level: Optional[Level] = None
    error: Optional[str] = None
