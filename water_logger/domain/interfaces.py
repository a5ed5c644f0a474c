from __future__ import annotations
from datetime import datetime
from typing import Callable, Protocol, runtime_checkable
from .models import Level, Reading

Clock = Callable[[], datetime]


@runtime_checkable
class ReadingStore(Protocol):
    async def init(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def insert_reading(self, level: Level, ts_utc: datetime) -> Reading:
        ...

    async def query_since(self, start_utc: datetime) -> list[Reading]:
        ...


@runtime_checkable
class LevelSource(Protocol):
    async def fetch_level(self) -> Level:
        ...
