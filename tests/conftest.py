from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from water_logger.api.errors import register_exception_handlers
from water_logger.api.routes import get_clock, get_poller, get_store, router
from water_logger.core.exceptions import StoreError
from water_logger.domain.models import Reading
from water_logger.services.upstream import SensorBackendClient

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# ───────────── fakes ─────────────
class FakeStore:
    def __init__(self):
        self.rows: list[Reading] = []
        self.insert_calls = 0
        self.fail_with: str | None = None

    async def init(self):
        pass

    async def close(self):
        pass

    async def insert_reading(self, level, ts_utc):
        if self.fail_with:
            raise StoreError(self.fail_with)
        self.insert_calls += 1
        reading = Reading(level=level, ts_utc=ts_utc)
        self.rows.append(reading)
        return reading

    async def query_since(self, start_utc):
        if self.fail_with:
            raise StoreError(self.fail_with)
        return sorted((r for r in self.rows if r.ts_utc >= start_utc), key=lambda r: r.ts_utc)


def upstream_returning(status_code=200, **kwargs) -> SensorBackendClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return SensorBackendClient("http://sensor.test/api/water-level", transport=httpx.MockTransport(handler))


def upstream_unreachable() -> SensorBackendClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return SensorBackendClient("http://sensor.test/api/water-level", transport=httpx.MockTransport(handler))


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def client(store) -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router, prefix="/api")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: NOW
    app.dependency_overrides[get_poller] = lambda: None
    return TestClient(app)
