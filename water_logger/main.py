from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.log import configure_logging
from .core.timeutil import now_utc

from .api.errors import register_exception_handlers
from .api.routes import router as api_router
import water_logger.api.routes as routes_module

from .domain.interfaces import ReadingStore
from .services.poller import PollerService
from .services.upstream import SensorBackendClient
from .storage.postgres_repo import PostgresRepository
from .storage.sqlite_repo import SQLiteRepository


logger = logging.getLogger(__name__)


def build_store() -> ReadingStore:
    if settings.db_backend.lower() == "postgres":
        return PostgresRepository(
            host=settings.db_host,
            port=settings.db_port,
            user=settings.db_user,
            password=settings.db_password,
            database=settings.db_name,
            pool_size=settings.db_pool_size,
            op_timeout=settings.db_timeout_seconds,
        )

    # default to sqlite
    return SQLiteRepository(
        settings.sqlite_path,
        pool_size=settings.db_pool_size,
        op_timeout=settings.db_timeout_seconds,
    )


store = build_store()
poller: PollerService | None = None


def get_store() -> ReadingStore:
    return store


def get_clock() -> datetime:
    return now_utc()


def get_poller() -> PollerService | None:
    return poller


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level, settings.log_file)
    logger.info("Starting %s (db_backend=%s)", settings.app_name, settings.db_backend)

    await store.init()

    global poller
    if settings.poll_enabled:
        poller = PollerService(
            source=SensorBackendClient(settings.upstream_url, timeout=settings.upstream_timeout_seconds),
            store=store,
            interval_seconds=settings.poll_interval_seconds,
        )
        await poller.start()
    else:
        logger.info("Upstream polling disabled")

    logger.info("Logger server running on port %s", settings.port)

    try:
        yield
    finally:
        if poller:
            await poller.stop()
            poller = None

        await store.close()

        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

# Make the dependency functions in routes resolve to the real ones
app.dependency_overrides[routes_module.get_store] = get_store
app.dependency_overrides[routes_module.get_clock] = get_clock
app.dependency_overrides[routes_module.get_poller] = get_poller

app.include_router(api_router, prefix="/api")
