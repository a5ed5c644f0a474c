from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import InvalidLevelError, StoreError

logger = logging.getLogger(__name__)


async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("%s %s storage failure: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def _invalid_level(request: Request, exc: InvalidLevelError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid level value"})


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"error": "..."}."""
    app.add_exception_handler(StoreError, _store_error)
    app.add_exception_handler(InvalidLevelError, _invalid_level)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled)
