"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 3001
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.th_common.database import create_tables, engine, get_db_session
from src.th_common.datetime_utils import utc_now
from src.th_common.errors import AppError, DevEndpointDisabledError, InternalError
from src.th_common.response import ApiResponse, error_response, success_response
from src.th_gateway.api.router import get_user_service
from src.th_gateway.api.router import router as auth_router
from src.th_gateway.api.users_router import router as users_router
from src.th_gateway.middleware.request_log import RequestLogMiddleware
from src.th_gateway.user.service import UserService
from src.th_notification.api.router import get_notification_service
from src.th_notification.api.router import router as notification_router
from src.th_notification.application.service import NotificationApplicationService
from src.th_trade.api.router import get_trade_service
from src.th_trade.api.router import router as trade_router
from src.th_trade.application.service import TradeApplicationService

logger = logging.getLogger("tradehub.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging, tables, DB check. Shutdown: dispose the pool."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("%s ready on %s", settings.APP_NAME, engine.url.render_as_string(hide_password=True))
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(request: Request, status_code: int, code: int, message: str) -> JSONResponse:
    resp = error_response(code, message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=status_code, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("AppError %d on %s: %s", exc.code, request.url.path, exc.message)
    return _envelope(request, exc.http_status, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _envelope(request, 400, 1000, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(request, exc.status_code, exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    err = InternalError()
    return _envelope(request, err.http_status, err.code, err.message)


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(trade_router, prefix=settings.API_PREFIX)
app.include_router(notification_router, prefix=settings.API_PREFIX)


@app.get(f"{settings.API_PREFIX}/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": utc_now().isoformat()}


@app.delete(f"{settings.API_PREFIX}/dev/clear-data", tags=["dev"])
async def clear_data(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    users: Annotated[UserService, Depends(get_user_service)],
    trades: Annotated[TradeApplicationService, Depends(get_trade_service)],
    notifications: Annotated[NotificationApplicationService, Depends(get_notification_service)],
) -> ApiResponse:
    """Wipe every collection. Development only."""
    if not settings.DEBUG:
        raise DevEndpointDisabledError()
    await notifications.clear(db)
    await trades.clear(db)
    await users.clear(db)
    logger.warning("All data cleared via dev endpoint")
    resp = success_response("All data cleared successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
