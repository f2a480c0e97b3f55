from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from terrain.db import initialize_db
from terrain.logging import configure_logging
from terrain.services.errors import TeamError
from terrain.settings import settings
from web.auth import router as auth_router
from web.deps import DBConnectionMiddleware
from web.routes.team import router as team_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    logger.info("Application started")
    yield


app = FastAPI(title="Terrain Teams", docs_url=None, redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)
app.add_middleware(SessionMiddleware, secret_key=settings.get_secret_key(), same_site="lax")

app.include_router(auth_router)
app.include_router(team_router)


@app.exception_handler(TeamError)
async def team_error_handler(request: Request, exc: TeamError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse({"success": False, "error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("%s %s -> 400 malformed request: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"success": False, "error": "Malformed request."}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"success": False, "error": "Internal server error."}, status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok"}
