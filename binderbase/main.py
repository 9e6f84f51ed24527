import logging
import time
import traceback
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from binderbase.api import (
    cards_router,
    decks_router,
    health_router,
    recommendations_router,
)
from binderbase.config import settings
from binderbase.db.database import Database
from binderbase.models.failure import ErrorResponse, KnownError
from binderbase.services.edhrec import EdhrecClient
from binderbase.services.scryfall import ScryfallClient

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("binderbase.access")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build shared resources at startup and release them at shutdown.

    The database and the outbound HTTP client live on ``app.state`` for
    the lifetime of the process.
    """
    db = Database(settings.database_url, echo=settings.debug)
    await db.init_db()

    http = httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        timeout=settings.http_timeout,
        follow_redirects=True,
    )

    app.state.db = db
    app.state.scryfall = ScryfallClient(http)
    app.state.edhrec = EdhrecClient(http)
    try:
        yield
    finally:
        await http.aclose()
        await db.dispose()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("binderbase"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(decks_router)
app.include_router(health_router)
app.include_router(recommendations_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log every request with its status and timing, failures included."""
    start = time.perf_counter()
    # Unhandled errors re-raise out of call_next and are answered with 500
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        access_logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            status_code,
            elapsed_ms,
        )


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details if settings.debug else None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(KnownError)
async def known_error_handler(request: Request, exc: KnownError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed (%s): %s", request.method, request.url.path, exc.kind.value, exc.message
        )
    else:
        logger.info(
            "%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc.message
        )
    return _error(exc.status_code, exc.message, exc.detail)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _error(400, f"Invalid request: {problems}")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Endpoint not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    stack = "".join(traceback.format_exception(exc))
    return _error(500, str(exc) or type(exc).__name__, stack)


def run() -> None:
    """CLI entry point: serve the API with uvicorn."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "binderbase.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
