"""Main FastAPI application."""
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy import text

from mice.api.v1.router import api_router
from mice.api.deps import get_db, get_token_cache
from mice.core.cache import TTLCache
from mice.core.config import settings
from mice.core.exceptions import CheckinError
from mice.core.rate_limit import limiter
from mice.core.logging_config import setup_logging, get_logger
from mice.middleware import LoggingMiddleware

setup_logging(level=settings.LOG_LEVEL, json_logs=settings.use_json_logs)
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
)


async def sweep_expired_tokens(cache: TTLCache, interval: float) -> None:
    """Periodically drop expired dynamic tokens so the cache stays small."""
    while True:
        await asyncio.sleep(interval)
        removed = cache.purge_expired()
        if removed:
            logger.debug("cache_sweep", removed=removed, size=len(cache))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        from mice.db.session import create_tables

        create_tables()
        logger.info("database_tables_created")

    sweeper = asyncio.create_task(
        sweep_expired_tokens(app.state.token_cache, settings.CACHE_SWEEP_INTERVAL_SECONDS)
    )
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Dynamic QR tokens live here for the lifetime of the process
app.state.token_cache = TTLCache(max_size=settings.CACHE_MAX_SIZE)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(CheckinError)
async def checkin_error_handler(request: Request, exc: CheckinError) -> JSONResponse:
    """Map service errors to their HTTP status with a short, non-leaking message."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "checkin_error",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        cause=exc.cause,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Add logging middleware (must be added before other middleware for proper request tracking)
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-API-Version"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_token_cache),
):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - environment: Current environment setting
        - cache: Dynamic token cache statistics (never the tokens)
        - database: Database connection status

    Returns 503 if database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "cache": cache.get_stats(),
        "database": {"status": "connected"},
    }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = "unreachable"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
