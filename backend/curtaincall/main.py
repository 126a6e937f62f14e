"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException as FastAPIHTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from curtaincall import __version__
from curtaincall.api.routes import (
    account,
    admin_bookings,
    admin_dashboard,
    admin_discounts,
    admin_pages,
    admin_payments,
    admin_reviews,
    admin_settings,
    admin_shows,
    admin_users,
    auth_pages,
    bookings,
    discounts,
    health,
    metrics,
    pages,
    shows,
    wishlist
)
from curtaincall.core.config import get_settings
from curtaincall.core.database import init_db
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.core.middleware import (
    LoggingContextMiddleware,
    SimulatedLatencyMiddleware
)
from curtaincall.core.middleware_metrics import MetricsMiddleware

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    init_db()

    yield

    logger.info(f"Shutting down {settings.app_name}...")


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Theatre ticket booking site with an admin back-office",
    version=__version__,
    lifespan=lifespan,
)

# Starlette runs the last added middleware first
app.add_middleware(SimulatedLatencyMiddleware, latency_ms=_settings.simulated_latency_ms)
app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log all unhandled errors"""
    if isinstance(exc, FastAPIHTTPException):
        raise exc

    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": type(exc).__name__
        }
    )


# JSON API
app.include_router(shows.router)
app.include_router(bookings.router)
app.include_router(discounts.router)
app.include_router(wishlist.router)
app.include_router(account.router)

# Admin API
app.include_router(admin_dashboard.router)
app.include_router(admin_shows.router)
app.include_router(admin_bookings.router)
app.include_router(admin_discounts.router)
app.include_router(admin_payments.router)
app.include_router(admin_reviews.router)
app.include_router(admin_users.router)
app.include_router(admin_settings.router)

# Operations
app.include_router(health.router)
app.include_router(metrics.router)

# Web pages
app.include_router(pages.router)
app.include_router(auth_pages.router)
app.include_router(admin_pages.router)


@app.get("/api")
async def root():
    """Root API endpoint"""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": __version__,
        "status": "running",
        "environment": settings.app_env,
    }
