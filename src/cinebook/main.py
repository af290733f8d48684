"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from cinebook.admin.app import admin_app
from cinebook.api.routes import admin, auth, bookings, health, movies, showtimes, tickets
from cinebook.config import settings
from cinebook.errors import BookingError
from cinebook.tasks.expire_bookings import run_expiry_sweep

logger = logging.getLogger(__name__)


def envelope(status_code: int, message: str, data: dict | None = None) -> JSONResponse:
    body: dict = {"success": False, "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=body)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return envelope(exc.status_code, exc.message, exc.data)


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return envelope(exc.status_code, str(exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return envelope(400, message)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return envelope(500, "Service temporarily unavailable")


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{success: false, message, data?}``."""
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)


def include_api_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(movies.router, prefix="/api", tags=["movies"])
    app.include_router(showtimes.router, prefix="/api", tags=["showtimes"])
    app.include_router(bookings.router, prefix="/api", tags=["bookings"])
    app.include_router(tickets.router, prefix="/api", tags=["tickets"])
    app.include_router(admin.router, prefix="/api", tags=["admin"])


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: sweep abandoned pending bookings on an interval
    scheduler = AsyncIOScheduler()
    if settings.pending_booking_ttl_minutes > 0:
        scheduler.add_job(
            run_expiry_sweep,
            trigger=IntervalTrigger(seconds=settings.expiry_sweep_interval_seconds),
            id="expire_pending_bookings",
            name="Cancel abandoned pending bookings",
            replace_existing=True,
            max_instances=1,
        )
        logger.info(
            f"Pending bookings expire after {settings.pending_booking_ttl_minutes} min "
            f"(sweep every {settings.expiry_sweep_interval_seconds}s)"
        )
    else:
        logger.info("Pending booking expiry disabled")
    scheduler.start()

    yield

    # Shutdown: stop the scheduler gracefully
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")


app = FastAPI(
    title="CineBook API",
    description="Movie ticket booking: catalog, seat selection, bookings and mock payments",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
include_api_routers(app)

app.mount("/admin", admin_app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cinebook.main:app", host=settings.api_host, port=settings.api_port)
