import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401 - registers tables on Base
from .config import (
    ALLOWED_ORIGINS,
    DATABASE_URL,
    EXPORT_SCHEDULER_ENABLED,
    SECURITY_HEADERS_ENABLED,
)
from .database import Base, create_session_factory
from .domain.admin.router import router as admin_router
from .domain.bookings.router import router as bookings_router
from .domain.payments.router import router as payments_router
from .domain.photos.router import router as photos_router
from .domain.photos.storage import PhotoStorage, R2PhotoStorage
from .domain.pricing.router import router as pricing_router
from .domain.profiles.router import router as auth_router
from .domain.profiles.router import users_router
from .domain.reports.router import router as excel_router
from .security_headers import SecurityHeadersMiddleware
from .shared.clock import Clock, utcnow
from .shared.errors import StudioError
from .workers.export_worker import ExportScheduler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=app.state.session_factory.kw["bind"], checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Several workers may race to create the same tables
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    scheduler = None
    if app.state.start_scheduler:
        scheduler = ExportScheduler(app.state.session_factory, clock=app.state.clock)
        scheduler.start()

    yield

    if scheduler:
        await scheduler.stop()
    logger.info("Application shutting down...")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StudioError)
    async def studio_error_handler(request: Request, exc: StudioError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Request validation failures are reported as 400 with the first problem"""
        errors = exc.errors()
        for error in errors:
            if error.get("loc") and "authorization" in str(error.get("loc")).lower():
                return _error(401, "No token provided")

        logger.warning(f"Validation error for {request.url.path}: {errors}")
        if not errors:
            return _error(400, "Invalid request")
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = first.get("msg", "Invalid request")
        return _error(400, f"{field}: {message}" if field else message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
        logger.exception(exc)
        return _error(500, "Something went wrong!")


def create_app(
    session_factory: Optional[sessionmaker] = None,
    photo_storage: Optional[PhotoStorage] = None,
    start_scheduler: bool = EXPORT_SCHEDULER_ENABLED,
    clock: Clock = utcnow,
) -> FastAPI:
    app = FastAPI(title="Studio Booking API", version="1.0.0", lifespan=lifespan)

    app.state.session_factory = session_factory or create_session_factory(DATABASE_URL)
    app.state.photo_storage = photo_storage or R2PhotoStorage()
    app.state.start_scheduler = start_scheduler
    app.state.clock = clock

    _install_exception_handlers(app)

    if SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/api/health"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["Content-Disposition"],
    )

    api = APIRouter(prefix="/api")

    @api.get("/health")
    async def health():
        return {"status": "OK", "timestamp": utcnow().isoformat()}

    api.include_router(auth_router)
    api.include_router(users_router)
    api.include_router(bookings_router)
    api.include_router(admin_router)
    api.include_router(photos_router)
    api.include_router(pricing_router)
    api.include_router(payments_router)
    api.include_router(excel_router)
    app.include_router(api)

    return app


app = create_app()
