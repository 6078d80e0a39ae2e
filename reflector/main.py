"""
Main FastAPI application.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reflector.api.v1.api import api_router
from reflector.core.config import settings
from reflector.core.errors import InvalidResponseError, ResponseOwnershipError
from reflector.core.logging_config import setup_logging
from reflector.middleware import RequestLoggingMiddleware
from reflector.models import Base, engine

# Configure logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan event handler.

    - On startup: Creates any missing tables
    - On shutdown: Disposes of the connection pool
    """
    Base.metadata.create_all(bind=engine)
    logger.info(
        f"{settings.APP_NAME} {settings.APP_VERSION} started "
        f"(profile version {settings.PROFILE_VERSION})"
    )

    yield

    engine.dispose()
    logger.info("Application shutdown complete")


tags_metadata = [
    {"name": "health", "description": "Service health checks."},
    {"name": "assessments", "description": "Baseline Mirror answers and scoring."},
    {"name": "profile", "description": "Autonomy profile, history and trends."},
    {"name": "activities", "description": "Practice-module activity records."},
    {"name": "streak", "description": "Daily reflection streak."},
    {"name": "modules", "description": "Practice-module completion."},
    {"name": "badges", "description": "Badge catalog, unlocks and progress."},
]


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "**Reflector API** - scoring and badge engine of the Reflector "
            "self-reflection app.\n\n"
            "This API provides:\n"
            "* Baseline Mirror response storage and psychometric scoring\n"
            "* Autonomy profiles with confidence intervals and reliability\n"
            "* Practice-module activity tracking and daily streaks\n"
            "* Badge unlocks and progress"
        ),
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        openapi_tags=tags_metadata,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """
        Handle request validation errors.
        """
        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors},
        )

    @app.exception_handler(InvalidResponseError)
    async def invalid_response_handler(request: Request, exc: InvalidResponseError):
        """
        A stored answer outside the 1-7 scale aborts scoring for that request.
        """
        logger.warning(
            f"Scoring aborted: {exc}",
            extra={"path": str(request.url.path)},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "item_id": exc.item_id},
        )

    @app.exception_handler(ResponseOwnershipError)
    async def ownership_error_handler(request: Request, exc: ResponseOwnershipError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Generates a unique error_id (UUID) for each exception so that a
        response can be traced to its log entry.
        """
        error_id = str(uuid.uuid4())

        logger.exception(
            f"Unhandled exception [error_id={error_id}]: {exc}",
            extra={"error_id": error_id},
        )

        # Don't leak internal details
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )

    return app


app = create_application()


@app.get("/")
async def root():
    """
    Root endpoint.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }
