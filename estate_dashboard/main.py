"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
from typing import Optional
import logging

from estate_dashboard.config import Settings, get_settings
from estate_dashboard.database import Database
from estate_dashboard.routers import (
    dashboard_router,
    admins_router,
    admin_router,
    properties_router,
    blogs_router,
    sell_router,
)
from estate_dashboard.utils.exceptions import APIException
from estate_dashboard.services.error_handler import ErrorHandlerService
from estate_dashboard.middleware import RequestContextMiddleware, PerformanceMonitoringMiddleware
from estate_dashboard.schemas.error import get_error_responses

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if not await database.check_connection():
        logger.error("Failed to connect to database on startup")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error type through ErrorHandlerService."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        """Handle custom API exceptions with structured error responses."""
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle FastAPI request validation errors with detailed field information."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
        """Handle Pydantic validation errors with detailed field information."""
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors with appropriate error responses."""
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle framework HTTP exceptions with structured error responses."""
        return ErrorHandlerService.handle_http_exception(exc, request)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use, defaults to the cached environment settings
        database: Database to use, defaults to one built from settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        Back office API for a real-estate listing site.

        ## Features

        * **Dashboard**: Inventory, sell-to-us, blog, user, engagement and revenue statistics
        * **Reports**: Property, blog, user, moderation and revenue breakdowns
        * **Moderation**: Comment and review queues with approve, reject and spam decisions
        * **Catalogue**: Public property listing, search and reviews
        * **Blog**: Published posts, view counts and moderated reader comments

        ## Authentication

        Tokens are issued by Supabase. Send them in the Authorization header as `Bearer <token>`.
        Dashboard and admin routes require the token subject to be an admin.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "Dashboard", "description": "Statistics, listings, user directory and moderation"},
            {"name": "Admins", "description": "Back office staff management"},
            {"name": "Admin", "description": "Property, blog, sell submission and newsletter management"},
            {"name": "Properties", "description": "Public property catalogue and reviews"},
        {"name": "Blogs", "description": "Public blog posts and reader comments"},
            {"name": "Sell", "description": "Sell-to-us submissions"},
            {"name": "Health", "description": "System health endpoints"},
        ],
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Processing-Time"],
    )

    # Add performance monitoring middleware
    app.add_middleware(
        PerformanceMonitoringMiddleware,
        slow_request_threshold=settings.slow_request_threshold,
        enable_detailed_logging=settings.debug,
    )

    # Outermost, so the request ID is set before timing starts
    app.add_middleware(RequestContextMiddleware, enable_request_logging=settings.debug)

    # Include API routers
    app.include_router(dashboard_router, prefix=settings.api_v1_prefix)
    app.include_router(admins_router, prefix=settings.api_v1_prefix)
    app.include_router(admin_router, prefix=settings.api_v1_prefix)
    app.include_router(properties_router, prefix=settings.api_v1_prefix)
    app.include_router(blogs_router, prefix=settings.api_v1_prefix)
    app.include_router(sell_router, prefix=settings.api_v1_prefix)

    register_exception_handlers(app)

    @app.get("/health", tags=["Health"], responses=get_error_responses(500))
    async def health_check(request: Request):
        """
        Health check endpoint with database connectivity test.
        Used by container health checks and load balancers.
        """
        db_healthy = await request.app.state.database.check_connection()
        return {
            "status": "healthy" if db_healthy else "degraded",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "database": "connected" if db_healthy else "unavailable"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "estate_dashboard.main:app",
        host=get_settings().host,
        port=get_settings().port,
        reload=get_settings().debug
    )
