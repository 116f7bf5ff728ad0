"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests can build an app with their own Settings

2. Lifespan Events
   - startup: open the Database and ping it before accepting requests
   - shutdown: close the connection pool
   - If the database is unreachable, startup raises and the server exits

3. Exception Handlers
   - Every HTTP error becomes a plain-text reason phrase
   - Database errors are logged and answered with 500; the server keeps
     serving other requests
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore import __version__
from bookstore.config import Settings, get_settings
from bookstore.database import DataAccessError, Database
from bookstore.dependencies import DatabaseDep
from bookstore.routers import books_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once, before the app starts."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def plain_error(status_code: int, headers: dict[str, str] | None = None) -> PlainTextResponse:
    """Response whose body is the status reason phrase, e.g. 'Bad Request\\n'."""
    return PlainTextResponse(
        f"{HTTPStatus(status_code).phrase}\n",
        status_code=status_code,
        headers=headers,
    )


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached environment settings

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Open the database on startup and close it on shutdown.

        Database.connect() raises DatabaseUnavailableError when the database
        cannot be reached. It is not caught: the server refuses to start.
        """
        # ----- STARTUP -----
        logger.info(f"Starting {settings.app_name} on port {settings.port}...")
        logger.info(f"Database: {settings.safe_database_url}")

        app.state.database = Database.connect(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            echo=settings.debug,
        )

        yield  # Application runs here

        # ----- SHUTDOWN -----
        logger.info(f"Shutting down {settings.app_name}...")
        app.state.database.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Plain-text HTTP access to a table of books.",
        version=__version__,
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> PlainTextResponse:
        """
        Render every HTTP error as plain text.

        Covers errors raised by the handlers (400, 404, 409) and by the
        framework itself (404 for unknown paths, 405 with its Allow header).
        """
        return plain_error(exc.status_code, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> PlainTextResponse:
        """Malformed input is a client error: 400, never 422."""
        logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
        return plain_error(status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> PlainTextResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error on {request.url.path}: {exc}", exc_info=exc)
        return plain_error(status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(DataAccessError)
    async def data_access_exception_handler(
        request: Request,
        exc: DataAccessError,
    ) -> PlainTextResponse:
        """Errors raised by the data access layer itself, such as a missing row count."""
        logger.error(f"Data access error on {request.url.path}: {exc}", exc_info=exc)
        return plain_error(status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> PlainTextResponse:
        """Catch-all exception handler."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return plain_error(status.HTTP_500_INTERNAL_SERVER_ERROR)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(books_router)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check that the service can reach its database.",
        response_class=PlainTextResponse,
    )
    def health_check(db: DatabaseDep) -> PlainTextResponse:
        """
        Health check endpoint.

        Used by load balancers and liveness probes. Answers 503 while the
        database is unreachable instead of failing with 500.
        """
        try:
            db.ping()
        except SQLAlchemyError as exc:
            logger.warning(f"Health check failed: {exc}")
            return PlainTextResponse("unavailable\n", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return PlainTextResponse("ok\n")

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookstore.main:app

settings = get_settings()
configure_logging(settings)
app = create_app(settings)


def run() -> None:
    """Run the development server with the configured host and port."""
    import uvicorn

    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
