"""
FastAPI main application for the Library Catalog API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import APIConfig
from api.exceptions import APIError
from api.models import ErrorResponse, HealthResponse
from api.routes import books, users
from api.security import PasswordHasher, TokenManager
from catalog.database import MongoDBManager

logger = structlog.get_logger(__name__)


def error_response(status_code: int, error: str, detail=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, status_code=status_code).model_dump(),
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Library Catalog API")

    db_manager: MongoDBManager = app.state.db_manager
    try:
        await db_manager.connect()
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise

    yield

    logger.info("Shutting down Library Catalog API")
    await db_manager.disconnect()


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle service-level errors."""
        return error_response(exc.status_code, exc.message, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are client errors."""
        logger.info("Request validation failed", path=request.url.path, errors=len(exc.errors()))
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request payload",
            detail=[
                {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
                for err in exc.errors()
            ],
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions, including unknown routes."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return error_response(exc.status_code, "unknown endpoint")
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            detail=str(exc) if debug else None,
        )


def create_app(config: Optional[APIConfig] = None, db_manager: Optional[MongoDBManager] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to use; read from the environment when omitted
        db_manager: Store to use; built from ``config`` when omitted

    Returns:
        Configured FastAPI application
    """
    config = config or APIConfig()

    app = FastAPI(
        title=config.api_title,
        description="""
    A REST API for a library book catalog.

    ## Authentication

    Creating, updating and deleting books requires a token from
    `/api/users/signup` or `/api/users/login`:

    ```
    Authorization: Bearer your_token_here
    ```

    Tokens are valid for 3 days.
    """,
        version=config.api_version,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.db_manager = db_manager or MongoDBManager(
        connection_url=config.mongodb_url,
        database_name=config.mongodb_database,
    )
    app.state.password_hasher = PasswordHasher()
    app.state.token_manager = TokenManager(
        secret_key=config.secret_key,
        algorithm=config.algorithm,
        expire_days=config.token_expire_days,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    register_exception_handlers(app, debug=config.debug)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        health_info = await request.app.state.db_manager.health_check()
        db_status = health_info.get("status", "unknown")
        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=config.api_version,
            database_status=db_status,
        )

    app.include_router(users.router)
    app.include_router(books.router)

    return app
