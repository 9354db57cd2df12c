"""
Main FastAPI application for the social network API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import API_VERSION, CORS_ORIGINS, LOG_LEVEL
from app.db import init_db
from app.routes.auth import router as auth_router
from app.routes.comments import router as comments_router
from app.routes.health import router as health_router
from app.routes.posts import router as posts_router
from app.routes.users import router as users_router
from app.services.errors import AuthenticationError, SocialError

log = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    message = str(errors[0].get("msg", "Invalid request"))
    # pydantic prefixes messages raised from custom validators
    return message.removeprefix("Value error, ")


def create_app(init_database: bool = True) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        init_database: Create missing tables on startup

    Returns:
        Configured FastAPI app instance
    """
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            init_db()
        yield

    app = FastAPI(
        title="Social Network API",
        description="Accounts, posts, comments, likes and follow-filtered feeds",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers
    @app.exception_handler(SocialError)
    async def social_exception_handler(request: Request, exc: SocialError):
        """Map domain errors to their HTTP status."""
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"error_code": exc.error_code, "message": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed payloads are a 400, not FastAPI's default 422."""
        return JSONResponse(
            status_code=400,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": _validation_message(exc),
                "fields": [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()],
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle SQLAlchemy database errors."""
        log.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error_code": "DATABASE_ERROR", "message": "Database operation failed"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions."""
        log.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error_code": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
        )

    # Include routers
    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(users_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        return {"message": "Social Network API", "status": "healthy", "version": API_VERSION}

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
