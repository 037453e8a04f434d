"""Main FastAPI application module"""
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from sitetrack.config import Settings, settings as default_settings
from sitetrack.database import Database
from sitetrack.api import actions, users, projects, stats, maps

logger = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = list(error.get("loc", ()))
        if loc and loc[0] == "body":
            loc = loc[1:]
        errors.append({
            "path": loc,
            "message": error.get("msg"),
            "code": error.get("type"),
        })
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Invalid request %s %s: %d error(s)", request.method, request.url.path, len(exc.errors()))
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid data", "errors": _validation_errors(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application.

    ``database`` may be supplied (tests hand in an in-memory SQLite one);
    otherwise it is built from ``settings.database_url``.
    """
    settings = settings or default_settings
    database = database or Database(settings.database_url, echo=settings.database_echo)

    # Configure logging
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await database.create_all()
        yield
        # Shutdown
        await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc"
    )
    app.state.settings = settings
    app.state.database = database

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(actions.router, prefix=f"{settings.api_prefix}/actions", tags=["actions"])
    app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["users"])
    app.include_router(projects.router, prefix=f"{settings.api_prefix}/projects", tags=["projects"])
    app.include_router(stats.router, prefix=f"{settings.api_prefix}/stats", tags=["stats"])
    app.include_router(maps.router, prefix=settings.api_prefix, tags=["maps"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": f"{settings.api_prefix}/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()
