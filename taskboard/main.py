import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import auth, database, health, tasks
from .config import Settings, get_settings
from .database import select_storage
from .errors import AppError
from .logging_setup import setup_logging
from .services.validation import field_errors
from .storage import Storage

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "auth": {
        "register": "POST /api/auth/register",
        "login": "POST /api/auth/login",
        "logout": "POST /api/auth/logout",
        "me": "GET /api/auth/me",
        "validate": "GET /api/auth/validate",
    },
    "tasks": {
        "list": "GET /api/tasks",
        "get": "GET /api/tasks/:id",
        "create": "POST /api/tasks",
        "update": "PUT /api/tasks/:id",
        "delete": "DELETE /api/tasks/:id",
    },
    "database": {
        "info": "GET /api/db/info",
        "describeUsers": "GET /api/db/describe/users",
        "describeTasks": "GET /api/db/describe/tasks",
    },
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    # No-op when run() already configured logging
    setup_logging(settings.log_level, settings.log_file)
    # Storage is selected once per process and never switched afterwards
    if getattr(app.state, "storage", None) is None:
        app.state.storage = select_storage(settings)
    logger.info("Storage mode: %s", app.state.storage.mode)
    yield
    app.state.storage.close()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = field_errors(exc)
        return JSONResponse(status_code=400, content={"error": "Validation failed", "errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    """Build the application.

    Passing ``storage`` skips the startup database check, which tests use
    to run against an in-memory or SQLite backend.
    """
    settings = settings or get_settings()

    app = FastAPI(title="Taskboard API", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Only errors and slow requests are logged
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400 or elapsed_ms > settings.slow_request_ms:
            level = logging.WARNING
        else:
            return response
        logger.log(level, "%s %s %s %dms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_exception_handlers(app)

    # Mount routers
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(database.router, prefix="/api/db", tags=["database"])

    # Liveness and readiness endpoints
    app.include_router(health.router, tags=["health"])

    @app.get("/")
    def read_root():
        return {"message": "Taskboard API is running", "endpoints": ENDPOINTS}

    return app


app = create_app()


def run() -> None:
    """Console entry point: configure logging and serve with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Initializing Taskboard API...")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
