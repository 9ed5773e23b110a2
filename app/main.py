"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional
import logging
import time

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from sqlalchemy.exc import NoResultFound
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import Settings
from app.exceptions import AdoptionError
from app.routers import applications, auth, pets, upload

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """Log request and response details."""
        request_id = id(request)
        start_time = time.time()
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration * 1000, 2),
                    "error_type": type(exc).__name__,
                }
            )
            # Re-raise to let exception handlers deal with it
            raise

        duration = time.time() - start_time
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"{response.status_code} in {round(duration * 1000, 2)}ms",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2)
            }
        )
        return response


# Create settings instance for the application
settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    storage_path = Path(settings.storage_path)
    storage_path.mkdir(parents=True, exist_ok=True)

    logger.info(f"Storage directory verified at: {storage_path.absolute()}")
    logger.info(f"Application started: {settings.app_name} (debug={settings.debug})")
    if not settings.email_enabled:
        logger.warning("SMTP credentials not configured; emails will not be sent")

    yield

    logger.info(f"Application shutdown: {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Pet Adoption API

    * **Authentication**: Registration, JWT login, password reset by email
    * **Pets**: Public catalog; admins create, update and delete pets
    * **Applications**: Users apply to adopt; admins approve or reject
    * **Upload**: Admin image upload for pet photos

    ## Adoption workflow

    A pet is `Available` until someone applies, `Pending` while an
    application awaits review and `Adopted` once one is approved. Approving
    an application rejects every other pending application for that pet.
    A rejected applicant cannot apply for the same pet again.

    ## Error Handling

    All errors return JSON with:
    - `detail`: Human-readable error message
    - `error_code`: Machine-readable error code
    """,
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Registration, login, logout and password reset.",
        },
        {
            "name": "users",
            "description": "Read and update the authenticated user's account.",
        },
        {
            "name": "pets",
            "description": "Pet catalog. Reading is public; changes require an admin.",
        },
        {
            "name": "applications",
            "description": "Adoption applications and admin review.",
        },
        {
            "name": "upload",
            "description": "Admin image upload for pet photos.",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


# Mount static files for image serving
# Ensure storage directory exists before mounting
storage_path = Path(settings.storage_path)
storage_path.mkdir(parents=True, exist_ok=True)

app.mount(
    settings.storage_url,
    StaticFiles(directory=str(storage_path)),
    name="storage"
)


@app.get("/")
async def root() -> dict:
    """Root endpoint returning API information."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "operational",
        "docs": "/api/docs"
    }


# Include routers
app.include_router(auth.router, prefix="/api/auth")
app.include_router(pets.router)
app.include_router(applications.router)
app.include_router(upload.router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app_name": settings.app_name
    }


# Global exception handlers

# Error codes for HTTPExceptions raised by routers, fastapi-users and the rate limiter
HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
}


def error_response(
    status_code: int,
    detail: Any,
    error_code: str,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    """Build the JSON error body shared by every handler."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error_code": error_code, **extra},
        headers=headers,
    )


@app.exception_handler(AdoptionError)
async def adoption_error_handler(request: Request, exc: AdoptionError) -> JSONResponse:
    """Render domain errors raised by the adoption services."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{exc.error_code}: {request.method} {request.url.path} - {exc.detail}")
    return error_response(exc.status_code, exc.detail, exc.error_code)


@app.exception_handler(NoResultFound)
async def not_found_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    """Handle SQLAlchemy NoResultFound exceptions."""
    logger.warning(f"Resource not found: {request.url.path}")
    return error_response(404, "Resource not found", "NOT_FOUND")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions including authorization errors and rate limits."""
    if exc.status_code == 403:
        logger.warning(f"Authorization failure: {request.method} {request.url.path}")
    elif exc.status_code == 429:
        logger.warning(f"Rate limited: {request.method} {request.url.path}")
    elif exc.status_code >= 500:
        logger.error(f"HTTP error {exc.status_code}: {request.url.path} - {exc.detail}")
    else:
        logger.info(f"HTTP {exc.status_code}: {request.url.path}")

    error_code = HTTP_ERROR_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    return error_response(
        exc.status_code,
        exc.detail,
        error_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions. Details are only exposed in debug mode."""
    logger.error(
        f"Unhandled exception: {request.method} {request.url.path}",
        exc_info=True,
        extra={"client": request.client.host if request.client else None},
    )

    extra = {}
    if settings.debug:
        extra = {"error_type": type(exc).__name__, "error_message": str(exc)}
    return error_response(500, "Internal server error", "INTERNAL_ERROR", **extra)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
