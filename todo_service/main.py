import logging
import time
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.database import init_db, check_db_connection
from .core.exceptions import (
    AccessDeniedError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    TodoServiceError,
    UnauthenticatedError,
    ValidationError,
)
from .routers import auth, tasks

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Todo Service",
    description="Per-user task tracking with JWT authentication",
    version=settings.service_version
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

STATUS_BY_ERROR = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateUsernameError: status.HTTP_400_BAD_REQUEST,
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_400_BAD_REQUEST,
    AccessDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
}


def error_status(exc: TodoServiceError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(TodoServiceError)
async def todo_service_error_handler(request: Request, exc: TodoServiceError):
    """Translate domain errors into JSON responses"""
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error(f"Unhandled service error: {exc.message}")
    else:
        logger.warning(f"{exc.code}: {exc.message}")

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report body/query validation failures as a per-field error map"""
    errors = {}
    for error in exc.errors():
        loc = error.get("loc") or ("request",)
        # Malformed JSON reports a character offset, not a field name
        field = loc[-1] if isinstance(loc[-1], str) else "body"
        errors[field] = error.get("msg", "Invalid value")
    logger.warning(f"Validation error: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": "error", "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": "An unexpected error occurred"},
    )


# Include routers
app.include_router(auth.router, prefix=settings.api_prefix + "/auth", tags=["authentication"])
app.include_router(tasks.router, prefix=settings.api_prefix + "/todos", tags=["tasks"])


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info("Starting Todo Service...")
    if init_db():
        logger.info("Database initialized successfully")
    else:
        logger.error("Database initialization failed")
    if settings.uses_default_secret:
        logger.warning("JWT_SECRET is not set; tokens are signed with the development key")
    logger.info("Todo Service startup completed")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "running",
        "message": "Todo Service is operational"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    db_healthy = check_db_connection()
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "healthy" if db_healthy else "unhealthy",
        "database": "connected" if db_healthy else "disconnected",
        "timestamp": time.time()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("todo_service.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
