"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from whats_for_dinner import __version__
from whats_for_dinner.api.routes import health, ideas
from whats_for_dinner.config import settings
from whats_for_dinner.core.request_id import get_request_id
from whats_for_dinner.middleware.logging import RequestLoggingMiddleware
from whats_for_dinner.middleware.rate_limit import get_rate_limit_exceeded_handler, limiter
from whats_for_dinner.middleware.security import (
    SecurityHeadersMiddleware,
    setup_compression,
    setup_cors,
)
from whats_for_dinner.utils.exceptions import (
    DinnerIdeasException,
    ImageEncodingError,
    InferenceError,
    InferenceTimeoutError,
    ValidationError,
)
from whats_for_dinner.utils.logging_config import setup_logging

# Setup logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="What's for Dinner? API",
    description="Dinner ideas from your ingredients or a photo of your fridge, using Gemini",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, get_rate_limit_exceeded_handler())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors with detailed messages."""
    request_id = get_request_id()

    logger.warning(
        f"Validation error: {str(exc)}",
        extra={"path": request.url.path, "method": request.method, "errors": exc.errors()},
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "detail": exc.errors(),
            "request_id": request_id,
        },
    )


@app.exception_handler(DinnerIdeasException)
async def dinner_ideas_exception_handler(request: Request, exc: DinnerIdeasException) -> JSONResponse:
    """Handle application exceptions that reach the HTTP layer."""
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_message = "Validation error"
    elif isinstance(exc, ImageEncodingError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_message = "Image processing error"
    elif isinstance(exc, InferenceTimeoutError):
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
        error_message = "Gemini API timeout"
    elif isinstance(exc, InferenceError):
        status_code = status.HTTP_502_BAD_GATEWAY
        error_message = "Gemini API error"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_message = "Internal server error"

    logger.error(f"Exception: {error_message}", extra={"exception": str(exc)}, exc_info=True)

    return JSONResponse(
        status_code=status_code,
        content={"error": error_message, "detail": str(exc), "request_id": get_request_id()},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred",
            "request_id": get_request_id(),
        },
    )


# Add middleware (order matters!)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
setup_compression(app)
setup_cors(app)

app.include_router(health.router)
app.include_router(ideas.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    logger.info("What's for Dinner? API starting up...")
    logger.info(f"Gemini model: {settings.gemini_model}")
    logger.info(f"Rate limit: {settings.rate_limit_per_hour} requests/hour")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; submissions will fail")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "What's for Dinner? API",
        "version": __version__,
        "docs": "/docs",
    }
