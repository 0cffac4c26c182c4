"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes (inline hook, health)
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.services.verification_service import get_verification_service, reset_verification_service
from app.services.vonage_service import close_vonage_client
from app.api import verify

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting Okta-Vonage verify bridge...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        get_verification_service()
        logger.info(f"✅ Vonage Verify client ready (brand={settings.VERIFY_BRAND})")

        if not settings.AUTH_HEADER_VALUE:
            logger.warning("⚠️ AUTH_HEADER_VALUE is not set, every hook call will be rejected")

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Running on port {settings.PORT}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    # Shutdown
    logger.info("🛑 Shutting down verify bridge...")

    try:
        reset_verification_service()
        await close_vonage_client()
        logger.info("✅ Vonage client closed")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="Okta Vonage Verify Bridge",
    description="Okta telephony inline hook backed by Vonage Verify v2",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

add_exception_handlers(app)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Okta times out inline hooks after 3 seconds
    if process_time > 2.5:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


# Health check endpoint (no hook auth)
@app.get("/health", tags=["Health"], response_class=PlainTextResponse)
async def health_check():
    logger.info("[HEALTH]")
    return "ok"


app.include_router(verify.router, tags=["Inline Hook"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
