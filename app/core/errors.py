from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AuthenticationError, BridgeError
from app.schemas.response import build_error_response
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.

    Every error leaves as an Okta error object, except failed hook
    authentication which is a bare 401.
    """
    @app.exception_handler(AuthenticationError)
    async def authentication_exception_handler(request: Request, exc: AuthenticationError):
        logger.warning(
            "Rejected inline hook caller",
            extra={"client": request.client.host if request.client else "unknown"}
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(BridgeError)
    async def bridge_exception_handler(request: Request, exc: BridgeError):
        return JSONResponse(
            status_code=exc.status_code,
            content=build_error_response(type(exc).__name__, exc.code, exc.message)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=build_error_response("HTTPError", "HTTP_ERROR", str(exc.detail))
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles unreadable or mistyped hook bodies.
        """
        logger.warning(f"Invalid inline hook body: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content=build_error_response("InvalidRequest", "VALIDATION_ERROR", "Input validation failed")
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)

        return JSONResponse(
            status_code=500,
            content=build_error_response("InternalError", "INTERNAL_ERROR", message)
        )
