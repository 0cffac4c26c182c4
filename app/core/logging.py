"""
app/core/logging.py

Purpose: Logging configuration

- Standardizes log format
- Controls log levels
- Structured logging for easy parsing
- Context tracking (destination, request_id, channel, provider_response)
- Phone numbers are masked before they reach the output
"""

import logging
import sys
import json
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from app.core.config import settings
from utils.phone_utils import mask_phone


CONTEXT_FIELDS = ("destination", "request_id", "channel", "provider_response")


class StructuredFormatter(logging.Formatter):
    """
    Custom formatter for structured JSON logging in production.
    Makes logs easily parseable by monitoring tools.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add extra context if available
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                value = getattr(record, field)
                log_data[field] = mask_phone(value) if field == "destination" else value

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    Human-readable formatter for development environment.
    """

    def format(self, record: logging.LogRecord) -> str:
        # Color codes for different log levels
        colors = {
            "DEBUG": "\033[36m",      # Cyan
            "INFO": "\033[32m",       # Green
            "WARNING": "\033[33m",    # Yellow
            "ERROR": "\033[31m",      # Red
            "CRITICAL": "\033[35m",   # Magenta
        }
        reset = "\033[0m"

        color = colors.get(record.levelname, reset)

        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = f"{color}[{timestamp}] {record.levelname:<8}{reset} {record.name}: {record.getMessage()}"

        context_parts = []
        if hasattr(record, "destination"):
            context_parts.append(f"to={mask_phone(record.destination)}")
        if hasattr(record, "channel"):
            context_parts.append(f"channel={record.channel}")
        if hasattr(record, "request_id"):
            context_parts.append(f"request={record.request_id}")
        if getattr(record, "provider_response", None) is not None:
            context_parts.append(f"provider_response={record.provider_response}")

        if context_parts:
            message += f" [{', '.join(context_parts)}]"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging():
    """
    Configures application-wide logging with appropriate formatters.
    Uses JSON format in production, human-readable in development.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)

    if settings.is_production:
        formatter = StructuredFormatter()
    else:
        formatter = DevelopmentFormatter()

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger = logging.getLogger("bridge")
    logger.info(
        "Logging configured",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "debug_mode": settings.DEBUG
        }
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(f"bridge.{name}")


_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})
_base_record_factory = logging.getLogRecordFactory()


def _context_record_factory(*args, **kwargs):
    record = _base_record_factory(*args, **kwargs)
    for key, value in _log_context.get().items():
        setattr(record, key, value)
    return record


logging.setLogRecordFactory(_context_record_factory)


class LogContext:
    """
    Context manager for adding structured context to logs.

    The context is held in a ContextVar, so concurrent requests on the
    event loop each see only their own values.

    Usage:
        with LogContext(destination="+15551234567", channel="sms"):
            logger.info("Starting verification")
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._token: Optional[Token] = None

    def __enter__(self):
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
