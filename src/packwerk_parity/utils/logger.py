"""
Structured logging utility for the parity checker.

Every line is a JSON object so a long run over thousands of files can be
filtered with jq. Provides context injection and operation timing.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, Optional

DEFAULT_LOG_LEVEL = "INFO"


def short_digest(digest: str, length: int = 8) -> str:
    """
    Shorten a cache digest for log context.

    Example:
        >>> short_digest("5d41402abc4b2a76b9719d911017c592")
        "5d41402a"
    """
    if not digest:
        return "unknown"
    return digest[:length]


def resolve_log_level(value: Optional[str] = None) -> int:
    """
    Map a level name (or PARITY_LOG_LEVEL) to a logging constant.

    Unknown names fall back to INFO.
    """
    name = (value or os.getenv("PARITY_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.
    """

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
        """
        self.logger = logging.getLogger(name)
        if self.logger.level == logging.NOTSET:
            self.logger.setLevel(resolve_log_level())

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "evaluate_unit", "write_report")
            context: Context dict with unit, digest, counts, etc.
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        if context:
            log_entry["context"] = context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Log debug message."""
        self.logger.debug(self._format_log("DEBUG", message, operation, context))

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log info message."""
        self.logger.info(self._format_log("INFO", message, operation, context, duration_ms))

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        """Log warning message."""
        self.logger.warning(
            self._format_log("WARNING", message, operation, context, error=error)
        )

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log error message."""
        self.logger.error(
            self._format_log("ERROR", message, operation, context, duration_ms, error)
        )


def log_operation(operation_name: str):
    """
    Decorator to log operation start, duration, and completion.

    Usage:
        @log_operation("generate_caches")
        def generate(self):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)
            context = {"function": func.__name__}

            logger.debug(f"Starting {operation_name}", operation=operation_name, context=context)

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=str(e),
                    duration_ms=(time.time() - start_time) * 1000,
                )
                raise

            logger.info(
                f"Completed {operation_name}",
                operation=operation_name,
                context=context,
                duration_ms=(time.time() - start_time) * 1000,
            )
            return result

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
