"""
Logging framework for the Vacation Planner client.

This module configures logging for the client core, providing a consistent
logging interface across all modules.
"""

import json
import os
import sys
from typing import Any

from loguru import logger

from vacation_planner.config import LogLevel


def get_logger(name: str):
    """
    Get a logger instance for the specified module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance with the module name attached
    """
    return logger.bind(name=name)


def setup_logging(
    log_level: LogLevel | str = LogLevel.INFO, log_file: str | None = None
):
    """
    Set up the logging configuration for the application.

    Args:
        log_level: The logging level to use (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to
    """
    if isinstance(log_level, str):
        log_level = LogLevel(log_level.upper())

    # Remove default logger
    logger.remove()

    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        level=log_level.value,
        colorize=True,
    )

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        logger.add(
            log_file,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
                "{name}:{function}:{line} - {message}"
            ),
            level=log_level.value,
            rotation="10 MB",
            compression="zip",
        )

    logger.info(f"Logging initialized with level {log_level.value}")


class ServiceLogger:
    """
    Logger specialized for remote service calls, attaching the service name
    to every record.
    """

    def __init__(self, service_name: str):
        self.service_name = service_name
        self.logger = logger.bind(service_name=service_name)

    def debug(self, message: str, **kwargs):
        """Log a debug message with service context."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log an info message with service context."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log a warning message with service context."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log an error message with service context."""
        self.logger.error(message, **kwargs)

    def log_api_request(
        self, method: str, endpoint: str, payload: dict[str, Any] | None = None
    ):
        """
        Log an API request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            payload: Request body (optional)
        """
        self.debug(
            f"API Request: {self.service_name} - {method} {endpoint}",
            method=method,
            endpoint=endpoint,
            payload=self._safe_json(payload),
        )

    def log_api_response(self, method: str, endpoint: str, status_code: int):
        """
        Log an API response.

        Args:
            method: HTTP method
            endpoint: API endpoint
            status_code: HTTP status code
        """
        self.debug(
            f"API Response: {self.service_name} - {method} {endpoint} - "
            f"Status: {status_code}",
            method=method,
            endpoint=endpoint,
            status_code=status_code,
        )

    def _safe_json(self, obj: Any) -> str | None:
        """
        Safely convert an object to JSON, handling conversion errors.

        Args:
            obj: Object to convert to JSON

        Returns:
            JSON string or None if there is nothing to log
        """
        if obj is None:
            return None

        try:
            return json.dumps(obj, default=str)
        except (TypeError, ValueError) as e:
            self.warning(f"Failed to serialize object to JSON: {e!s}")
            return str(obj)
