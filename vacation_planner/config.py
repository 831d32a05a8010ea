"""
Configuration management for the Vacation Planner client.

This module handles loading and managing configuration for the client core,
including the trip service endpoint, transport limits, and default settings
for logging, currency, theme persistence and export downloads.
"""

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class LogLevel(str, Enum):
    """Log levels supported by the system."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ServiceConfig(BaseModel):
    """Configuration for the remote trip planning service."""

    base_url: str = Field(
        default="http://localhost:8080", description="Trip service base URL"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    requests_per_minute: int = Field(
        default=60, description="Client-side request throttle"
    )
    api_key: str | None = Field(default=None, description="Optional bearer token")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Validate the base URL is an http(s) URL."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Trip service URL must be http(s), got {value!r}")
        return value.rstrip("/")

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create a ServiceConfig from environment variables."""
        return cls(
            base_url=os.getenv("TRIP_SERVICE_URL", "http://localhost:8080"),
            timeout=float(os.getenv("TRIP_SERVICE_TIMEOUT", "30")),
            requests_per_minute=int(os.getenv("TRIP_SERVICE_REQUESTS_PER_MINUTE", "60")),
            api_key=os.getenv("TRIP_SERVICE_API_KEY"),
        )


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    environment: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )
    default_currency: str = Field(default="USD", description="Default currency")
    theme_file: str = Field(
        default=os.path.join("~", ".vacation_planner", "theme.json"),
        description="Where the theme preference is persisted",
    )
    download_dir: str = Field(
        default="downloads", description="Directory exported trip plans land in"
    )

    @classmethod
    def from_env(cls) -> "SystemConfig":
        """Create a SystemConfig from environment variables."""
        return cls(
            log_level=LogLevel(os.getenv("LOG_LEVEL", "INFO")),
            environment=os.getenv("ENVIRONMENT", "development"),
            default_currency=os.getenv("DEFAULT_CURRENCY", "USD"),
            theme_file=os.getenv(
                "THEME_FILE", os.path.join("~", ".vacation_planner", "theme.json")
            ),
            download_dir=os.getenv("DOWNLOAD_DIR", "downloads"),
        )


@dataclass
class VacationPlannerConfig:
    """Main configuration for the Vacation Planner client."""

    service: ServiceConfig = field(default_factory=ServiceConfig.from_env)
    system: SystemConfig = field(default_factory=SystemConfig.from_env)

    class ConfigurationError(Exception):
        """Exception raised for configuration validation errors."""

        pass

    def validate(self, raise_error: bool = False) -> bool:
        """
        Validate the entire configuration.

        Args:
            raise_error: If True, raise ConfigurationError instead of returning False

        Returns:
            True if configuration is valid, False otherwise

        Raises:
            ConfigurationError: If raise_error is True and validation fails
        """
        from vacation_planner.data.currencies import is_supported

        try:
            if self.service.timeout <= 0:
                raise ValueError("Trip service timeout must be positive")

            if self.service.requests_per_minute <= 0:
                raise ValueError("Requests per minute must be positive")

            if not is_supported(self.system.default_currency):
                raise ValueError(
                    f"Unsupported default currency: {self.system.default_currency}"
                )

            return True

        except ValueError as e:
            logger.error(f"Configuration validation failed: {e!s}")

            if raise_error:
                raise self.ConfigurationError(
                    f"Configuration validation failed: {e!s}"
                ) from e

            return False


# Global configuration instance
config = VacationPlannerConfig()


def initialize_config(
    custom_config_path: str | None = None,
    validate: bool = True,
    raise_on_error: bool = False,
) -> VacationPlannerConfig:
    """
    Initialize and validate the configuration.

    Args:
        custom_config_path: Path to a custom .env file to load
        validate: Whether to validate the configuration
        raise_on_error: Whether to raise an exception on validation failure

    Returns:
        Initialized and validated configuration object

    Raises:
        VacationPlannerConfig.ConfigurationError: If validation fails and
            raise_on_error is True
        FileNotFoundError: If custom_config_path is provided but does not exist
    """
    if custom_config_path:
        if not os.path.exists(custom_config_path):
            error_msg = f"Custom configuration file not found: {custom_config_path}"
            logger.error(error_msg)
            raise FileNotFoundError(error_msg)

        logger.info(f"Loading custom configuration from {custom_config_path}")
        load_dotenv(custom_config_path, override=True)

        # Reload into the existing global object so importers see the update
        config.service = ServiceConfig.from_env()
        config.system = SystemConfig.from_env()

    if validate:
        is_valid = config.validate(raise_error=raise_on_error)
        if not is_valid:
            logger.warning(
                "Configuration validation failed. The client may not function "
                "correctly. Please check your environment variables."
            )
            logger.info(
                "Recognised environment variables: TRIP_SERVICE_URL, "
                "TRIP_SERVICE_TIMEOUT, TRIP_SERVICE_REQUESTS_PER_MINUTE, "
                "DEFAULT_CURRENCY, THEME_FILE, DOWNLOAD_DIR"
            )

    return config
