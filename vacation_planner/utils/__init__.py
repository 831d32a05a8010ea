"""
Utility modules for the Vacation Planner client.
"""

from vacation_planner.config import LogLevel
from vacation_planner.utils.error_handling import (
    NetworkError,
    ResourceNotFoundError,
    ResourceStateError,
    ServiceFailure,
    VacationPlannerError,
    ValidationError,
    WizardPreconditionError,
    handle_errors,
)
from vacation_planner.utils.helpers import ensure_dir, export_filename, safe_load_json
from vacation_planner.utils.logging import ServiceLogger, get_logger, setup_logging

__all__ = [
    "LogLevel",
    "NetworkError",
    "ResourceNotFoundError",
    "ResourceStateError",
    "ServiceFailure",
    "ServiceLogger",
    "VacationPlannerError",
    "ValidationError",
    "WizardPreconditionError",
    "ensure_dir",
    "export_filename",
    "get_logger",
    "handle_errors",
    "safe_load_json",
    "setup_logging",
]
