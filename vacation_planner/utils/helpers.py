"""
Helper utilities for the Vacation Planner client.

This module provides general utility functions used across the client.
"""

import json
import os
from typing import Any, TypeVar

# Type variables
T = TypeVar("T")


def safe_load_json(
    json_str: str, default: T | None = None
) -> dict[str, Any] | list[Any] | T:
    """
    Safely load a JSON string, returning a default value if parsing fails.

    Args:
        json_str: JSON string to parse
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON data or default value
    """
    if not json_str:
        return default or {}

    try:
        return json.loads(json_str)
    except json.JSONDecodeError:
        return default or {}


def ensure_dir(directory: str) -> str:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: Directory path

    Returns:
        Absolute path to the directory
    """
    abs_path = os.path.abspath(os.path.expanduser(directory))
    os.makedirs(abs_path, exist_ok=True)
    return abs_path


def export_filename(trip_id: str, extension: str) -> str:
    """Name under which an exported trip plan is downloaded."""
    return f"trip-plan-{trip_id}.{extension}"
