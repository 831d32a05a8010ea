"""
Hand-off of exported trip plans to the local environment.
"""

import os
from typing import TYPE_CHECKING, Protocol

from vacation_planner.config import config
from vacation_planner.data.models import ExportFormat
from vacation_planner.utils.error_handling import (
    VacationPlannerError,
    ValidationError,
    handle_errors,
)
from vacation_planner.utils.helpers import ensure_dir, export_filename
from vacation_planner.utils.logging import get_logger

if TYPE_CHECKING:
    from vacation_planner.data.repository import TripRepository

logger = get_logger(__name__)


class DownloadSink(Protocol):
    def __call__(self, trip_id: str, fmt: ExportFormat, payload: bytes) -> str: ...


class FileDownloadSink:
    """Writes exported documents into a download directory."""

    def __init__(self, directory: str | None = None):
        self.directory = directory or config.system.download_dir

    @handle_errors(error_cls=VacationPlannerError)
    def __call__(self, trip_id: str, fmt: ExportFormat, payload: bytes) -> str:
        path = os.path.join(
            ensure_dir(self.directory), export_filename(trip_id, fmt.extension)
        )
        with open(path, "wb") as f:
            f.write(payload)
        logger.info(f"Saved {fmt.value} export of trip {trip_id} to {path}")
        return path


async def download_export(
    repository: "TripRepository",
    trip_id: str,
    fmt: ExportFormat | str,
    sink: DownloadSink,
) -> str:
    """
    Export a trip and hand the document to a download sink.

    Returns:
        Where the sink stored the document

    Raises:
        ValidationError: If the format is not one the service exports
        VacationPlannerError: If the export or the hand-off fails
    """
    try:
        fmt = ExportFormat(fmt)
    except ValueError as e:
        raise ValidationError(f"Unsupported export format: {fmt}") from e
    payload = await repository.export_trip(trip_id, fmt)
    return sink(trip_id, fmt, payload)
