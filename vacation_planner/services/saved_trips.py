"""
Saved trips listing.

Keeps the locally displayed list of trips in step with the service. The list
only changes after the service has confirmed a change, and a failed refresh
keeps showing the previous list next to the error.
"""

from vacation_planner.data.models import ExportFormat, Trip
from vacation_planner.data.repository import TripRepository
from vacation_planner.services.downloads import (
    DownloadSink,
    FileDownloadSink,
    download_export,
)
from vacation_planner.state.async_resource import AsyncResource
from vacation_planner.utils.error_handling import VacationPlannerError
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)


class SavedTripsManager:
    """List-level operations over saved trips."""

    def __init__(
        self, repository: TripRepository, download_sink: DownloadSink | None = None
    ):
        self.repository = repository
        self.download_sink = download_sink or FileDownloadSink()
        self.trips: list[Trip] = []
        self.listing: AsyncResource[list[Trip]] = AsyncResource("saved-trips")
        self.deletions: dict[str, AsyncResource[None]] = {}
        self.error: str | None = None
        self.export_error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.listing.is_loading

    @property
    def is_empty(self) -> bool:
        """True once a listing has loaded and holds no trips."""
        return self.listing.is_ready and not self.trips

    def trip_ids(self) -> list[str]:
        return [trip.id for trip in self.trips]

    async def refresh(self) -> bool:
        """
        Reload the listing from the service.

        Returns:
            True if the listing was replaced
        """
        request_id = self.listing.next_request_id
        await self.repository.list_trips(resource=self.listing)
        if not self.listing.is_current(request_id):
            logger.debug(f"Dropping superseded listing request {request_id}")
            return False
        if self.listing.is_ready:
            self.trips = list(self.listing.value)
            self.error = None
            return True
        if self.listing.is_failed:
            self.error = f"Failed to load saved trips: {self.listing.error}"
        return False

    async def remove(self, trip_id: str) -> bool:
        """
        Delete a trip, dropping it from the listing once the service confirms.

        Returns:
            True if the trip was deleted
        """
        resource = self.deletions.setdefault(
            trip_id, AsyncResource(f"delete:{trip_id}")
        )
        if resource.is_loading:
            logger.debug(f"Deletion of {trip_id} already in flight")
            return False

        request_id = resource.next_request_id
        await self.repository.delete_trip(trip_id, resource=resource)
        if not resource.is_current(request_id):
            return False
        if not resource.is_ready:
            if resource.is_failed:
                self.error = f"Failed to delete trip: {resource.error}"
            return False

        del self.deletions[trip_id]
        for index, trip in enumerate(self.trips):
            if trip.id == trip_id:
                del self.trips[index]
                break
        self.error = None
        logger.info(f"Removed trip {trip_id} from saved trips")
        return True

    async def export(self, trip_id: str, fmt: ExportFormat | str) -> str | None:
        """
        Export a trip and hand the document to the download sink.

        Failures are reported on export_error and never touch the listing.

        Returns:
            Where the document was saved, or None on failure
        """
        try:
            path = await download_export(
                self.repository, trip_id, fmt, self.download_sink
            )
        except VacationPlannerError as e:
            self.export_error = f"Failed to export trip: {e.message}"
            logger.warning(self.export_error)
            return None
        self.export_error = None
        return path

    def close(self) -> None:
        """Ignore any outstanding listing or deletion results."""
        self.listing.discard()
        for resource in self.deletions.values():
            resource.discard()
