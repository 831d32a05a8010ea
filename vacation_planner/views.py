"""
View controllers hosting the trip lifecycle.

Each view is driven by its route parameter and its own resources. A view never
borrows a trip from another view; it fetches the trip by id itself. Closing a
view makes any outstanding result irrelevant.
"""

from vacation_planner.data.models import ExportFormat, Trip, TripPreferences
from vacation_planner.data.repository import TripRepository
from vacation_planner.services.downloads import (
    DownloadSink,
    FileDownloadSink,
    download_export,
)
from vacation_planner.state.async_resource import AsyncResource
from vacation_planner.state.booking_wizard import BookingWizard
from vacation_planner.utils.error_handling import VacationPlannerError
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)

HOME_ROUTE = "/"
SAVED_ROUTE = "/saved"


def results_route(trip_id: str) -> str:
    return f"/results/{trip_id}"


def booking_route(trip_id: str) -> str:
    return f"/booking/{trip_id}"


class PlannerView:
    """Collects preferences and asks the service for a trip."""

    def __init__(self, repository: TripRepository):
        self.repository = repository
        self.plan: AsyncResource[Trip] = AsyncResource("plan")

    async def submit(self, preferences: TripPreferences) -> str | None:
        """
        Plan a trip.

        Returns:
            The results route of the new trip, or None if planning failed
        """
        request_id = self.plan.next_request_id
        await self.repository.plan_trip(preferences, resource=self.plan)
        if not self.plan.is_current(request_id) or not self.plan.is_ready:
            return None
        return results_route(self.plan.value.id)

    def close(self) -> None:
        self.plan.discard()


class TripResultsView:
    """Shows one trip, and lets the user save, export or book it."""

    fallback_route = HOME_ROUTE

    def __init__(
        self,
        trip_id: str,
        repository: TripRepository,
        download_sink: DownloadSink | None = None,
    ):
        self.trip_id = trip_id
        self.repository = repository
        self.download_sink = download_sink or FileDownloadSink()
        self.trip: AsyncResource[Trip] = AsyncResource(f"trip:{trip_id}")
        self.save_status: AsyncResource[None] = AsyncResource(f"save:{trip_id}")
        self.export_error: str | None = None
        self.saved = False

    @property
    def booking_route(self) -> str:
        return booking_route(self.trip_id)

    async def load(self) -> AsyncResource[Trip]:
        request_id = self.trip.next_request_id
        await self.repository.get_trip(self.trip_id, resource=self.trip)
        if self.trip.is_current(request_id) and self.trip.is_ready:
            self.saved = self.trip.value.saved
        return self.trip

    async def save(self) -> bool:
        """Save the trip. A failure is reported on save_status only."""
        request_id = self.save_status.next_request_id
        await self.repository.save_trip(self.trip_id, resource=self.save_status)
        if self.save_status.is_current(request_id) and self.save_status.is_ready:
            self.saved = True
        return self.saved

    async def export(self, fmt: ExportFormat | str) -> str | None:
        """
        Export the trip and hand the document to the download sink.

        Returns:
            Where the document was saved, or None on failure
        """
        try:
            path = await download_export(
                self.repository, self.trip_id, fmt, self.download_sink
            )
        except VacationPlannerError as e:
            self.export_error = f"Failed to export trip: {e.message}"
            logger.warning(self.export_error)
            return None
        self.export_error = None
        return path

    def close(self) -> None:
        self.trip.discard()
        self.save_status.discard()


class BookingView:
    """
    Hosts the booking wizard for one trip.

    Until the trip has loaded, the view shows the trip's loading or error
    state and has no wizard.
    """

    def __init__(self, trip_id: str, repository: TripRepository):
        self.trip_id = trip_id
        self.repository = repository
        self.trip: AsyncResource[Trip] = AsyncResource(f"trip:{trip_id}")
        self.wizard: BookingWizard | None = None

    @property
    def fallback_route(self) -> str:
        return results_route(self.trip_id)

    @property
    def done_route(self) -> str:
        return SAVED_ROUTE

    async def load(self) -> BookingWizard | None:
        """
        Fetch the trip and, once it is ready, build the wizard.

        Returns:
            The wizard, or None while the trip is unavailable
        """
        if self.wizard is not None:
            self.wizard.close()
            self.wizard = None
        request_id = self.trip.next_request_id
        await self.repository.get_trip(self.trip_id, resource=self.trip)
        if not self.trip.is_current(request_id):
            # A newer load owns the wizard
            return self.wizard
        if self.trip.is_ready:
            self.wizard = BookingWizard.from_resource(self.trip, self.repository)
        return self.wizard

    def close(self) -> None:
        self.trip.discard()
        if self.wizard is not None:
            self.wizard.close()
