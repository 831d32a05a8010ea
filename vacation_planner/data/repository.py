"""
Trip repository: the single gateway to the trip planning service.

Every state-producing operation records its outcome on an AsyncResource,
either one owned by the caller or a fresh one, and returns it. The
repository itself keeps no cached state.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from vacation_planner.data.models import (
    Availability,
    BookingConfirmation,
    BookingRequest,
    ExportFormat,
    Trip,
    TripPreferences,
)
from vacation_planner.services.trip_service import TripServiceClient
from vacation_planner.state.async_resource import AsyncResource
from vacation_planner.utils.error_handling import (
    ServiceFailure,
    VacationPlannerError,
)
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)

MALFORMED_RESPONSE = "Malformed response from trip service"
MISSING_TRIP_ID = "Failed to receive trip from backend"
BOOKING_FAILED = "Booking failed"
BOOKING_RETRY = "Booking failed. Please try again."


class TripRepository:
    """Repository for all trip service operations."""

    def __init__(self, client: TripServiceClient):
        self.client = client

    # --- Helpers ---

    @staticmethod
    def _parse_trip(payload: Any) -> Trip:
        try:
            return Trip.model_validate(payload)
        except PydanticValidationError as e:
            logger.error(f"Rejected trip payload: {e!s}")
            raise ServiceFailure(MALFORMED_RESPONSE, original_error=e) from e

    # --- Trips ---

    async def get_trip(
        self, trip_id: str, resource: AsyncResource[Trip] | None = None
    ) -> AsyncResource[Trip]:
        """Fetch one trip by id."""
        if resource is None:
            resource = AsyncResource(f"trip:{trip_id}")
        return await resource.load(self._get_trip(trip_id))

    async def _get_trip(self, trip_id: str) -> Trip:
        payload = await self.client.request_json("GET", f"/api/trips/{trip_id}")
        return self._parse_trip(payload)

    async def list_trips(
        self, resource: AsyncResource[list[Trip]] | None = None
    ) -> AsyncResource[list[Trip]]:
        """Fetch every trip. An empty list is a successful result."""
        if resource is None:
            resource = AsyncResource("trips")
        return await resource.load(self._list_trips())

    async def _list_trips(self) -> list[Trip]:
        payload = await self.client.request_json("GET", "/api/trips")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ServiceFailure(MALFORMED_RESPONSE)
        return [self._parse_trip(item) for item in payload]

    async def delete_trip(
        self, trip_id: str, resource: AsyncResource[None] | None = None
    ) -> AsyncResource[None]:
        """
        Delete a trip on the service.

        Callers holding a listing remove the trip from it themselves once
        this succeeds.
        """
        if resource is None:
            resource = AsyncResource(f"delete:{trip_id}")
        return await resource.load(
            self._acknowledge("DELETE", f"/api/trips/{trip_id}")
        )

    async def save_trip(
        self, trip_id: str, resource: AsyncResource[None] | None = None
    ) -> AsyncResource[None]:
        """Mark a generated trip as saved. Saving a saved trip succeeds again."""
        if resource is None:
            resource = AsyncResource(f"save:{trip_id}")
        return await resource.load(
            self._acknowledge("POST", f"/api/trips/{trip_id}/save")
        )

    async def _acknowledge(self, method: str, path: str) -> None:
        # Ack bodies are informational text only
        await self.client.request_json(method, path)
        return None

    async def plan_trip(
        self,
        preferences: TripPreferences,
        resource: AsyncResource[Trip] | None = None,
    ) -> AsyncResource[Trip]:
        """
        Ask the service to generate a trip from preferences.

        Transportation, accommodation, budget and itinerary all come from the
        service; nothing is filled in locally.
        """
        if resource is None:
            resource = AsyncResource("plan")
        return await resource.load(self._plan_trip(preferences))

    async def _plan_trip(self, preferences: TripPreferences) -> Trip:
        payload = await self.client.request_json(
            "POST", "/api/trips/plan", json_data=preferences.to_payload()
        )
        if not isinstance(payload, dict) or not payload.get("id"):
            raise ServiceFailure(MISSING_TRIP_ID)
        trip = self._parse_trip(payload)
        logger.info(f"Planned trip {trip.id} to {trip.destination or 'anywhere'}")
        return trip

    # --- Booking ---

    async def book_trip(
        self,
        request: BookingRequest,
        resource: AsyncResource[BookingConfirmation] | None = None,
    ) -> AsyncResource[BookingConfirmation]:
        """
        Submit a booking.

        A response reporting success: false fails with the service's message.
        Any other failure keeps its kind but carries a generic retry message.
        """
        if resource is None:
            resource = AsyncResource(f"booking:{request.trip_id}")
        return await resource.load(self._book_trip(request))

    async def _book_trip(self, request: BookingRequest) -> BookingConfirmation:
        try:
            payload = await self.client.request_json(
                "POST", "/api/booking/book", json_data=request.to_payload()
            )
        except VacationPlannerError as e:
            raise type(e)(
                BOOKING_RETRY, original_error=e, status_code=e.status_code
            ) from e

        try:
            confirmation = BookingConfirmation.model_validate(payload or {})
        except PydanticValidationError as e:
            raise ServiceFailure(BOOKING_RETRY, original_error=e) from e

        if not confirmation.success:
            raise ServiceFailure(confirmation.message or BOOKING_FAILED)

        logger.info(f"Booked trip {request.trip_id}")
        return confirmation

    async def check_availability(
        self, trip_id: str, resource: AsyncResource[Availability] | None = None
    ) -> AsyncResource[Availability]:
        """Ask whether a trip can currently be booked."""
        if resource is None:
            resource = AsyncResource(f"availability:{trip_id}")
        return await resource.load(self._check_availability(trip_id))

    async def _check_availability(self, trip_id: str) -> Availability:
        payload = await self.client.request_json(
            "GET", f"/api/booking/availability/{trip_id}"
        )
        try:
            return Availability.model_validate(payload or {})
        except PydanticValidationError as e:
            raise ServiceFailure(MALFORMED_RESPONSE, original_error=e) from e

    # --- Export ---

    async def export_trip(self, trip_id: str, fmt: ExportFormat | str) -> bytes:
        """
        Download a trip plan document.

        Args:
            trip_id: Trip to export
            fmt: pdf or xlsx

        Returns:
            The raw document bytes
        """
        fmt = ExportFormat(fmt)
        return await self.client.request_bytes(
            "GET", f"/api/export/{fmt.path_segment}/{trip_id}"
        )
