"""
Data models for the vacation planner client.

This module defines the wire-level structures exchanged with the trip planning
service: the trip itself, the preferences a trip is planned from, and the
booking, availability and export payloads.
"""

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from vacation_planner.config import config
from vacation_planner.data.currencies import is_supported
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)

# Tolerance when checking that budget components add up to the total
BUDGET_TOLERANCE = 0.01


class TripTheme(StrEnum):
    """Themes a trip can be planned around."""

    BEACH = "beach"
    ADVENTURE = "adventure"
    CULTURE = "culture"
    FOOD = "food"


class ExportFormat(StrEnum):
    """Formats a trip plan can be exported to."""

    PDF = "pdf"
    XLSX = "xlsx"

    @property
    def path_segment(self) -> str:
        """URL segment the export endpoint uses for this format."""
        return "excel" if self is ExportFormat.XLSX else "pdf"

    @property
    def extension(self) -> str:
        return self.value


def _parse_theme(value: Any) -> Any:
    # The service sends "" for "no theme"
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


def _parse_currency(value: str) -> str:
    code = value.strip().upper()
    if not is_supported(code):
        raise ValueError(f"Unsupported currency: {value}")
    return code


class WireModel(BaseModel):
    """Base for models exchanged with the service in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump the model in its wire shape."""
        return self.model_dump(mode="json", by_alias=True)


class Transportation(WireModel):
    """Transportation to and from the destination."""

    model_config = ConfigDict(frozen=True)

    type: str = ""
    provider: str = ""
    origin: str = Field(
        default="",
        validation_alias=AliasChoices(
            "origin", "departureLocation", "departure_location"
        ),
    )
    destination: str = Field(
        default="",
        validation_alias=AliasChoices(
            "destination", "arrivalLocation", "arrival_location"
        ),
    )
    departure_date: date | None = None
    return_date: date | None = None
    cost: float = 0.0


class Accommodation(WireModel):
    """Where the group stays."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    type: str = ""
    rating: float | None = None
    location: str = Field(
        default="", validation_alias=AliasChoices("location", "address")
    )
    check_in_date: date | None = None
    check_out_date: date | None = None
    cost_per_night: float = 0.0
    nights: int | None = None
    cost: float = 0.0


class BudgetBreakdown(WireModel):
    """Cost split of a trip, in the trip's currency."""

    model_config = ConfigDict(frozen=True)

    transportation_cost: float = 0.0
    accommodation_cost: float = 0.0
    food_cost: float = 0.0
    activities_cost: float = 0.0
    miscellaneous_cost: float = 0.0
    total_cost: float = 0.0
    total_budget: float | None = None

    @property
    def components_cost(self) -> float:
        return (
            self.transportation_cost
            + self.accommodation_cost
            + self.food_cost
            + self.activities_cost
            + self.miscellaneous_cost
        )

    @model_validator(mode="after")
    def check_total(self) -> "BudgetBreakdown":
        """Warn when the reported total is not the sum of its components."""
        # The service owns the figures; a mismatch is reported, never corrected
        components = self.components_cost
        if abs(components - self.total_cost) > BUDGET_TOLERANCE:
            logger.warning(
                f"Total cost {self.total_cost} does not match the sum of its "
                f"components ({components})"
            )
        return self


class Activity(WireModel):
    """A single scheduled activity."""

    model_config = ConfigDict(frozen=True)

    time: str = ""
    name: str
    description: str = ""
    cost: float = 0.0
    type: str = ""


class DailyItinerary(WireModel):
    """One day of the trip with its activities in order."""

    model_config = ConfigDict(frozen=True)

    day: int | None = None
    day_date: date | None = Field(default=None, alias="date")
    activities: list[Activity] = Field(default_factory=list)


class Trip(WireModel):
    """
    A planned trip as returned by the planning service.

    Trips are immutable on the client: every derived field (transportation,
    accommodation, budget, itinerary) is produced by the service.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    destination: str = ""
    start_date: date | None = None
    end_date: date | None = None
    group_size: int = Field(default=1, ge=1)
    theme: TripTheme | None = None
    currency: str = "USD"
    transportation: Transportation | None = None
    accommodation: Accommodation | None = None
    budget_breakdown: BudgetBreakdown = Field(default_factory=BudgetBreakdown)
    daily_itineraries: list[DailyItinerary] = Field(default_factory=list)
    saved: bool = False

    @field_validator("theme", mode="before")
    @classmethod
    def normalize_theme(cls, value: Any) -> Any:
        return _parse_theme(value)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        """Validate the currency is one of the supported codes."""
        return _parse_currency(value)

    @model_validator(mode="after")
    def validate_dates(self) -> "Trip":
        """Validate the trip does not end before it starts."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Trip end date must not be before its start date")
        return self

    @field_serializer("theme")
    def serialize_theme(self, theme: TripTheme | None) -> str:
        return theme.value if theme else ""


class TripPreferences(WireModel):
    """What the user asks the planning service for."""

    budget: float = Field(default=0.0, ge=0)
    destination: str = ""
    currency: str = Field(default_factory=lambda: config.system.default_currency)
    start_date: date | None = None
    end_date: date | None = None
    theme: TripTheme | None = None
    group_size: int = Field(default=1, ge=1)
    starting_point: str = ""

    @field_validator("theme", mode="before")
    @classmethod
    def normalize_theme(cls, value: Any) -> Any:
        return _parse_theme(value)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        """Validate the currency is one of the supported codes."""
        return _parse_currency(value)

    @model_validator(mode="after")
    def validate_dates(self) -> "TripPreferences":
        """Validate the requested window does not end before it starts."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before the start date")
        return self

    @field_serializer("theme")
    def serialize_theme(self, theme: TripTheme | None) -> str:
        return theme.value if theme else ""


class BookingRequest(WireModel):
    """Booking submission. Payment card fields are never sent."""

    trip_id: str
    traveler_name: str = ""
    traveler_email: str = ""
    traveler_phone: str = ""


class BookingConfirmation(WireModel):
    """Outcome reported by the booking endpoint."""

    success: bool = False
    message: str | None = None
    flight_confirmation: str | None = None
    hotel_confirmation: str | None = None
    timestamp: datetime | None = None


class Availability(WireModel):
    """Whether a trip can currently be booked."""

    is_available: bool = False
    message: str | None = None
    last_checked: datetime | None = None
