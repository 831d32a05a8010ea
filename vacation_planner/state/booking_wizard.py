"""
Booking wizard state machine.

The wizard walks a loaded trip through four ordered steps. Only the payment
step talks to the service: submitting it books the trip, and the wizard moves
to the terminal confirmation step only when the service reports success. A
failed submission leaves the wizard on the payment step with the traveler's
input untouched so the booking can be retried as-is.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import IntEnum

from vacation_planner.data.models import (
    Accommodation,
    BookingConfirmation,
    BookingRequest,
    Transportation,
    Trip,
)
from vacation_planner.data.repository import TripRepository
from vacation_planner.state.async_resource import AsyncResource
from vacation_planner.utils.error_handling import WizardPreconditionError
from vacation_planner.utils.logging import get_logger

logger = get_logger(__name__)


class BookingStep(IntEnum):
    """Wizard steps, in order."""

    SUMMARY = 0
    TRAVELER = 1
    PAYMENT = 2
    CONFIRMED = 3

    @property
    def label(self) -> str:
        return STEP_LABELS[self]


STEP_LABELS = {
    BookingStep.SUMMARY: "Trip Summary",
    BookingStep.TRAVELER: "Traveler Details",
    BookingStep.PAYMENT: "Payment",
    BookingStep.CONFIRMED: "Confirmation",
}


@dataclass(frozen=True)
class TravelerDetails:
    """Traveler contact details, forwarded to the service unvalidated."""

    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class PaymentDetails:
    """Demo card fields. Collected for display only and never sent."""

    card_number: str = ""
    expiry: str = ""
    cvv: str = ""


# Per-step views: each carries only what its step shows


@dataclass(frozen=True)
class SummaryStep:
    destination: str
    start_date: date | None
    end_date: date | None
    transportation: Transportation | None
    accommodation: Accommodation | None
    total_cost: float
    currency: str


@dataclass(frozen=True)
class TravelerStep:
    traveler: TravelerDetails


@dataclass(frozen=True)
class PaymentStep:
    payment: PaymentDetails
    total_cost: float
    currency: str
    submitting: bool
    error: str | None


@dataclass(frozen=True)
class ConfirmedStep:
    confirmation: BookingConfirmation | None


StepView = SummaryStep | TravelerStep | PaymentStep | ConfirmedStep


class BookingWizard:
    """
    Four-step booking flow for one trip.

    The wizard requires a loaded trip: the hosting view shows the trip's
    loading or error state until then and only builds the wizard afterwards.
    """

    def __init__(self, trip: Trip, repository: TripRepository):
        if not isinstance(trip, Trip):
            raise WizardPreconditionError("The booking wizard needs a loaded trip")
        self.trip = trip
        self.repository = repository
        self.current_step = BookingStep.SUMMARY
        self.traveler = TravelerDetails()
        self.payment = PaymentDetails()
        self.submission: AsyncResource[BookingConfirmation] = AsyncResource(
            f"booking:{trip.id}"
        )
        self._step_views = {
            BookingStep.SUMMARY: self._summary_view,
            BookingStep.TRAVELER: self._traveler_view,
            BookingStep.PAYMENT: self._payment_view,
            BookingStep.CONFIRMED: self._confirmed_view,
        }

    @classmethod
    def from_resource(
        cls, resource: AsyncResource[Trip], repository: TripRepository
    ) -> "BookingWizard":
        """
        Build a wizard from the hosting view's trip resource.

        Raises:
            WizardPreconditionError: If the trip is not loaded
        """
        if not resource.is_ready:
            raise WizardPreconditionError(
                f"Trip is {resource.status.value}; the booking wizard needs it ready"
            )
        return cls(resource.value, repository)

    @property
    def is_confirmed(self) -> bool:
        return self.current_step is BookingStep.CONFIRMED

    @property
    def is_submitting(self) -> bool:
        return self.submission.is_loading

    @property
    def steps(self) -> list[str]:
        return [step.label for step in BookingStep]

    # --- Navigation ---

    def next(self) -> bool:
        """
        Advance from the summary or traveler step.

        The payment step only advances through submit().

        Returns:
            True if the step changed
        """
        if self.current_step not in (BookingStep.SUMMARY, BookingStep.TRAVELER):
            return False
        self._move_to(BookingStep(self.current_step + 1))
        return True

    def back(self) -> bool:
        """
        Go back one step. Not possible from the first step, after
        confirmation, or while a booking is being submitted.

        Returns:
            True if the step changed
        """
        if self.current_step in (BookingStep.SUMMARY, BookingStep.CONFIRMED):
            return False
        if self.is_submitting:
            return False
        self._move_to(BookingStep(self.current_step - 1))
        return True

    def _move_to(self, step: BookingStep) -> None:
        logger.debug(
            f"Booking {self.trip.id}: {self.current_step.name} -> {step.name}"
        )
        self.current_step = step

    # --- Input ---

    def update_traveler(
        self,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> bool:
        """Edit traveler details. Rejected once the booking is confirmed."""
        if self.is_confirmed:
            return False
        changes = {
            key: value
            for key, value in (("name", name), ("email", email), ("phone", phone))
            if value is not None
        }
        self.traveler = replace(self.traveler, **changes)
        return True

    def update_payment(
        self,
        card_number: str | None = None,
        expiry: str | None = None,
        cvv: str | None = None,
    ) -> bool:
        """Edit the demo card fields. Rejected once the booking is confirmed."""
        if self.is_confirmed:
            return False
        changes = {
            key: value
            for key, value in (
                ("card_number", card_number),
                ("expiry", expiry),
                ("cvv", cvv),
            )
            if value is not None
        }
        self.payment = replace(self.payment, **changes)
        return True

    # --- Submission ---

    async def submit(self) -> bool:
        """
        Book the trip from the payment step.

        Ignored outside the payment step and while a submission is already
        in flight. On failure the wizard stays on the payment step and the
        failure message is on `submission`.

        Returns:
            True if the booking was confirmed
        """
        if self.current_step is not BookingStep.PAYMENT:
            logger.debug(f"Ignoring submit on step {self.current_step.name}")
            return False
        if self.is_submitting:
            logger.warning(f"Booking for {self.trip.id} already in flight")
            return False

        request = BookingRequest(
            trip_id=self.trip.id,
            traveler_name=self.traveler.name,
            traveler_email=self.traveler.email,
            traveler_phone=self.traveler.phone,
        )
        request_id = self.submission.next_request_id
        await self.repository.book_trip(request, resource=self.submission)

        # close() discards the submission, so its outcome is no longer current
        if not self.submission.is_current(request_id) or not self.submission.is_ready:
            return False

        self._move_to(BookingStep.CONFIRMED)
        logger.info(f"Booking confirmed for trip {self.trip.id}")
        return True

    def close(self) -> None:
        """Abandon any in-flight submission; its outcome is ignored."""
        self.submission.discard()

    # --- Views ---

    def step_view(self) -> StepView:
        """Data for the current step."""
        return self._step_views[self.current_step]()

    def _summary_view(self) -> SummaryStep:
        return SummaryStep(
            destination=self.trip.destination,
            start_date=self.trip.start_date,
            end_date=self.trip.end_date,
            transportation=self.trip.transportation,
            accommodation=self.trip.accommodation,
            total_cost=self.trip.budget_breakdown.total_cost,
            currency=self.trip.currency,
        )

    def _traveler_view(self) -> TravelerStep:
        return TravelerStep(traveler=self.traveler)

    def _payment_view(self) -> PaymentStep:
        return PaymentStep(
            payment=self.payment,
            total_cost=self.trip.budget_breakdown.total_cost,
            currency=self.trip.currency,
            submitting=self.is_submitting,
            error=self.submission.error,
        )

    def _confirmed_view(self) -> ConfirmedStep:
        return ConfirmedStep(confirmation=self.submission.value)
