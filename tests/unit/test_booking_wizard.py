"""Tests for the booking wizard state machine."""

import asyncio

import pytest

from vacation_planner.data.models import Trip
from vacation_planner.state.async_resource import AsyncResource
from vacation_planner.state.booking_wizard import (
    BookingStep,
    BookingWizard,
    ConfirmedStep,
    PaymentStep,
    SummaryStep,
    TravelerStep,
)
from vacation_planner.utils.error_handling import (
    NetworkError,
    WizardPreconditionError,
)

CONFIRMATION = {
    "success": True,
    "flightConfirmation": "FL123",
    "hotelConfirmation": "HT456",
    "message": "Booking confirmed",
}


@pytest.fixture
def trip(trip_payload):
    return Trip.model_validate(trip_payload)


@pytest.fixture
def wizard(trip, repo):
    return BookingWizard(trip, repo)


def advance_to_payment(wizard):
    wizard.next()
    wizard.update_traveler(name="Ada", email="ada@example.com", phone="555-0100")
    wizard.next()
    wizard.update_payment(card_number="4111111111111111", expiry="12/30", cvv="123")


def test_requires_loaded_trip(repo):
    with pytest.raises(WizardPreconditionError):
        BookingWizard(None, repo)


def test_from_resource_requires_ready_trip(repo):
    resource = AsyncResource("trip")
    resource.start()
    with pytest.raises(WizardPreconditionError):
        BookingWizard.from_resource(resource, repo)


def test_from_resource(trip, repo):
    resource = AsyncResource("trip")
    resource.resolve(resource.start(), trip)
    wizard = BookingWizard.from_resource(resource, repo)
    assert wizard.trip is trip
    assert wizard.current_step is BookingStep.SUMMARY


def test_step_labels(wizard):
    assert wizard.steps == [
        "Trip Summary",
        "Traveler Details",
        "Payment",
        "Confirmation",
    ]


def test_next_walks_to_payment_and_stops(wizard):
    assert wizard.next() is True
    assert wizard.current_step is BookingStep.TRAVELER
    assert wizard.next() is True
    assert wizard.current_step is BookingStep.PAYMENT
    assert wizard.next() is False
    assert wizard.current_step is BookingStep.PAYMENT


def test_back_is_noop_on_first_step(wizard):
    assert wizard.back() is False
    assert wizard.current_step is BookingStep.SUMMARY


def test_back_keeps_input(wizard):
    advance_to_payment(wizard)
    assert wizard.back() is True
    assert wizard.current_step is BookingStep.TRAVELER
    assert wizard.traveler.name == "Ada"
    assert wizard.payment.cvv == "123"


def test_partial_traveler_update(wizard):
    wizard.update_traveler(name="Ada")
    wizard.update_traveler(email="ada@example.com")
    assert wizard.traveler.name == "Ada"
    assert wizard.traveler.email == "ada@example.com"
    assert wizard.traveler.phone == ""


async def test_submit_outside_payment_is_ignored(wizard, mock_client):
    assert await wizard.submit() is False
    mock_client.request_json.assert_not_called()


async def test_successful_submit_confirms(wizard, mock_client):
    mock_client.request_json.return_value = CONFIRMATION
    advance_to_payment(wizard)

    assert await wizard.submit() is True

    assert wizard.current_step is BookingStep.CONFIRMED
    assert wizard.is_confirmed
    sent = mock_client.request_json.call_args.kwargs["json_data"]
    assert sent == {
        "tripId": "trip-1",
        "travelerName": "Ada",
        "travelerEmail": "ada@example.com",
        "travelerPhone": "555-0100",
    }
    view = wizard.step_view()
    assert isinstance(view, ConfirmedStep)
    assert view.confirmation.flight_confirmation == "FL123"


async def test_confirmed_is_terminal(wizard, mock_client):
    mock_client.request_json.return_value = CONFIRMATION
    advance_to_payment(wizard)
    await wizard.submit()

    assert wizard.back() is False
    assert wizard.next() is False
    assert wizard.update_traveler(name="Someone else") is False
    assert wizard.update_payment(cvv="999") is False
    assert await wizard.submit() is False
    assert wizard.traveler.name == "Ada"
    assert mock_client.request_json.call_count == 1


async def test_failed_submit_stays_on_payment(wizard, mock_client):
    mock_client.request_json.return_value = {
        "success": False,
        "message": "Payment declined",
    }
    advance_to_payment(wizard)

    assert await wizard.submit() is False

    assert wizard.current_step is BookingStep.PAYMENT
    assert wizard.traveler.email == "ada@example.com"
    assert wizard.payment.card_number == "4111111111111111"
    view = wizard.step_view()
    assert isinstance(view, PaymentStep)
    assert view.error == "Payment declined"
    assert view.submitting is False


async def test_retry_after_failure_succeeds(wizard, mock_client):
    mock_client.request_json.side_effect = [
        NetworkError("Connection refused"),
        CONFIRMATION,
    ]
    advance_to_payment(wizard)

    assert await wizard.submit() is False
    assert wizard.submission.error == "Booking failed. Please try again."
    assert await wizard.submit() is True
    assert wizard.is_confirmed


async def test_double_submit_sends_one_request(wizard, mock_client):
    release = asyncio.Event()

    async def slow_booking(*args, **kwargs):
        await release.wait()
        return CONFIRMATION

    mock_client.request_json.side_effect = slow_booking
    advance_to_payment(wizard)

    first = asyncio.create_task(wizard.submit())
    await asyncio.sleep(0)
    assert wizard.is_submitting
    assert wizard.back() is False
    assert await wizard.submit() is False

    release.set()
    assert await first is True
    assert mock_client.request_json.call_count == 1


async def test_closed_wizard_ignores_late_confirmation(wizard, mock_client):
    release = asyncio.Event()

    async def slow_booking(*args, **kwargs):
        await release.wait()
        return CONFIRMATION

    mock_client.request_json.side_effect = slow_booking
    advance_to_payment(wizard)

    pending = asyncio.create_task(wizard.submit())
    await asyncio.sleep(0)
    wizard.close()
    release.set()

    assert await pending is False
    assert wizard.current_step is BookingStep.PAYMENT
    assert wizard.submission.is_idle


def test_step_views(wizard):
    summary = wizard.step_view()
    assert isinstance(summary, SummaryStep)
    assert summary.destination == "Lisbon"
    assert summary.total_cost == 800.0
    assert summary.currency == "EUR"
    assert summary.accommodation.name == "Casa Azul"

    wizard.next()
    wizard.update_traveler(name="Ada")
    traveler = wizard.step_view()
    assert isinstance(traveler, TravelerStep)
    assert traveler.traveler.name == "Ada"

    wizard.next()
    payment = wizard.step_view()
    assert isinstance(payment, PaymentStep)
    assert payment.total_cost == 800.0
    assert payment.error is None
