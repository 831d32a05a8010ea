"""
Pytest configuration for the Vacation Planner client tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from vacation_planner.config import ServiceConfig, SystemConfig, VacationPlannerConfig
from vacation_planner.data.repository import TripRepository
from vacation_planner.utils import LogLevel, setup_logging


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    setup_logging(LogLevel.DEBUG)


def make_trip_payload(trip_id="trip-1", **overrides):
    """A trip as the service sends it."""
    payload = {
        "id": trip_id,
        "destination": "Lisbon",
        "startDate": "2025-06-01",
        "endDate": "2025-06-05",
        "groupSize": 2,
        "theme": "culture",
        "currency": "EUR",
        "transportation": {
            "type": "flight",
            "provider": "TAP",
            "departureLocation": "London",
            "arrivalLocation": "Lisbon",
            "departureDate": "2025-06-01",
            "returnDate": "2025-06-05",
            "cost": 300.0,
        },
        "accommodation": {
            "name": "Casa Azul",
            "type": "hotel",
            "rating": 4.5,
            "address": "Rua Augusta 1",
            "checkInDate": "2025-06-01",
            "checkOutDate": "2025-06-05",
            "costPerNight": 100.0,
            "nights": 4,
            "cost": 400.0,
        },
        "budgetBreakdown": {
            "transportationCost": 300.0,
            "accommodationCost": 400.0,
            "activitiesCost": 100.0,
            "totalCost": 800.0,
        },
        "dailyItineraries": [
            {
                "day": 1,
                "date": "2025-06-01",
                "activities": [
                    {
                        "time": "10:00",
                        "name": "Belem Tower",
                        "description": "Riverside fortress",
                        "cost": 10.0,
                        "type": "sightseeing",
                    }
                ],
            }
        ],
        "saved": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def trip_payload():
    return make_trip_payload()


@pytest.fixture
def make_trip():
    """Factory for service trip payloads with overrides."""
    return make_trip_payload


@pytest.fixture
def mock_client():
    """Mock trip service client."""
    client = MagicMock()
    client.request_json = AsyncMock(return_value=None)
    client.request_bytes = AsyncMock(return_value=b"")
    return client


@pytest.fixture
def repo(mock_client):
    return TripRepository(mock_client)


@pytest.fixture
def download_sink():
    """Download sink that records hand-offs instead of writing files."""
    sink = MagicMock(side_effect=lambda trip_id, fmt, payload: f"/tmp/{trip_id}")
    return sink


@pytest.fixture
def test_config():
    """Test application configuration."""
    return VacationPlannerConfig(
        service=ServiceConfig(
            base_url="http://trips.test",
            timeout=5.0,
            requests_per_minute=600,
        ),
        system=SystemConfig(
            log_level=LogLevel.DEBUG,
            environment="test",
            default_currency="USD",
        ),
    )
