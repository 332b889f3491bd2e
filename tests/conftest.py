"""
Shared fixtures for the JetSweep test suite
"""

from datetime import datetime

import pytest

from jetsweep.models.timeline import FlightInputs
from jetsweep.services.recent_searches import RecentSearchStore

# Tuesday morning in mid-October: no holiday window, noon departures miss rush hour
REFERENCE_NOW = datetime(2025, 10, 14, 6, 0)


@pytest.fixture
def reference_now() -> datetime:
    return REFERENCE_NOW


@pytest.fixture
def make_inputs():
    """Factory for FlightInputs with quiet defaults (noon departure, ATL, PreCheck)"""
    def _make(**overrides) -> FlightInputs:
        fields = {
            "departure_datetime": datetime(2025, 10, 14, 12, 0),
            "trip_type": "domestic",
            "has_pre_check": True,
            "has_clear": False,
            "has_checked_bag": False,
            "is_holiday": False,
            "is_bad_weather": False,
            "group_type": "solo",
            "transport_type": "rideshare",
            "risk_preference": "balanced",
            "airport": "ATL",
        }
        fields.update(overrides)
        return FlightInputs(**fields)

    return _make


@pytest.fixture
def store(tmp_path) -> RecentSearchStore:
    return RecentSearchStore(tmp_path / "recent_searches.json", limit=5)
