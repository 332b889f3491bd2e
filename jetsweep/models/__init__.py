"""
Models package - Pydantic schemas for data validation
"""

from .airport import AirportProfile, Tier, TimeRange
from .conditions import HolidayImpact, HolidaySeverity, RushHourSeverity, TravelConditions
from .recent import RecentSearch
from .timeline import (
    Confidence,
    FlightInputs,
    GroupType,
    LeaveTimeWindow,
    RiskPreference,
    StressLevel,
    TimelineResult,
    TimelineStage,
    TransportType,
    TripType
)

__all__ = [
    "AirportProfile",
    "Tier",
    "TimeRange",
    "HolidayImpact",
    "HolidaySeverity",
    "RushHourSeverity",
    "TravelConditions",
    "RecentSearch",
    "Confidence",
    "FlightInputs",
    "GroupType",
    "LeaveTimeWindow",
    "RiskPreference",
    "StressLevel",
    "TimelineResult",
    "TimelineStage",
    "TransportType",
    "TripType"
]
