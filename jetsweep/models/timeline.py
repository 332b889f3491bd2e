"""
Timeline models - traveler input record and the computed itinerary
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .airport import AirportProfile, TimeRange
from .conditions import TravelConditions


class TripType(str, Enum):
    DOMESTIC = "domestic"
    INTERNATIONAL = "international"


class GroupType(str, Enum):
    SOLO = "solo"
    FAMILY = "family"


class TransportType(str, Enum):
    RIDESHARE = "rideshare"
    CAR = "car"


class RiskPreference(str, Enum):
    """Where inside each stage's range the traveler wants to plan"""
    EARLY = "early"
    BALANCED = "balanced"
    RISKY = "risky"


class Confidence(str, Enum):
    NORMAL = "normal"
    RISKY = "risky"
    HIGH_VARIANCE = "high-variance"


class StressLevel(str, Enum):
    CALM = "CALM"
    TIGHT = "TIGHT"
    RISKY = "RISKY"


class FlightInputs(BaseModel):
    """
    Traveler request for a leave-by computation

    Times are local wall-clock; no timezone conversion is applied.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "departure_datetime": "2026-03-12T14:30:00",
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
                "drive_time": 30,
            }
        },
    )

    departure_datetime: datetime = Field(..., description="Scheduled departure, local time")
    trip_type: TripType = Field(default=TripType.DOMESTIC)

    has_pre_check: bool = Field(default=False, description="TSA PreCheck member")
    has_clear: bool = Field(default=False, description="CLEAR member")
    has_checked_bag: bool = Field(default=False)
    is_holiday: bool = Field(default=False, description="Manual holiday override")
    is_bad_weather: bool = Field(default=False)

    group_type: GroupType = Field(default=GroupType.SOLO)
    transport_type: TransportType = Field(default=TransportType.RIDESHARE)
    risk_preference: RiskPreference = Field(default=RiskPreference.BALANCED)

    airport: Optional[str] = Field(
        None,
        max_length=100,
        description="Airport code, OTHER_LARGE / OTHER_REGIONAL, or free-text name"
    )
    drive_time: Optional[int] = Field(
        None,
        ge=1,
        le=600,
        description="Door-to-curb drive in minutes (defaults to the airport's typical drive)"
    )

    @field_validator("airport", mode="before")
    @classmethod
    def blank_airport_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_international(self) -> bool:
        return self.trip_type == TripType.INTERNATIONAL

    @property
    def is_family(self) -> bool:
        return self.group_type == GroupType.FAMILY

    @property
    def is_rideshare(self) -> bool:
        return self.transport_type == TransportType.RIDESHARE


class TimelineStage(BaseModel):
    """One leg of the itinerary"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable stage identifier, e.g. drive, security, boarding")
    label: str
    icon: str
    start_time: datetime
    end_time: datetime
    duration_range: TimeRange
    note: str

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)


class LeaveTimeWindow(BaseModel):
    """Earliest/latest leave instants from the summed stage extremes"""
    model_config = ConfigDict(frozen=True)

    earliest: datetime
    latest: datetime


class TimelineResult(BaseModel):
    """
    Full leave-by computation

    Stages are chronological. leave_time is clamped to "now" when the
    earliest stage already started; stage timestamps are not rewritten.
    """
    model_config = ConfigDict(frozen=True)

    stages: List[TimelineStage]
    leave_time: datetime
    leave_time_range: TimeRange
    leave_time_window: LeaveTimeWindow
    confidence: Confidence
    airport_profile: AirportProfile
    is_airport_estimate: bool
    is_leave_now: bool
    travel_conditions: TravelConditions
    stress_margin: int = Field(..., description="Minutes between reaching the gate and boarding start")
    stress_level: StressLevel

    def get_stage(self, stage_id: str) -> Optional[TimelineStage]:
        """Look up a stage by id"""
        for stage in self.stages:
            if stage.id == stage_id:
                return stage
        return None

    @property
    def stage_ids(self) -> List[str]:
        return [stage.id for stage in self.stages]
