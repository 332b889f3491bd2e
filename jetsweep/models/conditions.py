"""
Travel condition models - rush hour and holiday classification results
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RushHourSeverity(str, Enum):
    """Drive-time pressure from commuter traffic"""
    NONE = "none"
    MODERATE = "moderate"
    HEAVY = "heavy"


class HolidaySeverity(str, Enum):
    """How crowded a holiday period makes the airport"""
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    EXTREME = "extreme"


class HolidayImpact(BaseModel):
    """A matched holiday period"""
    model_config = ConfigDict(frozen=True)

    name: str
    severity: HolidaySeverity
    security_multiplier: float = Field(..., gt=0, description="1.0 = normal, higher = busier")
    description: str


class TravelConditions(BaseModel):
    """
    Conditions derived from a single departure timestamp

    traffic_multiplier applies to drive time only, security_multiplier
    to the security stage only.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "is_rush_hour": True,
                "rush_hour_severity": "heavy",
                "holiday_impact": {
                    "name": "Thanksgiving Week",
                    "severity": "extreme",
                    "security_multiplier": 1.5,
                    "description": "Peak Thanksgiving travel—arrive extra early",
                },
                "traffic_multiplier": 1.35,
                "security_multiplier": 1.5,
                "notes": [
                    "Rush hour traffic—expect 35% longer drive times",
                    "Peak Thanksgiving travel—arrive extra early",
                ],
            }
        },
    )

    is_rush_hour: bool = False
    rush_hour_severity: RushHourSeverity = RushHourSeverity.NONE
    holiday_impact: Optional[HolidayImpact] = None
    traffic_multiplier: float = Field(default=1.0, ge=1.0)
    security_multiplier: float = Field(default=1.0, gt=0)
    notes: List[str] = Field(default_factory=list)
