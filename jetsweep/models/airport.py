"""
Airport models - Pydantic schemas for airport friction profiles
Every profile carries one tier and all six stage ranges
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Tier(str, Enum):
    """Coarse airport size classification, largest first"""
    MEGA = "MEGA"
    LARGE = "LARGE"
    MEDIUM = "MEDIUM"
    GENERIC = "GENERIC"


class TimeRange(BaseModel):
    """
    Uncertainty window for a stage duration, in whole minutes
    """
    model_config = ConfigDict(frozen=True)

    min: int = Field(..., ge=0, description="Optimistic duration in minutes")
    max: int = Field(..., ge=0, description="Conservative duration in minutes")

    @model_validator(mode="after")
    def check_bounds(self):
        if self.max < self.min:
            raise ValueError(f"max ({self.max}) must be >= min ({self.min})")
        return self

    @classmethod
    def from_pair(cls, pair: Tuple[int, int]) -> "TimeRange":
        """Build a range from a (min, max) tuple as stored in the static tables"""
        return cls(min=pair[0], max=pair[1])


class AirportProfile(BaseModel):
    """
    Friction profile of a departure airport

    Ranges are per-stage contributions:
    - walk: curb-side of security to the gate
    - curb: curbside to terminal entrance
    - parking / rideshare: lot-to-terminal and driver-matching friction
    - security_add / baggage_add: queue overhead added to the base lane times
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "code": "ATL",
                "name": "Atlanta Hartsfield-Jackson",
                "tier": "MEGA",
                "walk": {"min": 20, "max": 30},
                "curb": {"min": 20, "max": 30},
                "parking": {"min": 20, "max": 30},
                "rideshare": {"min": 25, "max": 40},
                "security_add": {"min": 20, "max": 30},
                "baggage_add": {"min": 20, "max": 30},
                "pain_point": "Train waits and sheer distance quietly add time.",
                "typical_drive_time": 35,
            }
        },
    )

    code: str = Field(..., description="IATA-style airport code")
    name: str = Field(..., description="Human-readable airport name")
    tier: Tier = Field(..., description="Size tier driving the default ranges")

    walk: TimeRange
    curb: TimeRange
    parking: TimeRange
    rideshare: TimeRange
    security_add: TimeRange
    baggage_add: TimeRange

    pain_point: Optional[str] = Field(None, description="Airport-specific bottleneck advisory")
    typical_drive_time: int = Field(..., ge=0, description="Default drive time in minutes")
