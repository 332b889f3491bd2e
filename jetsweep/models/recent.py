"""
Recent search model - condensed record of a past computation
"""

from pydantic import BaseModel, Field

from .timeline import TripType


class RecentSearch(BaseModel):
    """Persisted summary of one timeline lookup (timestamps are ISO-8601 strings)"""

    id: str = Field(..., description="Random UUID")
    airport: str = Field(..., description="Resolved airport code")
    airport_name: str
    trip_type: TripType
    leave_time: str
    flight_time: str
    created_at: str

    class Config:
        json_schema_extra = {
            "example": {
                "id": "0b7c6a55-6f8e-4c1b-9d1e-2b0f5d6f9a11",
                "airport": "ATL",
                "airport_name": "Atlanta Hartsfield-Jackson",
                "trip_type": "domestic",
                "leave_time": "2026-03-12T11:02:00",
                "flight_time": "2026-03-12T14:30:00",
                "created_at": "2026-03-11T20:15:42",
            }
        }
