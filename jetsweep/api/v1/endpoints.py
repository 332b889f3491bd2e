"""
API v1 Endpoints - leave-by timeline, airport lookup and travel conditions
"""

from datetime import datetime
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from jetsweep.core.config import Settings, get_settings
from jetsweep.models.timeline import FlightInputs
from jetsweep.services.airports import OTHER_AIRPORT_OPTIONS, get_all_airports, resolve_airport_profile
from jetsweep.services.conditions import analyze_travel_conditions, get_conditions_description
from jetsweep.services.recent_searches import (
    RecentSearchStore,
    build_recent_search,
    format_recent_search_time,
    get_recent_search_store,
)
from jetsweep.services.timeline import TimelineEngine, get_timeline_engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Leave-By Planner"])


@router.get("/health", summary="Service health check")
async def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@router.get("/airports", summary="List known airports")
async def list_airports() -> Dict[str, Any]:
    """All airports with built-in profiles, plus the two 'other' options."""
    airports = get_all_airports()
    return {
        "airports": [airport.model_dump(mode="json") for airport in airports],
        "other_options": [
            {"code": option["code"], "name": option["name"], "tier": option["tier"].value}
            for option in OTHER_AIRPORT_OPTIONS
        ],
        "total_count": len(airports),
    }


@router.get("/airports/{query}", summary="Resolve an airport code or name")
async def get_airport(query: str) -> Dict[str, Any]:
    """Resolve a code, OTHER_LARGE / OTHER_REGIONAL, or free-text name to a profile."""
    profile, is_estimate = resolve_airport_profile(query)
    logger.info("Airport lookup %r -> %s (estimate=%s)", query, profile.code, is_estimate)
    return {
        "profile": profile.model_dump(mode="json"),
        "is_estimate": is_estimate,
    }


@router.get("/conditions", summary="Rush hour and holiday conditions for a departure")
async def get_conditions(
    departure: datetime = Query(..., description="Departure time, ISO format (local wall-clock)"),
) -> Dict[str, Any]:
    conditions = analyze_travel_conditions(departure)
    return {
        "departure": departure.isoformat(),
        "conditions": conditions.model_dump(mode="json"),
        "description": get_conditions_description(conditions),
    }


@router.post("/timeline", summary="Compute the leave-by timeline for a flight")
def create_timeline(
    inputs: FlightInputs,
    save: bool = Query(True, description="Record this lookup in the recent-search history"),
    engine: TimelineEngine = Depends(get_timeline_engine),
    store: RecentSearchStore = Depends(get_recent_search_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Work back from boarding to the time the traveler should leave.

    Returns the full stage list plus display-ready summary fields.
    """
    try:
        logger.info(
            "Computing timeline: %s %s departing %s",
            inputs.airport or "GENERIC",
            inputs.trip_type.value,
            inputs.departure_datetime.isoformat(),
        )
        result = engine.compute(inputs)

        recent_search = None
        if save and settings.recent_searches_enabled:
            recent_search = store.save(build_recent_search(inputs, result))

        return {
            "status": "success",
            "timeline": result.model_dump(mode="json"),
            "summary": engine.get_timeline_summary(result),
            "recent_search": recent_search.model_dump(mode="json") if recent_search else None,
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error computing timeline: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )


@router.get("/recent-searches", summary="Recent timeline lookups, newest first")
def list_recent_searches(
    store: RecentSearchStore = Depends(get_recent_search_store),
) -> Dict[str, Any]:
    searches = store.list()
    return {
        "searches": [
            {
                **search.model_dump(mode="json"),
                "relative_time": format_recent_search_time(search.created_at),
            }
            for search in searches
        ],
        "total_count": len(searches),
    }


@router.delete("/recent-searches", summary="Clear the recent-search history")
def clear_recent_searches(
    store: RecentSearchStore = Depends(get_recent_search_store),
) -> Dict[str, Any]:
    store.clear()
    logger.info("Recent searches cleared")
    return {"status": "cleared"}
