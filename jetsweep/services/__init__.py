"""
Services package - airport registry, travel conditions and the timeline engine
"""

from .airports import find_airport, get_all_airports, resolve_airport_profile
from .conditions import analyze_travel_conditions, get_conditions_description
from .recent_searches import RecentSearchStore, build_recent_search, get_recent_search_store
from .timeline import TimelineEngine, compute_timeline, get_timeline_engine

__all__ = [
    "find_airport",
    "get_all_airports",
    "resolve_airport_profile",
    "analyze_travel_conditions",
    "get_conditions_description",
    "RecentSearchStore",
    "build_recent_search",
    "get_recent_search_store",
    "TimelineEngine",
    "compute_timeline",
    "get_timeline_engine"
]
