"""
Recent Searches - small file-backed history of past timeline lookups
Newest first, one entry per airport + trip type, capped in size
"""

import json
import logging
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from jetsweep.models.recent import RecentSearch
from jetsweep.models.timeline import FlightInputs, TimelineResult

logger = logging.getLogger(__name__)

STORAGE_KEY = "jetsweep_recent_searches"
MAX_SEARCHES = 5


def build_recent_search(inputs: FlightInputs, result: TimelineResult) -> Dict[str, Any]:
    """
    Condense a computation into the fields stored for a recent search

    Returns:
        Dictionary without id / created_at (the store assigns those)
    """
    return {
        "airport": result.airport_profile.code,
        "airport_name": result.airport_profile.name,
        "trip_type": inputs.trip_type,
        "leave_time": result.leave_time.isoformat(),
        "flight_time": inputs.departure_datetime.isoformat(),
    }


def _parse_datetime(dt_string: str) -> datetime:
    return datetime.fromisoformat(dt_string.replace("Z", "+00:00"))


def format_recent_search_time(iso_string: str, now: Optional[datetime] = None) -> str:
    """
    Relative label for when a search was made

    Returns:
        'Just now', '12m ago', '3h ago', '2d ago', or a short date like 'Oct 3'
    """
    created = _parse_datetime(iso_string)
    if now is None:
        now = datetime.now(created.tzinfo)

    diff_minutes = int((now - created).total_seconds() // 60)
    if diff_minutes < 1:
        return "Just now"
    if diff_minutes < 60:
        return f"{diff_minutes}m ago"
    if diff_minutes < 60 * 24:
        return f"{diff_minutes // 60}h ago"
    if diff_minutes < 60 * 24 * 7:
        return f"{diff_minutes // (60 * 24)}d ago"
    return f"{created.strftime('%b')} {created.day}"


class RecentSearchStore:
    """
    JSON-file store for recent searches

    The file holds one JSON object; the list lives under STORAGE_KEY.
    Storage failures are logged and ignored: saving a search must never
    break a timeline request.
    """

    def __init__(self, path: Path, limit: int = MAX_SEARCHES):
        """
        Initialize store

        Args:
            path: JSON file location (created on first save)
            limit: Maximum number of searches kept
        """
        self.path = Path(path)
        self.limit = limit
        self._lock = threading.Lock()

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        document = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return document

    def _load(self) -> List[RecentSearch]:
        try:
            stored = self._read_document().get(STORAGE_KEY) or []
            return [RecentSearch.model_validate(item) for item in stored]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error(f"Failed to load recent searches: {str(e)}")
            return []

    def _write(self, searches: List[RecentSearch]) -> None:
        try:
            try:
                document = self._read_document()
            except ValueError:
                document = {}
            document[STORAGE_KEY] = [search.model_dump(mode="json") for search in searches]
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except (OSError, TypeError) as e:
            logger.error(f"Failed to save recent searches: {str(e)}")

    def list(self) -> List[RecentSearch]:
        """Stored searches, newest first"""
        with self._lock:
            return self._load()

    def save(self, search: Dict[str, Any], now: Optional[datetime] = None) -> RecentSearch:
        """
        Add a search to the front of the list

        Older entries for the same airport and trip type are dropped, and
        the list is truncated to the store limit.

        Args:
            search: Fields from build_recent_search()
            now: Creation timestamp (system clock if omitted)

        Returns:
            The stored RecentSearch
        """
        created_at = (now or datetime.now()).replace(microsecond=0).isoformat()
        new_search = RecentSearch(id=str(uuid.uuid4()), created_at=created_at, **search)

        with self._lock:
            kept = [
                existing for existing in self._load()
                if not (
                    existing.airport == new_search.airport
                    and existing.trip_type == new_search.trip_type
                )
            ]
            updated = [new_search, *kept][:self.limit]
            self._write(updated)

        logger.debug("Saved recent search %s (%s)", new_search.airport, new_search.trip_type.value)
        return new_search

    def clear(self) -> None:
        """Remove every stored search"""
        with self._lock:
            if not self.path.exists():
                return
            try:
                document = self._read_document()
                document.pop(STORAGE_KEY, None)
                self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to clear recent searches: {str(e)}")


# Singleton store instance
_store_instance: Optional[RecentSearchStore] = None


def get_recent_search_store() -> RecentSearchStore:
    """
    Get singleton recent-search store configured from Settings

    Returns:
        RecentSearchStore instance
    """
    global _store_instance

    if _store_instance is None:
        from jetsweep.core.config import get_settings
        settings = get_settings()
        _store_instance = RecentSearchStore(
            settings.recent_searches_file,
            limit=settings.recent_searches_limit
        )

    return _store_instance
