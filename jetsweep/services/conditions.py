"""
Travel Conditions Analyzer - rush hour and holiday detection
Turns a departure timestamp into drive-time and security multipliers
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from jetsweep.models.conditions import (
    HolidayImpact,
    HolidaySeverity,
    RushHourSeverity,
    TravelConditions
)

logger = logging.getLogger(__name__)


TRAFFIC_MULTIPLIERS = {
    RushHourSeverity.NONE: 1.0,
    RushHourSeverity.MODERATE: 1.15,
    RushHourSeverity.HEAVY: 1.35,
}

TRAFFIC_NOTES = {
    RushHourSeverity.MODERATE: "Moderate traffic—allow 15% extra drive time",
    RushHourSeverity.HEAVY: "Rush hour traffic—expect 35% longer drive times",
}


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    """n-th given weekday (Monday=0) of a month, e.g. 4th Thursday of November"""
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return date(year, month, 1 + offset + (n - 1) * 7)


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    """Last given weekday (Monday=0) of a month, e.g. last Monday of May"""
    last = date(year, month, calendar.monthrange(year, month)[1])
    return date(year, month, last.day - (last.weekday() - weekday) % 7)


def thanksgiving(year: int) -> date:
    return nth_weekday_of_month(year, 11, calendar.THURSDAY, 4)


def memorial_day(year: int) -> date:
    return last_weekday_of_month(year, 5, calendar.MONDAY)


def labor_day(year: int) -> date:
    return nth_weekday_of_month(year, 9, calendar.MONDAY, 1)


def mlk_day(year: int) -> date:
    return nth_weekday_of_month(year, 1, calendar.MONDAY, 3)


def presidents_day(year: int) -> date:
    return nth_weekday_of_month(year, 2, calendar.MONDAY, 3)


def days_until_anchor(day: date, anchor_for_year: Callable[[int], date]) -> int:
    """
    Signed days from `day` to the nearest yearly anchor

    Positive = anchor still ahead. The previous and next year's anchors are
    considered too, so windows around a floating holiday stay correct across
    New Year.
    """
    candidates = (
        (anchor_for_year(year) - day).days
        for year in (day.year - 1, day.year, day.year + 1)
    )
    return min(candidates, key=abs)


# ---------------------------------------------------------------------------
# Holiday rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HolidayRule:
    name: str
    check: Callable[[date], bool]
    severity: HolidaySeverity
    security_multiplier: float
    description: str

    def to_impact(self) -> HolidayImpact:
        return HolidayImpact(
            name=self.name,
            severity=self.severity,
            security_multiplier=self.security_multiplier,
            description=self.description
        )


def _in_month_days(day: date, month: int, first: int, last: int) -> bool:
    return day.month == month and first <= day.day <= last


# First match wins; keep this order.
HOLIDAY_PERIODS: List[HolidayRule] = [
    # Thanksgiving - busiest US travel period
    HolidayRule(
        name="Thanksgiving Week",
        # Sunday before through Wednesday
        check=lambda d: 1 <= days_until_anchor(d, thanksgiving) <= 4,
        severity=HolidaySeverity.EXTREME,
        security_multiplier=1.5,
        description="Peak Thanksgiving travel—arrive extra early",
    ),
    HolidayRule(
        name="Thanksgiving Day",
        check=lambda d: days_until_anchor(d, thanksgiving) == 0,
        severity=HolidaySeverity.LIGHT,
        security_multiplier=0.9,
        description="Thanksgiving Day is quieter—most already traveled",
    ),
    HolidayRule(
        name="Thanksgiving Return",
        # Friday through Sunday after
        check=lambda d: -3 <= days_until_anchor(d, thanksgiving) <= -1,
        severity=HolidaySeverity.EXTREME,
        security_multiplier=1.45,
        description="Thanksgiving return rush—airports packed",
    ),

    # Christmas / New Year
    HolidayRule(
        name="Christmas Rush",
        check=lambda d: _in_month_days(d, 12, 20, 23),
        severity=HolidaySeverity.HEAVY,
        security_multiplier=1.35,
        description="Pre-Christmas travel surge",
    ),
    HolidayRule(
        name="Christmas Eve",
        check=lambda d: _in_month_days(d, 12, 24, 24),
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.15,
        description="Morning flights busy, afternoon quieter",
    ),
    HolidayRule(
        name="Christmas Day",
        check=lambda d: _in_month_days(d, 12, 25, 25),
        severity=HolidaySeverity.LIGHT,
        security_multiplier=0.85,
        description="Christmas Day is one of the quietest—good travel day",
    ),
    HolidayRule(
        name="Post-Christmas Rush",
        check=lambda d: _in_month_days(d, 12, 26, 30),
        severity=HolidaySeverity.HEAVY,
        security_multiplier=1.3,
        description="Post-holiday travel surge",
    ),
    HolidayRule(
        name="New Year's Eve",
        check=lambda d: _in_month_days(d, 12, 31, 31),
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.15,
        description="Moderate volume—people heading to NYE destinations",
    ),
    HolidayRule(
        name="New Year's Day",
        check=lambda d: _in_month_days(d, 1, 1, 1),
        severity=HolidaySeverity.LIGHT,
        security_multiplier=0.9,
        description="Lighter travel day—many recovering from NYE",
    ),
    HolidayRule(
        name="Post-New Year Rush",
        check=lambda d: _in_month_days(d, 1, 2, 3),
        severity=HolidaySeverity.HEAVY,
        security_multiplier=1.35,
        description="New Year return rush—back to work/school",
    ),

    # Spring break, March 10 - April 20 covers most school calendars
    HolidayRule(
        name="Spring Break Period",
        check=lambda d: _in_month_days(d, 3, 10, 31) or _in_month_days(d, 4, 1, 20),
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.2,
        description="Spring break season—family travel surge",
    ),

    HolidayRule(
        name="Memorial Day Weekend",
        # Thursday before through Tuesday after
        check=lambda d: -1 <= days_until_anchor(d, memorial_day) <= 4,
        severity=HolidaySeverity.HEAVY,
        security_multiplier=1.3,
        description="Memorial Day weekend getaway rush",
    ),

    # July 4th: the day itself is lighter than the days around it
    HolidayRule(
        name="July 4th Weekend",
        check=lambda d: _in_month_days(d, 7, 1, 7) and d.day != 4,
        severity=HolidaySeverity.HEAVY,
        security_multiplier=1.25,
        description="Independence Day travel rush",
    ),
    HolidayRule(
        name="July 4th",
        check=lambda d: _in_month_days(d, 7, 4, 4),
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.1,
        description="July 4th day—most are at destinations",
    ),

    HolidayRule(
        name="Labor Day Weekend",
        check=lambda d: -1 <= days_until_anchor(d, labor_day) <= 4,
        severity=HolidaySeverity.HEAVY,
        security_multiplier=1.3,
        description="Labor Day—last summer travel rush",
    ),

    # Game date varies; first or second Sunday of February
    HolidayRule(
        name="Super Bowl Sunday",
        check=lambda d: _in_month_days(d, 2, 1, 14) and d.weekday() == calendar.SUNDAY,
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.15,
        description="Super Bowl Sunday—fans heading to game cities",
    ),

    HolidayRule(
        name="MLK Day Weekend",
        check=lambda d: 0 <= days_until_anchor(d, mlk_day) <= 3,
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.15,
        description="MLK Day long weekend travel",
    ),
    HolidayRule(
        name="Presidents Day Weekend",
        check=lambda d: 0 <= days_until_anchor(d, presidents_day) <= 3,
        severity=HolidaySeverity.MODERATE,
        security_multiplier=1.2,
        description="Presidents Day ski & beach getaway rush",
    ),
]


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

def detect_rush_hour(departure: datetime) -> Tuple[bool, RushHourSeverity]:
    """
    Classify commuter traffic at the departure's local wall-clock time

    Morning 6:00-9:30 (heavy 7:00-9:00), evening 15:30-19:00
    (heavy 16:00-18:30). Weekends never qualify.

    Returns:
        Tuple of (is_rush_hour, severity)
    """
    if departure.weekday() >= 5:
        return False, RushHourSeverity.NONE

    t = departure.hour + departure.minute / 60

    if 7 <= t <= 9:
        return True, RushHourSeverity.HEAVY
    if 6 <= t < 7 or 9 < t <= 9.5:
        return True, RushHourSeverity.MODERATE

    if 16 <= t <= 18.5:
        return True, RushHourSeverity.HEAVY
    if 15.5 <= t < 16 or 18.5 < t <= 19:
        return True, RushHourSeverity.MODERATE

    return False, RushHourSeverity.NONE


def detect_holiday(departure: datetime) -> Optional[HolidayImpact]:
    """Return the first holiday period containing the departure date, if any"""
    day = departure.date() if isinstance(departure, datetime) else departure
    for rule in HOLIDAY_PERIODS:
        if rule.check(day):
            return rule.to_impact()
    return None


def analyze_travel_conditions(departure: datetime) -> TravelConditions:
    """
    Analyze traffic and holiday pressure for a departure time

    Args:
        departure: Departure timestamp (local wall-clock)

    Returns:
        TravelConditions with multipliers and human-readable notes
    """
    is_rush_hour, severity = detect_rush_hour(departure)
    holiday = detect_holiday(departure)

    notes = []
    traffic_multiplier = TRAFFIC_MULTIPLIERS[severity]
    if severity in TRAFFIC_NOTES:
        notes.append(TRAFFIC_NOTES[severity])

    security_multiplier = 1.0
    if holiday:
        security_multiplier = holiday.security_multiplier
        notes.append(holiday.description)

    logger.debug(
        "Conditions for %s: rush=%s holiday=%s",
        departure.isoformat(), severity.value, holiday.name if holiday else None
    )

    return TravelConditions(
        is_rush_hour=is_rush_hour,
        rush_hour_severity=severity,
        holiday_impact=holiday,
        traffic_multiplier=traffic_multiplier,
        security_multiplier=security_multiplier,
        notes=notes
    )


def get_conditions_description(conditions: TravelConditions) -> str:
    """Short label such as 'Heavy rush hour + Thanksgiving Week'"""
    parts = []
    if conditions.rush_hour_severity == RushHourSeverity.HEAVY:
        parts.append("Heavy rush hour")
    elif conditions.rush_hour_severity == RushHourSeverity.MODERATE:
        parts.append("Moderate traffic")

    if conditions.holiday_impact:
        parts.append(conditions.holiday_impact.name)

    return " + ".join(parts) if parts else "Normal conditions"
