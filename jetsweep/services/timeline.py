"""
Timeline Engine - backward scheduler for the leave-by time
Works back from boarding through gate, security, bags, curb and transport
"""

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from jetsweep.models.airport import AirportProfile, TimeRange
from jetsweep.models.conditions import HolidaySeverity, TravelConditions
from jetsweep.models.timeline import (
    Confidence,
    FlightInputs,
    LeaveTimeWindow,
    RiskPreference,
    StressLevel,
    TimelineResult,
    TimelineStage
)
from jetsweep.services.airports import resolve_airport_profile
from jetsweep.services.conditions import analyze_travel_conditions, get_conditions_description

logger = logging.getLogger(__name__)


def _range(low: int, high: int) -> TimeRange:
    return TimeRange(min=low, max=high)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive minutes (not banker's rounding)"""
    return int(math.floor(value + 0.5))


def add_range(a: TimeRange, b: TimeRange) -> TimeRange:
    """Elementwise sum of two ranges"""
    return TimeRange(min=a.min + b.min, max=a.max + b.max)


def scale_range(value: TimeRange, multiplier: float) -> TimeRange:
    """Scale both bounds, rounding each to whole minutes"""
    return TimeRange(
        min=round_half_up(value.min * multiplier),
        max=round_half_up(value.max * multiplier)
    )


def risk_adjusted_minutes(value: TimeRange, multiplier: float) -> int:
    """
    Pick a point inside a range: 1.0 = max (conservative), 0.5 = midpoint

    Example:
        risk_adjusted_minutes(TimeRange(min=15, max=25), 0.75) -> 23
    """
    return round_half_up(value.min + (value.max - value.min) * multiplier)


def format_time_range(value: TimeRange) -> str:
    if value.min == value.max:
        return f"{value.min} min"
    return f"{value.min}–{value.max} min"


def format_time(moment: datetime) -> str:
    """12-hour clock label, e.g. '2:05 PM'"""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_time_range_display(start: datetime, end: datetime) -> str:
    return f"{format_time(start)} – {format_time(end)}"


def _minutes(value: int) -> timedelta:
    return timedelta(minutes=value)


class TimelineEngine:
    """
    Computes a stage-by-stage leave-by itinerary for one flight

    Core Logic:
    - Stages are placed backward from boarding and listed chronologically;
      they are contiguous up to the gate, and the gap between gate arrival
      and boarding start is the stress margin
    - Each stage keeps its full [min, max] range; the risk preference picks
      the point inside the range used for placement
    - Rush hour scales drive time, a detected holiday scales security
    """

    RISK_MULTIPLIERS = {
        RiskPreference.EARLY: 1.0,
        RiskPreference.BALANCED: 0.75,
        RiskPreference.RISKY: 0.5,
    }

    # Boarding opens this many minutes before departure and lasts 20
    BOARDING_OFFSET_DOMESTIC = 40
    BOARDING_OFFSET_INTERNATIONAL = 50
    BOARDING_LENGTH = 20
    BOARDING_RANGE = _range(15, 20)

    GATE_BUFFER_DOMESTIC = _range(15, 25)
    GATE_BUFFER_INTERNATIONAL = _range(20, 30)
    INTERNATIONAL_WALK_FLOOR = _range(15, 25)

    SECURITY_CLEAR_AND_PRECHECK = _range(5, 15)
    SECURITY_CLEAR_ONLY = _range(15, 30)
    SECURITY_PRECHECK_ONLY = _range(10, 20)
    SECURITY_STANDARD = _range(25, 45)
    SECURITY_MANUAL_HOLIDAY = _range(10, 20)
    SECURITY_FAMILY = _range(5, 15)

    BAGGAGE_DOMESTIC = _range(20, 35)
    BAGGAGE_INTERNATIONAL = _range(30, 50)
    BAGGAGE_HOLIDAY = _range(10, 15)
    BAGGAGE_FAMILY = _range(5, 10)

    PICKUP_BASE = _range(8, 15)
    PICKUP_HOLIDAY = _range(5, 10)
    PICKUP_WEATHER = _range(10, 20)
    RIDESHARE_BASELINE = 6
    CALL_RANGE = _range(2, 5)

    PARKING_BASE = _range(15, 30)
    PARKING_HOLIDAY = _range(5, 15)
    PARKING_WEATHER = _range(10, 25)
    PARKING_BASELINE = 15
    HEAD_TO_CAR_RANGE = _range(3, 5)

    # Stress margin thresholds in minutes
    RISKY_MARGIN = 10
    TIGHT_MARGIN = 25

    SEVERE_HOLIDAYS = (HolidaySeverity.HEAVY, HolidaySeverity.EXTREME)

    def compute(self, inputs: FlightInputs, now: Optional[datetime] = None) -> TimelineResult:
        """
        Compute the leave-by timeline

        Args:
            inputs: Validated traveler request
            now: Reference instant for the leave-now check (system clock if omitted)

        Returns:
            TimelineResult with chronological stages

        Example:
            engine = TimelineEngine()
            result = engine.compute(
                FlightInputs(departure_datetime="2026-03-12T14:30:00", airport="ATL")
            )
        """
        departure = inputs.departure_datetime
        if now is None:
            now = datetime.now(departure.tzinfo)

        profile, is_estimate = resolve_airport_profile(inputs.airport)
        conditions = analyze_travel_conditions(departure)

        holiday_detected = conditions.holiday_impact is not None
        is_holiday = inputs.is_holiday or holiday_detected
        risk = self.RISK_MULTIPLIERS[inputs.risk_preference]

        stages: List[TimelineStage] = []

        # Boarding
        boarding_offset = (
            self.BOARDING_OFFSET_INTERNATIONAL if inputs.is_international
            else self.BOARDING_OFFSET_DOMESTIC
        )
        boarding_start = departure - _minutes(boarding_offset)
        boarding = TimelineStage(
            id="boarding",
            label="Boarding",
            icon="plane",
            start_time=boarding_start,
            end_time=boarding_start + _minutes(self.BOARDING_LENGTH),
            duration_range=self.BOARDING_RANGE,
            note=(
                "International flights board earlier; have passport ready"
                if inputs.is_international
                else "Be at gate when boarding starts for overhead bin space"
            ),
        )
        stages.insert(0, boarding)

        # Gate arrival
        gate = self._gate_stage(inputs, profile, boarding_start, risk)
        stages.insert(0, gate)

        # Security
        security = self._security_stage(inputs, profile, conditions, gate.start_time, risk)
        stages.insert(0, security)

        # Bag drop
        curb_target = security.start_time
        if inputs.has_checked_bag:
            baggage = self._baggage_stage(inputs, profile, is_holiday, security.start_time, risk)
            stages.insert(0, baggage)
            curb_target = baggage.start_time

        # Curb to terminal
        curb_range = profile.curb
        curb_start = curb_target - _minutes(risk_adjusted_minutes(curb_range, risk))
        stages.insert(0, TimelineStage(
            id="arrival",
            label="Airport Arrival",
            icon="map-pin",
            start_time=curb_start,
            end_time=curb_target,
            duration_range=curb_range,
            note="Curbside to terminal entrance",
        ))

        # Getting there
        if inputs.is_rideshare:
            transport = self._rideshare_stages(inputs, profile, conditions, is_holiday, curb_start, risk)
        else:
            transport = self._car_stages(inputs, profile, conditions, is_holiday, curb_start, risk)
        stages[0:0] = transport

        leave_time = stages[0].start_time
        is_leave_now = leave_time <= now

        total_min = sum(stage.duration_range.min for stage in stages)
        total_max = sum(stage.duration_range.max for stage in stages)

        stress_margin = round_half_up(
            (boarding.start_time - gate.end_time).total_seconds() / 60
        )

        result = TimelineResult(
            stages=stages,
            leave_time=now if is_leave_now else leave_time,
            leave_time_range=TimeRange(min=total_min, max=total_max),
            leave_time_window=LeaveTimeWindow(
                earliest=departure - _minutes(total_max),
                latest=departure - _minutes(total_min),
            ),
            confidence=self.classify_confidence(inputs, conditions),
            airport_profile=profile,
            is_airport_estimate=is_estimate,
            is_leave_now=is_leave_now,
            travel_conditions=conditions,
            stress_margin=stress_margin,
            stress_level=self.classify_stress(stress_margin),
        )

        logger.debug(
            "Timeline for %s at %s: leave %s (%d stages, %s)",
            profile.code,
            departure.isoformat(),
            result.leave_time.isoformat(),
            len(stages),
            result.confidence.value,
        )
        return result

    def _gate_stage(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        boarding_start: datetime,
        risk: float
    ) -> TimelineStage:
        buffer_range = (
            self.GATE_BUFFER_INTERNATIONAL if inputs.is_international
            else self.GATE_BUFFER_DOMESTIC
        )
        gate_arrival = boarding_start - _minutes(risk_adjusted_minutes(buffer_range, risk))

        walk_range = profile.walk
        if inputs.is_international:
            walk_range = TimeRange(
                min=max(self.INTERNATIONAL_WALK_FLOOR.min, walk_range.min),
                max=max(self.INTERNATIONAL_WALK_FLOOR.max, walk_range.max)
            )

        note = f"{format_time_range(walk_range)} walk through terminal"
        if profile.pain_point:
            note = f"{note}. {profile.pain_point}"

        return TimelineStage(
            id="gate",
            label="Gate Arrival",
            icon="door-open",
            start_time=gate_arrival - _minutes(risk_adjusted_minutes(walk_range, risk)),
            end_time=gate_arrival,
            duration_range=walk_range,
            note=note,
        )

    def security_range(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        conditions: TravelConditions
    ) -> TimeRange:
        """
        Security duration range for a traveler at an airport

        A detected holiday scales the lane + airport range; the manual
        holiday bump only applies when nothing was detected. Weather never
        affects security.
        """
        if inputs.has_clear and inputs.has_pre_check:
            base = self.SECURITY_CLEAR_AND_PRECHECK
        elif inputs.has_clear:
            base = self.SECURITY_CLEAR_ONLY
        elif inputs.has_pre_check:
            base = self.SECURITY_PRECHECK_ONLY
        else:
            base = self.SECURITY_STANDARD

        result = add_range(base, profile.security_add)

        if conditions.holiday_impact is not None:
            result = scale_range(result, conditions.holiday_impact.security_multiplier)
        elif inputs.is_holiday:
            result = add_range(result, self.SECURITY_MANUAL_HOLIDAY)

        if inputs.is_family:
            result = add_range(result, self.SECURITY_FAMILY)

        return result

    def _security_stage(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        conditions: TravelConditions,
        end: datetime,
        risk: float
    ) -> TimelineStage:
        security_range = self.security_range(inputs, profile, conditions)

        if inputs.has_pre_check and inputs.has_clear:
            note = "CLEAR + PreCheck: fastest lane available"
        elif inputs.has_pre_check:
            note = "PreCheck: keep shoes on, laptop in bag"
        elif inputs.has_clear:
            note = "CLEAR: biometric skip to front of line"
        else:
            note = "Standard screening: liquids out, shoes off"

        holiday = conditions.holiday_impact
        if holiday is not None:
            note = f"{note}. {holiday.name}: {holiday.description}"

        return TimelineStage(
            id="security",
            label="Security Screening",
            icon="shield-check",
            start_time=end - _minutes(risk_adjusted_minutes(security_range, risk)),
            end_time=end,
            duration_range=security_range,
            note=note,
        )

    def _baggage_stage(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        is_holiday: bool,
        end: datetime,
        risk: float
    ) -> TimelineStage:
        base = self.BAGGAGE_INTERNATIONAL if inputs.is_international else self.BAGGAGE_DOMESTIC
        baggage_range = _with_modifiers(
            add_range(base, profile.baggage_add),
            (is_holiday, self.BAGGAGE_HOLIDAY),
            (inputs.is_family, self.BAGGAGE_FAMILY),
        )

        return TimelineStage(
            id="baggage",
            label="Baggage Check-in",
            icon="luggage",
            start_time=end - _minutes(risk_adjusted_minutes(baggage_range, risk)),
            end_time=end,
            duration_range=baggage_range,
            note=(
                "International bags require extra verification; arrive at counter early"
                if inputs.is_international
                else "Drop bag at counter or use self-service kiosk if available"
            ),
        )

    def _drive_stage(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        conditions: TravelConditions,
        end: datetime
    ) -> TimelineStage:
        base_minutes = (
            inputs.drive_time if inputs.drive_time is not None
            else profile.typical_drive_time
        )
        drive_minutes = round_half_up(base_minutes * conditions.traffic_multiplier)

        if inputs.drive_time is not None:
            note = "Your estimated drive time"
        else:
            note = (
                f"Typical {base_minutes} min from city center—check "
                f"Google/Apple Maps for your route"
            )
        if conditions.traffic_multiplier > 1.0:
            extra = round_half_up((conditions.traffic_multiplier - 1.0) * 100)
            note = f"{note} (+{extra}% for {conditions.rush_hour_severity.value} traffic)"

        return TimelineStage(
            id="drive",
            label="Drive to Airport",
            icon="navigation",
            start_time=end - _minutes(drive_minutes),
            end_time=end,
            duration_range=TimeRange(min=drive_minutes, max=drive_minutes),
            note=note,
        )

    def _rideshare_stages(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        conditions: TravelConditions,
        is_holiday: bool,
        curb_start: datetime,
        risk: float
    ) -> List[TimelineStage]:
        drive = self._drive_stage(inputs, profile, conditions, curb_start)

        airport_add = TimeRange(
            min=max(0, profile.rideshare.min - self.RIDESHARE_BASELINE),
            max=max(0, profile.rideshare.max - self.RIDESHARE_BASELINE)
        )
        pickup_range = _with_modifiers(
            add_range(self.PICKUP_BASE, airport_add),
            (is_holiday, self.PICKUP_HOLIDAY),
            (inputs.is_bad_weather, self.PICKUP_WEATHER),
        )
        pickup_end = drive.start_time
        pickup = TimelineStage(
            id="pickup",
            label="Rideshare Pickup",
            icon="car",
            start_time=pickup_end - _minutes(risk_adjusted_minutes(pickup_range, risk)),
            end_time=pickup_end,
            duration_range=pickup_range,
            note=(
                "Weather delays likely; expect longer wait for driver"
                if inputs.is_bad_weather
                else "Wait time varies; driver matching and arrival"
            ),
        )

        call = TimelineStage(
            id="call",
            label="Call Rideshare",
            icon="smartphone",
            start_time=pickup.start_time - _minutes(risk_adjusted_minutes(self.CALL_RANGE, risk)),
            end_time=pickup.start_time,
            duration_range=self.CALL_RANGE,
            note="Open app and request ride; have address ready",
        )

        return [call, pickup, drive]

    def _car_stages(
        self,
        inputs: FlightInputs,
        profile: AirportProfile,
        conditions: TravelConditions,
        is_holiday: bool,
        curb_start: datetime,
        risk: float
    ) -> List[TimelineStage]:
        airport_add = TimeRange(
            min=max(0, profile.parking.min - self.PARKING_BASELINE),
            max=max(0, profile.parking.max - self.PARKING_BASELINE)
        )
        parking_range = _with_modifiers(
            add_range(self.PARKING_BASE, airport_add),
            (is_holiday, self.PARKING_HOLIDAY),
            (inputs.is_bad_weather, self.PARKING_WEATHER),
        )
        parking = TimelineStage(
            id="parking",
            label="Park & Shuttle",
            icon="car",
            start_time=curb_start - _minutes(risk_adjusted_minutes(parking_range, risk)),
            end_time=curb_start,
            duration_range=parking_range,
            note="Find parking, take shuttle or walk to terminal",
        )

        drive = self._drive_stage(inputs, profile, conditions, parking.start_time)

        leave = TimelineStage(
            id="leave",
            label="Head to Car",
            icon="home",
            start_time=drive.start_time - _minutes(
                risk_adjusted_minutes(self.HEAD_TO_CAR_RANGE, risk)
            ),
            end_time=drive.start_time,
            duration_range=self.HEAD_TO_CAR_RANGE,
            note="Final check: ID, phone, charger, bags",
        )

        return [leave, drive, parking]

    def classify_confidence(self, inputs: FlightInputs, conditions: TravelConditions) -> Confidence:
        """
        Aggregate variance of the whole itinerary

        Counted modifiers: holiday (manual or detected), bad weather, family,
        rush hour.
        """
        holiday = conditions.holiday_impact
        is_holiday = inputs.is_holiday or holiday is not None
        modifier_count = sum([
            is_holiday,
            inputs.is_bad_weather,
            inputs.is_family,
            conditions.is_rush_hour,
        ])

        if (
            modifier_count >= 2
            or (inputs.is_rideshare and inputs.is_bad_weather)
            or (holiday is not None and holiday.severity in self.SEVERE_HOLIDAYS)
        ):
            return Confidence.HIGH_VARIANCE
        if modifier_count == 1:
            return Confidence.RISKY
        return Confidence.NORMAL

    def classify_stress(self, margin: int) -> StressLevel:
        if margin < self.RISKY_MARGIN:
            return StressLevel.RISKY
        if margin < self.TIGHT_MARGIN:
            return StressLevel.TIGHT
        return StressLevel.CALM

    def get_timeline_summary(self, result: TimelineResult) -> dict:
        """
        Generate human-readable headline fields for a result

        Args:
            result: TimelineResult

        Returns:
            Dictionary with formatted leave-by information
        """
        emoji_map = {
            Confidence.NORMAL: "✅",
            Confidence.RISKY: "⚠️",
            Confidence.HIGH_VARIANCE: "🚨",
        }
        confidence_labels = {
            Confidence.NORMAL: "Normal",
            Confidence.RISKY: "Risky",
            Confidence.HIGH_VARIANCE: "High Variance",
        }

        headline = "Leave now" if result.is_leave_now else f"Leave by {format_time(result.leave_time)}"

        return {
            "emoji": emoji_map[result.confidence],
            "headline": headline,
            "leave_by": format_time(result.leave_time),
            "leave_window": format_time_range_display(
                result.leave_time_window.earliest,
                result.leave_time_window.latest
            ),
            "total": format_time_range(result.leave_time_range),
            "confidence": confidence_labels[result.confidence],
            "stress": f"{result.stress_level.value} ({result.stress_margin} min margin)",
            "conditions": get_conditions_description(result.travel_conditions),
            "airport": (
                f"{result.airport_profile.code} (estimated)" if result.is_airport_estimate
                else result.airport_profile.code
            ),
            "pain_point": result.airport_profile.pain_point,
            "stages": [
                f"{format_time_range_display(stage.start_time, stage.end_time)}  {stage.label}"
                for stage in result.stages
            ],
        }


def _with_modifiers(base: TimeRange, *modifiers: Tuple[bool, TimeRange]) -> TimeRange:
    """Add each (enabled, extra) range whose flag is set"""
    result = base
    for enabled, extra in modifiers:
        if enabled:
            result = add_range(result, extra)
    return result


# Singleton engine instance
_engine_instance: Optional[TimelineEngine] = None


def get_timeline_engine() -> TimelineEngine:
    """
    Get singleton timeline engine

    Returns:
        TimelineEngine instance
    """
    global _engine_instance

    if _engine_instance is None:
        _engine_instance = TimelineEngine()

    return _engine_instance


def compute_timeline(inputs: FlightInputs, now: Optional[datetime] = None) -> TimelineResult:
    """
    Compute a leave-by timeline with the shared engine

    Args:
        inputs: Validated traveler request
        now: Reference instant for the leave-now clamp (system clock if omitted)

    Returns:
        TimelineResult
    """
    return get_timeline_engine().compute(inputs, now=now)


if __name__ == "__main__":
    # Walk through a sample itinerary
    print("🧪 Testing Timeline Engine\n")
    print("=" * 60)

    sample = FlightInputs(
        departure_datetime=datetime.now().replace(second=0, microsecond=0) + timedelta(hours=6),
        trip_type="domestic",
        has_pre_check=True,
        airport="ATL",
        transport_type="rideshare",
        risk_preference="balanced",
    )

    engine = TimelineEngine()
    timeline = engine.compute(sample)
    summary = engine.get_timeline_summary(timeline)

    print(f"Airport: {summary['airport']}")
    print(f"\n{summary['emoji']} {summary['headline']}")
    print(f"Window: {summary['leave_window']} ({summary['total']} total)")
    print(f"Confidence: {summary['confidence']}")
    print(f"Stress: {summary['stress']}")
    print(f"Conditions: {summary['conditions']}")
    print("\nStages:")
    for line in summary["stages"]:
        print(f"  • {line}")

    print("\n✅ Timeline engine working successfully!")
