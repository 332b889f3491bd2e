"""
Timeline engine: backward scheduling, modifiers, confidence and stress
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from jetsweep.models.airport import TimeRange
from jetsweep.models.timeline import Confidence, StressLevel
from jetsweep.services.timeline import (
    TimelineEngine,
    compute_timeline,
    format_time,
    format_time_range,
    risk_adjusted_minutes,
    round_half_up
)


def at(hour, minute, day=14):
    return datetime(2025, 10, day, hour, minute)


def assert_chain(result):
    """
    Stages are chronological and gap-free up to the gate; the gap between
    gate and boarding is the stress margin
    """
    for stage in result.stages:
        assert stage.start_time <= stage.end_time, f"{stage.id} ends before it starts"
        assert stage.duration_range.min <= stage.duration_range.max, f"{stage.id} range inverted"
    for current, following in zip(result.stages, result.stages[1:]):
        assert current.start_time < following.start_time, (
            f"{following.id} does not start after {current.id}"
        )
    for current, following in zip(result.stages[:-2], result.stages[1:-1]):
        assert current.end_time == following.start_time, (
            f"gap between {current.id} and {following.id}"
        )

    gate, boarding = result.stages[-2], result.stages[-1]
    assert (gate.id, boarding.id) == ("gate", "boarding")
    assert boarding.start_time - gate.end_time == timedelta(minutes=result.stress_margin)


# --- helpers ----------------------------------------------------------------

@pytest.mark.parametrize("value,expected", [(0.5, 1), (1.49, 1), (2.5, 3), (22.5, 23), (47.25, 47)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize("multiplier,expected", [(1.0, 25), (0.75, 23), (0.5, 20)])
def test_risk_adjusted_minutes(multiplier, expected):
    assert risk_adjusted_minutes(TimeRange(min=15, max=25), multiplier) == expected


def test_display_formatting():
    assert format_time_range(TimeRange(min=15, max=25)) == "15–25 min"
    assert format_time_range(TimeRange(min=35, max=35)) == "35 min"
    assert format_time(datetime(2025, 10, 14, 14, 5)) == "2:05 PM"
    assert format_time(datetime(2025, 10, 14, 0, 30)) == "12:30 AM"
    assert format_time(datetime(2025, 10, 14, 12, 0)) == "12:00 PM"


# --- full itineraries -------------------------------------------------------

def test_domestic_precheck_rideshare_at_atl(make_inputs, reference_now):
    """Quiet Tuesday noon flight out of ATL"""
    result = compute_timeline(make_inputs(), now=reference_now)

    assert result.stage_ids == [
        "call", "pickup", "drive", "arrival", "security", "gate", "boarding"
    ]
    assert_chain(result)

    boarding = result.get_stage("boarding")
    assert (boarding.start_time, boarding.end_time) == (at(11, 20), at(11, 40))

    gate = result.get_stage("gate")
    assert (gate.start_time, gate.end_time) == (at(10, 29), at(10, 57))
    assert gate.note == "20–30 min walk through terminal. Train waits and sheer distance quietly add time."

    security = result.get_stage("security")
    assert security.duration_range == TimeRange(min=30, max=50)
    assert (security.start_time, security.end_time) == (at(9, 44), at(10, 29))
    assert security.note == "PreCheck: keep shoes on, laptop in bag"

    arrival = result.get_stage("arrival")
    assert arrival.duration_range == TimeRange(min=20, max=30)
    assert arrival.start_time == at(9, 16)

    drive = result.get_stage("drive")
    assert drive.duration_range == TimeRange(min=35, max=35)
    assert drive.start_time == at(8, 41)
    assert "(+" not in drive.note

    pickup = result.get_stage("pickup")
    assert pickup.duration_range == TimeRange(min=27, max=49)
    assert pickup.start_time == at(7, 57)

    call = result.get_stage("call")
    assert call.start_time == at(7, 53)

    assert result.leave_time == at(7, 53)
    assert result.is_leave_now is False
    assert result.leave_time_range == TimeRange(min=149, max=219)
    assert result.leave_time_window.earliest == at(8, 21)
    assert result.leave_time_window.latest == at(9, 31)
    assert result.stress_margin == 23
    assert result.stress_level == StressLevel.TIGHT
    assert result.confidence == Confidence.NORMAL
    assert result.is_airport_estimate is False
    assert result.get_stage("baggage") is None


def test_international_family_car_with_bag_in_bad_weather(make_inputs, reference_now):
    """Every optional stage at an unknown airport"""
    result = compute_timeline(
        make_inputs(
            trip_type="international",
            has_pre_check=False,
            has_checked_bag=True,
            is_bad_weather=True,
            group_type="family",
            transport_type="car",
            airport="XYZ123",
        ),
        now=reference_now,
    )

    assert result.stage_ids == [
        "leave", "drive", "parking", "arrival", "baggage", "security", "gate", "boarding"
    ]
    assert_chain(result)

    assert result.airport_profile.code == "XYZ"
    assert result.is_airport_estimate is True

    assert result.get_stage("boarding").start_time == at(11, 10)

    gate = result.get_stage("gate")
    assert gate.duration_range == TimeRange(min=15, max=25), "international walk floor"
    assert (gate.start_time, gate.end_time) == (at(10, 19), at(10, 42))

    security = result.get_stage("security")
    assert security.duration_range == TimeRange(min=35, max=75)
    assert security.start_time == at(9, 14)

    baggage = result.get_stage("baggage")
    assert baggage.duration_range == TimeRange(min=40, max=75)
    assert baggage.start_time == at(8, 8)
    assert baggage.note.startswith("International bags")

    assert result.get_stage("arrival").start_time == at(7, 55)

    parking = result.get_stage("parking")
    assert parking.duration_range == TimeRange(min=25, max=55)
    assert parking.start_time == at(7, 7)

    assert result.get_stage("drive").start_time == at(6, 52)
    assert result.leave_time == at(6, 47)
    assert result.confidence == Confidence.HIGH_VARIANCE
    assert result.stress_margin == 28
    assert result.stress_level == StressLevel.CALM


def test_christmas_day_shrinks_security(make_inputs, reference_now):
    result = compute_timeline(
        make_inputs(departure_datetime=datetime(2025, 12, 25, 10, 0), has_pre_check=False),
        now=reference_now,
    )

    security = result.get_stage("security")
    assert security.duration_range == TimeRange(min=38, max=64)
    assert "Christmas Day: " in security.note
    assert result.travel_conditions.holiday_impact.name == "Christmas Day"
    assert result.confidence == Confidence.RISKY


def test_christmas_rush_scales_security_and_is_high_variance(make_inputs, reference_now):
    result = compute_timeline(
        make_inputs(departure_datetime=datetime(2025, 12, 20, 10, 0), has_pre_check=False),
        now=reference_now,
    )

    assert result.get_stage("security").duration_range == TimeRange(min=61, max=101)
    assert result.confidence == Confidence.HIGH_VARIANCE


# --- modifiers --------------------------------------------------------------

def test_manual_holiday_adds_fixed_buffers(make_inputs, reference_now):
    result = compute_timeline(make_inputs(is_holiday=True), now=reference_now)

    assert result.get_stage("security").duration_range == TimeRange(min=40, max=70)
    assert result.get_stage("pickup").duration_range == TimeRange(min=32, max=59)
    assert result.travel_conditions.holiday_impact is None
    assert result.confidence == Confidence.RISKY


def test_detected_holiday_ignores_manual_security_bump(make_inputs, reference_now):
    detected = make_inputs(departure_datetime=datetime(2025, 12, 20, 10, 0))
    both = make_inputs(departure_datetime=datetime(2025, 12, 20, 10, 0), is_holiday=True)

    assert (
        compute_timeline(detected, now=reference_now).get_stage("security").duration_range
        == compute_timeline(both, now=reference_now).get_stage("security").duration_range
    )


def test_detected_holiday_applies_pickup_and_parking_buffers(make_inputs, reference_now):
    rideshare = compute_timeline(
        make_inputs(departure_datetime=datetime(2025, 12, 20, 10, 0)), now=reference_now
    )
    car = compute_timeline(
        make_inputs(departure_datetime=datetime(2025, 12, 20, 10, 0), transport_type="car"),
        now=reference_now,
    )

    assert rideshare.get_stage("pickup").duration_range == TimeRange(min=32, max=59)
    # base 15-30, MEGA parking adds 5-15 over baseline, holiday adds 5-15
    assert car.get_stage("parking").duration_range == TimeRange(min=25, max=60)


def test_family_adds_security_time(make_inputs, reference_now):
    result = compute_timeline(make_inputs(group_type="family"), now=reference_now)

    assert result.get_stage("security").duration_range == TimeRange(min=35, max=65)
    assert result.confidence == Confidence.RISKY


def test_bad_weather_with_rideshare_is_high_variance(make_inputs, reference_now):
    result = compute_timeline(make_inputs(is_bad_weather=True), now=reference_now)

    pickup = result.get_stage("pickup")
    assert pickup.duration_range == TimeRange(min=37, max=69)
    assert pickup.note.startswith("Weather delays likely")
    assert result.get_stage("security").duration_range == TimeRange(min=30, max=50), (
        "weather never touches security"
    )
    assert result.confidence == Confidence.HIGH_VARIANCE


def test_bad_weather_by_car_is_only_risky(make_inputs, reference_now):
    result = compute_timeline(
        make_inputs(is_bad_weather=True, transport_type="car"), now=reference_now
    )
    assert result.confidence == Confidence.RISKY


def test_rush_hour_stretches_drive(make_inputs, reference_now):
    result = compute_timeline(
        make_inputs(departure_datetime=at(17, 0)), now=reference_now
    )

    drive = result.get_stage("drive")
    assert drive.duration_range == TimeRange(min=47, max=47)
    assert drive.note.endswith("(+35% for heavy traffic)")
    assert result.travel_conditions.is_rush_hour is True
    assert result.confidence == Confidence.RISKY


def test_user_drive_time_replaces_typical_drive(make_inputs, reference_now):
    result = compute_timeline(make_inputs(drive_time=50), now=reference_now)

    drive = result.get_stage("drive")
    assert drive.duration_range == TimeRange(min=50, max=50)
    assert drive.note == "Your estimated drive time"


@pytest.mark.parametrize("has_pre_check,has_clear,expected", [
    (True, True, TimeRange(min=25, max=45)),
    (False, True, TimeRange(min=35, max=60)),
    (True, False, TimeRange(min=30, max=50)),
    (False, False, TimeRange(min=45, max=75)),
])
def test_security_lane_ranges(make_inputs, reference_now, has_pre_check, has_clear, expected):
    result = compute_timeline(
        make_inputs(has_pre_check=has_pre_check, has_clear=has_clear), now=reference_now
    )
    assert result.get_stage("security").duration_range == expected


def test_international_walk_keeps_longer_airport_walk(make_inputs, reference_now):
    result = compute_timeline(
        make_inputs(trip_type="international", airport="ORD"), now=reference_now
    )
    # ORD walk is 15-30, floor is 15-25
    assert result.get_stage("gate").duration_range == TimeRange(min=15, max=30)


def test_no_airport_uses_generic_profile(make_inputs, reference_now):
    result = compute_timeline(make_inputs(airport=None), now=reference_now)

    assert result.airport_profile.code == "GEN"
    assert result.is_airport_estimate is True
    assert result.get_stage("gate").note == "5–12 min walk through terminal"


# --- invariants -------------------------------------------------------------

FLAG_NAMES = ("has_pre_check", "has_clear", "has_checked_bag", "is_holiday", "is_bad_weather")


@pytest.mark.parametrize("airport", ["ATL", "LAX", "DEN", "CLT", "OTHER_REGIONAL", "XYZ123"])
@pytest.mark.parametrize("departure", [
    datetime(2025, 10, 14, 12, 0),
    datetime(2025, 11, 24, 8, 0),
    datetime(2025, 12, 25, 17, 0),
])
def test_invariants_hold_for_every_input_combination(make_inputs, reference_now, airport, departure):
    """Ranges sum up, stages chain, and there are always 7 or 8 of them"""
    combos = itertools.product(
        itertools.product([False, True], repeat=len(FLAG_NAMES)),
        ["domestic", "international"],
        ["solo", "family"],
        ["rideshare", "car"],
        ["early", "balanced", "risky"],
    )
    for flags, trip_type, group_type, transport_type, risk_preference in combos:
        inputs = make_inputs(
            departure_datetime=departure,
            airport=airport,
            trip_type=trip_type,
            group_type=group_type,
            transport_type=transport_type,
            risk_preference=risk_preference,
            **dict(zip(FLAG_NAMES, flags)),
        )
        result = compute_timeline(inputs, now=reference_now)
        label = str(inputs.model_dump(mode="json"))

        assert len(result.stages) == (8 if inputs.has_checked_bag else 7), label
        assert result.leave_time_range == TimeRange(
            min=sum(stage.duration_range.min for stage in result.stages),
            max=sum(stage.duration_range.max for stage in result.stages),
        ), label
        boarding_offset = (
            TimelineEngine.BOARDING_OFFSET_INTERNATIONAL if inputs.is_international
            else TimelineEngine.BOARDING_OFFSET_DOMESTIC
        )
        assert result.stages[-1].start_time == departure - timedelta(minutes=boarding_offset), label
        assert_chain(result)


def test_riskier_preference_never_leaves_earlier(make_inputs, reference_now):
    leave = {
        preference: compute_timeline(
            make_inputs(risk_preference=preference, has_checked_bag=True, transport_type="car"),
            now=reference_now,
        ).leave_time
        for preference in ("early", "balanced", "risky")
    }
    assert leave["early"] <= leave["balanced"] <= leave["risky"]


def test_ranges_do_not_depend_on_risk_preference(make_inputs, reference_now):
    early = compute_timeline(make_inputs(risk_preference="early"), now=reference_now)
    risky = compute_timeline(make_inputs(risk_preference="risky"), now=reference_now)

    assert early.leave_time_range == risky.leave_time_range
    assert [s.duration_range for s in early.stages] == [s.duration_range for s in risky.stages]


def test_early_preference_places_every_stage_at_its_max(make_inputs, reference_now):
    result = compute_timeline(make_inputs(risk_preference="early"), now=reference_now)

    for stage in result.stages:
        if stage.id == "boarding":
            continue
        assert stage.duration_minutes == stage.duration_range.max, stage.id


def test_window_brackets_total_range(make_inputs, reference_now):
    inputs = make_inputs(has_checked_bag=True)
    result = compute_timeline(inputs, now=reference_now)
    departure = inputs.departure_datetime

    assert departure - result.leave_time_window.earliest == timedelta(minutes=result.leave_time_range.max)
    assert departure - result.leave_time_window.latest == timedelta(minutes=result.leave_time_range.min)
    assert result.leave_time_window.earliest <= result.leave_time_window.latest


def test_compute_is_deterministic(make_inputs, reference_now):
    inputs = make_inputs(has_checked_bag=True, is_bad_weather=True)
    assert compute_timeline(inputs, now=reference_now) == compute_timeline(inputs, now=reference_now)


def test_leave_now_clamps_leave_time_only(make_inputs):
    now = at(9, 0)
    result = compute_timeline(make_inputs(), now=now)

    assert result.is_leave_now is True
    assert result.leave_time == now
    assert result.stages[0].start_time == at(7, 53), "stage times are not rewritten"


def test_flight_about_to_depart_means_leave_now(make_inputs, reference_now):
    inputs = make_inputs(departure_datetime=reference_now + timedelta(minutes=5))
    result = compute_timeline(inputs, now=reference_now)

    assert result.is_leave_now is True
    assert result.leave_time == reference_now
    assert result.stages[-1].end_time == reference_now - timedelta(minutes=15)


def test_leave_now_when_exactly_on_time(make_inputs):
    result = compute_timeline(make_inputs(), now=at(7, 53))
    assert result.is_leave_now is True


def test_timezone_aware_departure(make_inputs):
    tz = timezone(timedelta(hours=-4))
    inputs = make_inputs(departure_datetime=datetime(2025, 10, 14, 12, 0, tzinfo=tz))
    result = compute_timeline(inputs, now=datetime(2025, 10, 14, 6, 0, tzinfo=tz))

    assert result.leave_time == datetime(2025, 10, 14, 7, 53, tzinfo=tz)
    assert result.leave_time.tzinfo == tz


# --- classification ---------------------------------------------------------

@pytest.mark.parametrize("margin,expected", [
    (-5, StressLevel.RISKY),
    (9, StressLevel.RISKY),
    (10, StressLevel.TIGHT),
    (24, StressLevel.TIGHT),
    (25, StressLevel.CALM),
    (40, StressLevel.CALM),
])
def test_classify_stress(margin, expected):
    assert TimelineEngine().classify_stress(margin) == expected


def test_timeline_summary(make_inputs, reference_now):
    engine = TimelineEngine()
    summary = engine.get_timeline_summary(engine.compute(make_inputs(), now=reference_now))

    assert summary["headline"] == "Leave by 7:53 AM"
    assert summary["leave_window"] == "8:21 AM – 9:31 AM"
    assert summary["total"] == "149–219 min"
    assert summary["confidence"] == "Normal"
    assert summary["stress"] == "TIGHT (23 min margin)"
    assert summary["conditions"] == "Normal conditions"
    assert summary["airport"] == "ATL"
    assert summary["stages"][0] == "7:53 AM – 7:57 AM  Call Rideshare"


def test_timeline_summary_for_leave_now_and_estimates(make_inputs):
    engine = TimelineEngine()
    summary = engine.get_timeline_summary(
        engine.compute(make_inputs(airport="XYZ123"), now=at(11, 0))
    )

    assert summary["headline"] == "Leave now"
    assert summary["airport"] == "XYZ (estimated)"
    assert summary["pain_point"] is None
