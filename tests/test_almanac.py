from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
import pytest

from core.almanac import (
    ASTRONOMICAL_ZENITH,
    CIVIL_ZENITH,
    NAUTICAL_ZENITH,
    OFFICIAL_ZENITH,
    ZENITH_ANGLES,
    EventKind,
    EventTime,
    GeometryError,
    NoEvent,
    acos_deg,
    asin_deg,
    atan_deg,
    compute_local_event_time,
    cos_deg,
    day_of_year,
    normalize,
    sin_deg,
    tan_deg,
)

BEIJING = (39.9042, 116.4074)
GREENWICH = (51.4769, 0.0)
SVALBARD = (78.2232, 15.6469)


def _event(day: date, lat: float, lon: float, kind: EventKind, zenith: float = OFFICIAL_ZENITH, offset: float = 0.0):
    return compute_local_event_time(day.year, day.month, day.day, offset, lat, lon, zenith, kind)


def _days(year: int):
    current = date(year, 1, 1)
    while current.year == year:
        yield current
        current += timedelta(days=1)


def test_zenith_constants():
    assert ZENITH_ANGLES == {
        "official": OFFICIAL_ZENITH,
        "civil": CIVIL_ZENITH,
        "nautical": NAUTICAL_ZENITH,
        "astronomical": ASTRONOMICAL_ZENITH,
    }
    assert OFFICIAL_ZENITH == pytest.approx(90 + 50 / 60, abs=1e-3)


def test_degree_trig_helpers():
    assert sin_deg(30.0) == pytest.approx(0.5)
    assert cos_deg(60.0) == pytest.approx(0.5)
    assert tan_deg(45.0) == pytest.approx(1.0)
    assert asin_deg(0.5) == pytest.approx(30.0)
    assert acos_deg(0.5) == pytest.approx(60.0)
    assert atan_deg(1.0) == pytest.approx(45.0)


@pytest.mark.parametrize("hi", [360.0, 24.0])
def test_normalize_range_and_congruence(hi):
    values = np.concatenate(
        [np.linspace(-1000.0, 1000.0, 4001), [-hi, -1e-20, 0.0, hi - 1e-9, 2 * hi, -2.5 * hi]]
    )
    for value in values:
        result = normalize(float(value), 0.0, hi)
        assert 0.0 <= result < hi
        turns = (float(value) - result) / hi
        assert abs(turns - round(turns)) < 1e-9


def test_normalize_negative_is_true_modulo():
    assert normalize(-30.0, 0.0, 360.0) == pytest.approx(330.0)
    assert normalize(-360.0, 0.0, 360.0) == 0.0
    assert normalize(-1.5, 0.0, 24.0) == pytest.approx(22.5)


@pytest.mark.parametrize(
    "year, month, day, expected",
    [
        (2025, 1, 1, 1),
        (2025, 10, 21, 294),
        (2025, 12, 31, 365),
        (2024, 3, 1, 61),
        (2024, 12, 31, 366),
    ],
)
def test_day_of_year(year, month, day, expected):
    assert day_of_year(year, month, day) == expected


def test_beijing_matches_almanac_reference():
    lat, lon = BEIJING
    sunrise = _event(date(2025, 10, 21), lat, lon, EventKind.sunrise, offset=8.0)
    sunset = _event(date(2025, 10, 21), lat, lon, EventKind.sunset, offset=8.0)
    assert isinstance(sunrise, EventTime)
    assert isinstance(sunset, EventTime)
    # Published: sunrise 06:31, sunset 17:28 (UTC+8).
    assert sunrise.local_hours % 24 == pytest.approx(6 + 31 / 60, abs=2 / 60)
    assert sunset.local_hours == pytest.approx(17 + 28 / 60, abs=2 / 60)


def test_local_hours_are_not_renormalized():
    lat, lon = BEIJING
    sunrise = _event(date(2025, 10, 21), lat, lon, EventKind.sunrise, offset=8.0)
    # UT lands late on the previous UTC evening, so the local value exceeds 24.
    assert 0.0 <= sunrise.utc_hours < 24.0
    assert sunrise.local_hours > 24.0
    assert sunrise.local_hours == pytest.approx(sunrise.utc_hours + 8.0)


def test_sunrise_before_sunset_at_temperate_latitude():
    lat, lon = GREENWICH
    for day in _days(2025):
        sunrise = _event(day, lat, lon, EventKind.sunrise)
        sunset = _event(day, lat, lon, EventKind.sunset)
        assert isinstance(sunrise, EventTime) and isinstance(sunset, EventTime)
        assert sunrise.local_hours < sunset.local_hours


@pytest.mark.parametrize("zenith", list(ZENITH_ANGLES.values()))
def test_equator_always_has_events(zenith):
    for day in _days(2024):
        for kind in EventKind:
            assert isinstance(_event(day, 0.0, 0.0, kind, zenith=zenith), EventTime)


def test_equator_defined_across_zenith_grid():
    for zenith in np.linspace(70.0, 110.0, 41):
        for kind in EventKind:
            result = _event(date(2025, 6, 21), 0.0, 30.0, kind, zenith=float(zenith))
            assert isinstance(result, EventTime)


def test_polar_night_signals_no_sunrise():
    result = _event(date(2025, 12, 21), 78.0, 15.0, EventKind.sunrise)
    assert isinstance(result, NoEvent)
    assert result.kind is EventKind.sunrise
    assert result.reason == "polar_night"
    assert result.cos_hour_angle > 1.0


def test_polar_night_signals_no_sunset():
    result = _event(date(2025, 12, 21), 78.0, 15.0, EventKind.sunset)
    assert isinstance(result, NoEvent)
    assert result.reason == "polar_night"


@pytest.mark.parametrize("kind", list(EventKind))
def test_polar_day_signals_no_event(kind):
    lat, lon = SVALBARD
    result = _event(date(2025, 6, 21), lat, lon, kind, zenith=CIVIL_ZENITH)
    assert isinstance(result, NoEvent)
    assert result.reason == "polar_day"
    assert result.cos_hour_angle < -1.0


def test_no_event_emits_no_log_records(caplog):
    caplog.set_level(logging.DEBUG)
    result = _event(date(2025, 12, 21), 78.0, 15.0, EventKind.sunrise)
    assert isinstance(result, NoEvent)
    assert caplog.records == []


@pytest.mark.parametrize("delta", [-12.0, -3.5, 0.0, 5.75, 14.0])
def test_offset_shift_is_additive(delta):
    lat, lon = BEIJING
    for kind in EventKind:
        base = _event(date(2025, 3, 14), lat, lon, kind, offset=0.0)
        shifted = _event(date(2025, 3, 14), lat, lon, kind, offset=delta)
        assert shifted.utc_hours == base.utc_hours
        assert shifted.local_hours - base.local_hours == pytest.approx(delta, abs=1e-9)


def test_string_kind_accepted():
    lat, lon = GREENWICH
    by_name = _event(date(2025, 4, 1), lat, lon, "sunset")
    by_enum = _event(date(2025, 4, 1), lat, lon, EventKind.sunset)
    assert by_name == by_enum


def test_deterministic():
    lat, lon = BEIJING
    first = _event(date(2025, 8, 8), lat, lon, EventKind.sunrise, zenith=NAUTICAL_ZENITH)
    second = _event(date(2025, 8, 8), lat, lon, EventKind.sunrise, zenith=NAUTICAL_ZENITH)
    assert first == second


def test_twilight_precedes_official_sunrise():
    lat, lon = GREENWICH
    day = date(2025, 3, 20)
    times = [
        _event(day, lat, lon, EventKind.sunrise, zenith=zenith).local_hours
        for zenith in (ASTRONOMICAL_ZENITH, NAUTICAL_ZENITH, CIVIL_ZENITH, OFFICIAL_ZENITH)
    ]
    assert times == sorted(times)


@pytest.mark.parametrize("year", [-500, 1, 12000])
def test_year_is_not_range_checked(year):
    result = compute_local_event_time(year, 6, 21, 0.0, 45.0, 0.0, OFFICIAL_ZENITH, EventKind.sunrise)
    assert isinstance(result, EventTime)
    assert math.isfinite(result.local_hours)


@pytest.mark.parametrize("latitude", [90.0, -90.0, 91.0, float("nan")])
def test_poles_raise_geometry_error(latitude):
    with pytest.raises(GeometryError):
        compute_local_event_time(2025, 6, 21, 0.0, latitude, 0.0, OFFICIAL_ZENITH, EventKind.sunrise)


@pytest.mark.parametrize("longitude", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_longitude_raises(longitude):
    for kind in EventKind:
        with pytest.raises(GeometryError):
            compute_local_event_time(2025, 6, 21, 0.0, 45.0, longitude, OFFICIAL_ZENITH, kind)


@pytest.mark.parametrize("zenith", [0.0, 180.0, -5.0])
def test_zenith_out_of_range_raises(zenith):
    with pytest.raises(GeometryError):
        compute_local_event_time(2025, 6, 21, 0.0, 45.0, 0.0, zenith, EventKind.sunset)


@pytest.mark.parametrize("month, day", [(0, 1), (13, 1), (2, 30), (4, 31), (1, 0)])
def test_invalid_date_raises(month, day):
    with pytest.raises(ValueError):
        compute_local_event_time(2025, month, day, 0.0, 45.0, 0.0, OFFICIAL_ZENITH, EventKind.sunrise)


def test_leap_day_accepted():
    result = compute_local_event_time(2024, 2, 29, 0.0, 45.0, 0.0, OFFICIAL_ZENITH, EventKind.sunrise)
    assert isinstance(result, EventTime)


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        compute_local_event_time(2025, 6, 21, 0.0, 45.0, 0.0, OFFICIAL_ZENITH, "noon")
