"""Sunrise and sunset times from the USNO "Almanac for Computers" (1990).

The almanac method is a closed-form approximation: it needs no ephemeris and
works entirely in degrees. Every trigonometric call goes through the
``*_deg`` helpers below so the radian conversion happens in exactly one place.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

__all__ = [
    "ASTRONOMICAL_ZENITH",
    "CIVIL_ZENITH",
    "NAUTICAL_ZENITH",
    "OFFICIAL_ZENITH",
    "ZENITH_ANGLES",
    "EventKind",
    "EventTime",
    "GeometryError",
    "NoEvent",
    "SolarEvent",
    "compute_local_event_time",
    "day_of_year",
    "normalize",
]

OFFICIAL_ZENITH = 90.833  # 90 degrees 50 minutes
CIVIL_ZENITH = 96.0
NAUTICAL_ZENITH = 102.0
ASTRONOMICAL_ZENITH = 108.0

ZENITH_ANGLES: Dict[str, float] = {
    "official": OFFICIAL_ZENITH,
    "civil": CIVIL_ZENITH,
    "nautical": NAUTICAL_ZENITH,
    "astronomical": ASTRONOMICAL_ZENITH,
}

_DEG = math.pi / 180.0


class GeometryError(ValueError):
    """Raised when the inputs leave the hour angle undefined."""


class EventKind(str, Enum):
    """Which crossing of the zenith threshold to compute."""

    sunrise = "sunrise"
    sunset = "sunset"


@dataclass(frozen=True)
class EventTime:
    """A defined event time, in fractional hours."""

    local_hours: float
    utc_hours: float


@dataclass(frozen=True)
class NoEvent:
    """The sun does not cross the zenith threshold on the requested date."""

    kind: EventKind
    reason: str
    cos_hour_angle: float


SolarEvent = Union[EventTime, NoEvent]


def sin_deg(x: float) -> float:
    return math.sin(x * _DEG)


def cos_deg(x: float) -> float:
    return math.cos(x * _DEG)


def tan_deg(x: float) -> float:
    return math.tan(x * _DEG)


def asin_deg(x: float) -> float:
    return math.asin(x) / _DEG


def acos_deg(x: float) -> float:
    return math.acos(x) / _DEG


def atan_deg(x: float) -> float:
    return math.atan(x) / _DEG


def normalize(value: float, lo: float, hi: float) -> float:
    """Reduce *value* into ``[lo, hi)`` with a true (floored) modulo."""

    span = hi - lo
    offset = (value - lo) % span
    # Tiny negative inputs round up to exactly ``span``.
    if offset >= span:
        offset = 0.0
    return lo + offset


def day_of_year(year: int, month: int, day: int) -> int:
    """Almanac day ordinal; leap years are handled only through ``N3``."""

    n1 = math.floor(275 * month / 9)
    n2 = math.floor((month + 9) / 12)
    n3 = 1 + math.floor((year - 4 * math.floor(year / 4) + 2) / 3)
    return n1 - (n2 * n3) + day - 30


def _check_inputs(
    year: int, month: int, day: int, latitude: float, longitude: float, zenith: float
) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be within 1..12, got {month}")
    days_in_month = calendar.monthrange(year, month)[1]
    if not 1 <= day <= days_in_month:
        raise ValueError(f"day must be within 1..{days_in_month} for {year}-{month:02d}, got {day}")
    if not -90.0 < latitude < 90.0:
        raise GeometryError(f"latitude must be strictly between -90 and 90 degrees, got {latitude}")
    if not 0.0 < zenith < 180.0:
        raise GeometryError(f"zenith must be strictly between 0 and 180 degrees, got {zenith}")
    if not math.isfinite(longitude):
        raise GeometryError(f"longitude must be a finite number of degrees, got {longitude}")


def compute_local_event_time(
    year: int,
    month: int,
    day: int,
    local_offset_hours: float,
    latitude: float,
    longitude: float,
    zenith: float,
    kind: Union[EventKind, str],
) -> SolarEvent:
    """Compute the local clock time of a sunrise or sunset.

    Parameters
    ----------
    year, month, day:
        Proleptic Gregorian calendar date.
    local_offset_hours:
        Fixed UTC offset added to the result.
    latitude, longitude:
        Geographic coordinates in degrees (east-positive longitude).
    zenith:
        Sun zenith angle defining the event, see :data:`ZENITH_ANGLES`.
    kind:
        :class:`EventKind` or its string value.

    Returns
    -------
    EventTime or NoEvent
        ``EventTime.local_hours`` is not folded back into ``[0, 24)``; values
        outside that range fall on the adjacent calendar date.

    Raises
    ------
    ValueError
        If the date is invalid.
    GeometryError
        If latitude or zenith are outside their open ranges, or longitude
        is not finite.
    """

    kind = EventKind(kind)
    _check_inputs(year, month, day, latitude, longitude, zenith)
    rising = kind is EventKind.sunrise

    n = day_of_year(year, month, day)

    lng_hour = longitude / 15.0
    t = n + (((6.0 if rising else 18.0) - lng_hour) / 24.0)

    mean_anomaly = (0.9856 * t) - 3.289

    true_lng = normalize(
        mean_anomaly
        + (1.916 * sin_deg(mean_anomaly))
        + (0.020 * sin_deg(2 * mean_anomaly))
        + 282.634,
        0.0,
        360.0,
    )

    right_ascension = normalize(atan_deg(0.91764 * tan_deg(true_lng)), 0.0, 360.0)
    # Same quadrant as the true longitude.
    right_ascension += 90.0 * math.floor(true_lng / 90.0) - 90.0 * math.floor(right_ascension / 90.0)
    right_ascension /= 15.0

    sin_dec = 0.39782 * sin_deg(true_lng)
    cos_dec = cos_deg(asin_deg(sin_dec))

    cos_h = (cos_deg(zenith) - (sin_dec * sin_deg(latitude))) / (cos_dec * cos_deg(latitude))
    if cos_h > 1.0 or cos_h < -1.0:
        reason = "polar_night" if cos_h > 1.0 else "polar_day"
        return NoEvent(kind=kind, reason=reason, cos_hour_angle=cos_h)

    hour_angle = 360.0 - acos_deg(cos_h) if rising else acos_deg(cos_h)
    hour_angle /= 15.0

    local_mean = hour_angle + right_ascension - (0.06571 * t) - 6.622

    utc_hours = normalize(local_mean - lng_hour, 0.0, 24.0)
    return EventTime(local_hours=utc_hours + local_offset_hours, utc_hours=utc_hours)
