"""Sunrise and sunset for a calendar date, expressed as clock datetimes."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Optional

from .almanac import (
    ZENITH_ANGLES,
    EventKind,
    EventTime,
    NoEvent,
    SolarEvent,
    compute_local_event_time,
    normalize,
)

__all__ = ["compute_sun_times", "hours_to_clock", "zenith_for", "TWILIGHT_ANGLES"]

LOGGER = logging.getLogger(__name__)

# Twilight selectors accepted by the API, keyed to their zenith angles.
TWILIGHT_ANGLES: Dict[str, float] = dict(ZENITH_ANGLES)


def zenith_for(twilight: str, zenith: Optional[float] = None) -> float:
    """Resolve the zenith angle; an explicit *zenith* overrides *twilight*."""

    if zenith is not None:
        return float(zenith)
    try:
        return TWILIGHT_ANGLES[twilight]
    except KeyError as exc:
        raise ValueError(f"Unsupported twilight selector: {twilight}") from exc


def hours_to_clock(hours: float) -> str:
    """Render fractional hours as ``HH:MM`` on a 24-hour clock."""

    minutes = int(round(normalize(hours, 0.0, 24.0) * 60.0)) % (24 * 60)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _clock_datetime(date_local: date, hours: float, offset_hours: float) -> datetime:
    """Place *hours* on *date_local* in the fixed-offset zone."""

    tz = timezone(timedelta(hours=offset_hours))
    midnight = datetime.combine(date_local, time.min, tzinfo=tz)
    return midnight + timedelta(hours=normalize(hours, 0.0, 24.0))


def _status(sunrise: SolarEvent, sunset: SolarEvent) -> str:
    if isinstance(sunrise, EventTime) and isinstance(sunset, EventTime):
        return "ok"
    if isinstance(sunrise, NoEvent) and isinstance(sunset, NoEvent):
        return sunrise.reason
    return "partial"


def compute_sun_times(
    date_local: date,
    lat: float,
    lon: float,
    offset_hours: float = 0.0,
    twilight: str = "official",
    zenith: Optional[float] = None,
) -> Dict[str, object]:
    """Compute sunrise and sunset for the given local date and location.

    Parameters
    ----------
    date_local:
        Calendar date in the fixed-offset zone.
    lat, lon:
        Geographic coordinates in degrees (east-positive longitude).
    offset_hours:
        Fixed UTC offset of the local clock.
    twilight:
        Twilight definition key, ignored when *zenith* is given.
    zenith:
        Explicit sun zenith angle in degrees.

    Returns
    -------
    dict
        ``sunrise`` and ``sunset`` datetimes (or ``None``), the raw
        ``sunrise_hours``/``sunset_hours`` values, ``zenith``,
        ``day_length_hours`` and ``status``.

    Raises
    ------
    ValueError
        If *offset_hours* is not strictly inside +/-24 hours, the twilight
        key is unknown, or the calculator rejects the inputs.
    """

    if not -24.0 < offset_hours < 24.0:
        raise ValueError(f"offset_hours must be strictly between -24 and 24, got {offset_hours}")
    applied_zenith = zenith_for(twilight, zenith)
    events = {
        kind: compute_local_event_time(
            date_local.year,
            date_local.month,
            date_local.day,
            offset_hours,
            lat,
            lon,
            applied_zenith,
            kind,
        )
        for kind in EventKind
    }
    rise = events[EventKind.sunrise]
    fall = events[EventKind.sunset]

    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    if isinstance(rise, EventTime):
        sunrise = _clock_datetime(date_local, rise.local_hours, offset_hours)
    if isinstance(fall, EventTime):
        sunset = _clock_datetime(date_local, fall.local_hours, offset_hours)

    day_length: Optional[float] = None
    if sunrise is not None and sunset is not None:
        day_length = (sunset - sunrise).total_seconds() / 3600.0
        if day_length < 0:
            day_length += 24.0

    status = _status(rise, fall)
    if status != "ok":
        LOGGER.info(
            json.dumps(
                {
                    "event": "sun_times_incomplete",
                    "date": date_local.isoformat(),
                    "lat": lat,
                    "lon": lon,
                    "zenith": applied_zenith,
                    "status": status,
                    "sunrise_reason": rise.reason if isinstance(rise, NoEvent) else None,
                    "sunset_reason": fall.reason if isinstance(fall, NoEvent) else None,
                }
            )
        )

    return {
        "sunrise": sunrise,
        "sunset": sunset,
        "sunrise_hours": rise.local_hours if isinstance(rise, EventTime) else None,
        "sunset_hours": fall.local_hours if isinstance(fall, EventTime) else None,
        "zenith": applied_zenith,
        "day_length_hours": day_length,
        "status": status,
    }
