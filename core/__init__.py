"""Core almanac utilities for the Riseset API."""

from .almanac import (
    ZENITH_ANGLES,
    EventKind,
    EventTime,
    GeometryError,
    NoEvent,
    compute_local_event_time,
)
from .astro import TWILIGHT_ANGLES, compute_sun_times

__all__ = [
    "compute_local_event_time",
    "compute_sun_times",
    "EventKind",
    "EventTime",
    "GeometryError",
    "NoEvent",
    "TWILIGHT_ANGLES",
    "ZENITH_ANGLES",
]
