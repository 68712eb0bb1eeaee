"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Dict, Literal, Optional

from fastapi import Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from core.almanac import EventKind


class Twilight(str, Enum):
    """Enumeration of supported twilight definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class SunQueryParams(BaseModel):
    """Validated query parameters for the ``/sun`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., description="Latitude in degrees")
    lon: float = Field(..., description="Longitude in degrees")
    date_local: date = Field(..., alias="date", description="Local calendar date (YYYY-MM-DD)")
    offset_hours: float = Field(
        0.0, description="Fixed UTC offset in hours of the local clock"
    )
    twilight: Optional[Twilight] = Field(None, description="Twilight definition")
    zenith: Optional[float] = Field(
        None, description="Explicit sun zenith angle in degrees"
    )


class EventQueryParams(SunQueryParams):
    """Query parameters for the single-event ``/sun/event`` endpoint."""

    event: EventKind = Field(EventKind.sunrise, description="Event to compute")


def sun_query(
    lat: Annotated[float, Query(gt=-90.0, lt=90.0, description="Latitude in degrees")],
    lon: Annotated[float, Query(ge=-180.0, le=180.0, description="Longitude in degrees")],
    date_local: Annotated[date, Query(alias="date", description="Local calendar date")],
    offset_hours: Annotated[
        float, Query(gt=-24.0, lt=24.0, description="Fixed UTC offset in hours")
    ] = 0.0,
    twilight: Annotated[Optional[Twilight], Query()] = None,
    zenith: Annotated[Optional[float], Query(gt=0.0, lt=180.0)] = None,
) -> SunQueryParams:
    return SunQueryParams(
        lat=lat,
        lon=lon,
        date_local=date_local,
        offset_hours=offset_hours,
        twilight=twilight,
        zenith=zenith,
    )


def event_query(
    params: Annotated[SunQueryParams, Depends(sun_query)],
    event: Annotated[EventKind, Query(description="Event to compute")] = EventKind.sunrise,
) -> EventQueryParams:
    return EventQueryParams(**params.model_dump(), event=event)


class SunResponse(BaseModel):
    """Successful sunrise/sunset response payload."""

    ok: bool = True
    status: str = Field(..., description="Computation status")
    date_local: date = Field(..., description="Requested local date")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    twilight: Optional[Twilight] = Field(
        None, description="Applied twilight definition, unset for explicit zeniths"
    )
    zenith: float = Field(..., description="Applied sun zenith angle in degrees")
    offset_hours: float = Field(..., description="Fixed UTC offset in hours")
    sunrise_hours: Optional[float] = Field(
        None, description="Raw sunrise local hours; may fall outside [0, 24)"
    )
    sunset_hours: Optional[float] = Field(
        None, description="Raw sunset local hours; may fall outside [0, 24)"
    )
    sunrise_local: Optional[str] = Field(
        None, description="Sunrise in local time (ISO-8601)"
    )
    sunset_local: Optional[str] = Field(
        None, description="Sunset in local time (ISO-8601)"
    )
    sunrise_utc: Optional[str] = Field(
        None, description="Sunrise time in UTC (ISO-8601)"
    )
    sunset_utc: Optional[str] = Field(
        None, description="Sunset time in UTC (ISO-8601)"
    )
    day_length_hours: Optional[float] = Field(
        None, description="Hours between sunrise and sunset"
    )
    source: Literal["USNO-1990"] = Field(
        "USNO-1990", description="Algorithm source identifier"
    )


class EventResponse(BaseModel):
    """Single sunrise or sunset result."""

    ok: bool = True
    event: EventKind
    status: str = Field(..., description="ok, polar_day or polar_night")
    zenith: float
    local_hours: Optional[float] = None
    utc_hours: Optional[float] = None
    clock: Optional[str] = Field(None, description="Local HH:MM")


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    source: str
    zenith_angles: Dict[str, float]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
