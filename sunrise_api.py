"""FastAPI application exposing almanac sunrise and sunset computations."""

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.almanac import EventTime, compute_local_event_time
from core.astro import TWILIGHT_ANGLES, compute_sun_times, hours_to_clock, zenith_for
from core.settings import SettingsError, resolve_settings
from models import (
    ErrorResponse,
    EventQueryParams,
    EventResponse,
    HealthResponse,
    SunQueryParams,
    SunResponse,
    Twilight,
    event_query,
    sun_query,
)

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("sunrise-api")

APP_DESCRIPTION = (
    "Sunrise and sunset calculations using the USNO Almanac for Computers (1990)"
)
SOURCE = "USNO-1990"

try:
    SETTINGS = resolve_settings()
except SettingsError as exc:
    LOGGER.error(json.dumps({"event": "settings_invalid", "error": str(exc)}))
    raise
logging.getLogger().setLevel(SETTINGS.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - exercised in integration tests
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "default_twilight": SETTINGS.default_twilight,
                "cors_origins": list(SETTINGS.cors_origins),
            }
        )
    )
    yield


app = FastAPI(
    title="Riseset API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials="*" not in SETTINGS.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _format_local(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


def _resolve_twilight(params: SunQueryParams) -> Optional[Twilight]:
    if params.zenith is not None:
        return params.twilight
    return params.twilight or Twilight(SETTINGS.default_twilight)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, source=SOURCE, zenith_angles=TWILIGHT_ANGLES)


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def sun_endpoint(params: SunQueryParams = Depends(sun_query)) -> SunResponse:
    start_time = time.perf_counter()
    twilight = _resolve_twilight(params)
    try:
        result = compute_sun_times(
            date_local=params.date_local,
            lat=params.lat,
            lon=params.lon,
            offset_hours=params.offset_hours,
            twilight=twilight.value if twilight else SETTINGS.default_twilight,
            zenith=params.zenith,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        status=result["status"],
        date_local=params.date_local,
        latitude=params.lat,
        longitude=params.lon,
        twilight=twilight,
        zenith=result["zenith"],
        offset_hours=params.offset_hours,
        sunrise_hours=result["sunrise_hours"],
        sunset_hours=result["sunset_hours"],
        sunrise_local=_format_local(result["sunrise"]),
        sunset_local=_format_local(result["sunset"]),
        sunrise_utc=_format_utc(result["sunrise"]),
        sunset_utc=_format_utc(result["sunset"]),
        day_length_hours=result["day_length_hours"],
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.date_local.isoformat(),
                "zenith": response.zenith,
                "status": response.status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get(
    "/sun/event",
    response_model=EventResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def event_endpoint(params: EventQueryParams = Depends(event_query)) -> EventResponse:
    twilight = _resolve_twilight(params)
    try:
        zenith = zenith_for(
            twilight.value if twilight else SETTINGS.default_twilight, params.zenith
        )
        result = compute_local_event_time(
            params.date_local.year,
            params.date_local.month,
            params.date_local.day,
            params.offset_hours,
            params.lat,
            params.lon,
            zenith,
            params.event,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if isinstance(result, EventTime):
        response = EventResponse(
            event=params.event,
            status="ok",
            zenith=zenith,
            local_hours=result.local_hours,
            utc_hours=result.utc_hours,
            clock=hours_to_clock(result.local_hours),
        )
    else:
        response = EventResponse(event=params.event, status=result.reason, zenith=zenith)

    LOGGER.info(
        json.dumps(
            {
                "event": "sun_event",
                "kind": params.event.value,
                "lat": params.lat,
                "lon": params.lon,
                "date": params.date_local.isoformat(),
                "zenith": zenith,
                "status": response.status,
            }
        )
    )
    return response
