"""Environment-driven settings for the Riseset API."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Tuple

from .almanac import ZENITH_ANGLES

LOGGER = logging.getLogger(__name__)

DEFAULT_TWILIGHT = "official"
DEFAULT_CORS_ORIGINS = ("*",)
DEFAULT_LOG_LEVEL = "INFO"


class SettingsError(RuntimeError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    default_twilight: str
    cors_origins: Tuple[str, ...]
    log_level: str


def _parse_origins(raw: str) -> Tuple[str, ...]:
    origins = tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    if not origins:
        raise SettingsError("RISESET_CORS_ORIGINS must list at least one origin")
    return origins


def resolve_settings() -> Settings:
    """Read settings from ``RISESET_*`` environment variables."""

    twilight = os.environ.get("RISESET_DEFAULT_TWILIGHT", DEFAULT_TWILIGHT).strip().lower()
    if twilight not in ZENITH_ANGLES:
        raise SettingsError(
            f"RISESET_DEFAULT_TWILIGHT must be one of {sorted(ZENITH_ANGLES)}, got {twilight!r}"
        )

    raw_origins = os.environ.get("RISESET_CORS_ORIGINS")
    origins = _parse_origins(raw_origins) if raw_origins is not None else DEFAULT_CORS_ORIGINS

    log_level = os.environ.get("RISESET_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise SettingsError(f"RISESET_LOG_LEVEL is not a logging level: {log_level!r}")

    settings = Settings(default_twilight=twilight, cors_origins=origins, log_level=log_level)
    LOGGER.debug(
        json.dumps(
            {
                "event": "settings_resolved",
                "default_twilight": settings.default_twilight,
                "cors_origins": list(settings.cors_origins),
                "log_level": settings.log_level,
            }
        )
    )
    return settings
