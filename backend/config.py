"""Environment-driven settings. Values are read at call time so tests can monkeypatch os.environ."""
from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from engine.pagination import DEFAULT_PROFILE, CapacityProfile

# Load .env from backend directory so DEFAULT_FIRM_ID etc. are available
load_dotenv(Path(__file__).resolve().parent / ".env")

_LOG = logging.getLogger("uvicorn.error")

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]


def version() -> str:
    return (os.environ.get("RENDER_GIT_COMMIT") or "").strip() or "unknown"


def default_firm_id() -> str:
    return (os.environ.get("DEFAULT_FIRM_ID") or "").strip() or "default"


def allowed_origins() -> list[str]:
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if raw:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return list(DEFAULT_ALLOWED_ORIGINS)


def _env_float(name: str, default: float, *, low: float, high: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        _LOG.warning("CONFIG_INVALID name=%s value=%r using=%s", name, raw, default)
        return default
    if not (low <= value <= high):
        _LOG.warning("CONFIG_OUT_OF_RANGE name=%s value=%s using=%s", name, value, default)
        return default
    return value


def capacity_profile() -> CapacityProfile:
    """Default profile with the tunable pagination knobs taken from the environment."""
    return replace(
        DEFAULT_PROFILE,
        high_water_fraction=_env_float(
            "DOCS_HIGH_WATER_FRACTION", DEFAULT_PROFILE.high_water_fraction, low=0.1, high=1.0
        ),
        signature_tolerance=_env_float(
            "DOCS_SIGNATURE_TOLERANCE", DEFAULT_PROFILE.signature_tolerance, low=0.0, high=200.0
        ),
    )
