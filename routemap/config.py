# path: route-map-api/routemap/config.py

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import logging
import math
import os

from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)


DEFAULT_AXIS_TOLERANCE_DEG = 0.1
DEFAULT_AXIS_ORDER = "lat_lon"
# (north, south, east, west): Yakutia, the coverage area of the route builder
DEFAULT_FALLBACK_BOUNDS: Tuple[float, float, float, float] = (73.0, 55.0, 140.0, 105.0)
DEFAULT_LOG_LEVEL = "INFO"

AXIS_ORDERS = ("lat_lon", "lon_lat")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    axis_tolerance_deg: float = DEFAULT_AXIS_TOLERANCE_DEG
    # Used when neither endpoint proximity nor the range check settles the order.
    default_axis_order: str = DEFAULT_AXIS_ORDER
    fallback_bounds: Tuple[float, float, float, float] = DEFAULT_FALLBACK_BOUNDS
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_tolerance(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_AXIS_TOLERANCE_DEG
    try:
        value = float(raw)
    except ValueError:
        logger.warning("ROUTEMAP_AXIS_TOLERANCE_DEG=%r is not a number, using %s", raw, DEFAULT_AXIS_TOLERANCE_DEG)
        return DEFAULT_AXIS_TOLERANCE_DEG
    if not math.isfinite(value) or value <= 0:
        logger.warning("ROUTEMAP_AXIS_TOLERANCE_DEG=%r must be positive, using %s", raw, DEFAULT_AXIS_TOLERANCE_DEG)
        return DEFAULT_AXIS_TOLERANCE_DEG
    return value


def _parse_axis_order(raw: Optional[str]) -> str:
    if raw is None or not raw.strip():
        return DEFAULT_AXIS_ORDER
    value = raw.strip().lower().replace("-", "_")
    if value not in AXIS_ORDERS:
        logger.warning("ROUTEMAP_DEFAULT_AXIS_ORDER=%r is not one of %s, using %s", raw, AXIS_ORDERS, DEFAULT_AXIS_ORDER)
        return DEFAULT_AXIS_ORDER
    return value


def _parse_bounds(raw: Optional[str]) -> Tuple[float, float, float, float]:
    if raw is None or not raw.strip():
        return DEFAULT_FALLBACK_BOUNDS
    try:
        north, south, east, west = (float(part) for part in raw.split(","))
    except ValueError:
        logger.warning("ROUTEMAP_FALLBACK_BOUNDS=%r must be 'north,south,east,west', using defaults", raw)
        return DEFAULT_FALLBACK_BOUNDS
    if not (-90.0 <= south <= north <= 90.0 and -180.0 <= west <= east <= 180.0):
        logger.warning("ROUTEMAP_FALLBACK_BOUNDS=%r is not a valid region, using defaults", raw)
        return DEFAULT_FALLBACK_BOUNDS
    return (north, south, east, west)


def _parse_log_level(raw: Optional[str]) -> str:
    if raw is None or not raw.strip():
        return DEFAULT_LOG_LEVEL
    value = raw.strip().upper()
    if value not in LOG_LEVELS:
        logger.warning("LOG_LEVEL=%r is not a logging level, using %s", raw, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return value


def load_settings() -> Settings:
    return Settings(
        axis_tolerance_deg=_parse_tolerance(os.getenv("ROUTEMAP_AXIS_TOLERANCE_DEG")),
        default_axis_order=_parse_axis_order(os.getenv("ROUTEMAP_DEFAULT_AXIS_ORDER")),
        fallback_bounds=_parse_bounds(os.getenv("ROUTEMAP_FALLBACK_BOUNDS")),
        log_level=_parse_log_level(os.getenv("LOG_LEVEL")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
