# path: route-map-api/routemap/utils/geo.py

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple
import math


EARTH_RADIUS_KM = 6371.0
MIN_BOUNDS_SPAN_DEG = 0.1


def normalize_longitude(lon: float) -> float:
    while lon > 180.0:
        lon -= 360.0
    while lon < -180.0:
        lon += 360.0
    return lon


def haversine_km(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    if a_lat == b_lat and a_lon == b_lon:
        return 0.0
    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlmb = math.radians(normalize_longitude(b_lon - a_lon))

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(s)))


def polyline_length_km(points_latlon: List[Tuple[float, float]]) -> float:
    total = 0.0
    for i in range(1, len(points_latlon)):
        a_lat, a_lon = points_latlon[i - 1]
        b_lat, b_lon = points_latlon[i]
        total += haversine_km(a_lat, a_lon, b_lat, b_lon)
    return total


class BoundsAccumulator:
    def __init__(self) -> None:
        self.south = math.inf
        self.north = -math.inf
        self.west = math.inf
        self.east = -math.inf
        self.count = 0

    def add(self, lat: float, lon: float) -> None:
        self.south = min(self.south, lat)
        self.north = max(self.north, lat)
        self.west = min(self.west, lon)
        self.east = max(self.east, lon)
        self.count += 1

    def extend(self, points_latlon: Iterable[Tuple[float, float]]) -> None:
        for lat, lon in points_latlon:
            self.add(lat, lon)

    def result(self) -> Optional[Dict[str, float]]:
        if self.count == 0:
            return None
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west,
        }


def pad_bounds(bounds: Dict[str, float], padding: float = 0.15) -> Dict[str, float]:
    # a single point or a due north/south line is padded as if MIN_BOUNDS_SPAN_DEG wide
    lat_span = bounds["north"] - bounds["south"]
    lon_span = bounds["east"] - bounds["west"]
    if lat_span < 0.001:
        lat_span = MIN_BOUNDS_SPAN_DEG
    if lon_span < 0.001:
        lon_span = MIN_BOUNDS_SPAN_DEG

    return {
        "north": min(90.0, bounds["north"] + lat_span * padding),
        "south": max(-90.0, bounds["south"] - lat_span * padding),
        "east": min(180.0, bounds["east"] + lon_span * padding),
        "west": max(-180.0, bounds["west"] - lon_span * padding),
    }
