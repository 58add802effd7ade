# path: route-map-api/routemap/services/coordinates.py

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple
import math

from routemap.models.route_models import AxisOrder, Coordinate
from routemap.services.fields import COORDINATE_KEY_PAIRS


RawPair = Tuple[float, float]


def finite_number(value: Any) -> Optional[float]:
    # bool is an int subclass; a JSON true/false is never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def make_coordinate(lat: Any, lon: Any) -> Optional[Coordinate]:
    lat_f = finite_number(lat)
    lon_f = finite_number(lon)
    if lat_f is None or lon_f is None:
        return None
    if not (-90.0 <= lat_f <= 90.0) or not (-180.0 <= lon_f <= 180.0):
        return None
    return Coordinate(lat=lat_f, lon=lon_f)


def numeric_pair(value: Any) -> Optional[RawPair]:
    # a trailing third element (altitude) is dropped
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        return None
    a = finite_number(value[0])
    b = finite_number(value[1])
    if a is None or b is None:
        return None
    return (a, b)


def pair_to_coordinate(pair: RawPair, order: AxisOrder) -> Optional[Coordinate]:
    a, b = pair
    if order is AxisOrder.LON_LAT:
        return make_coordinate(b, a)
    return make_coordinate(a, b)


def _near(endpoint: Coordinate, lat: float, lon: float, tolerance: float) -> bool:
    return abs(endpoint.lat - lat) < tolerance and abs(endpoint.lon - lon) < tolerance


def detect_axis_order(
    pairs: Sequence[RawPair],
    endpoints: Iterable[Optional[Coordinate]] = (),
    tolerance: float = 0.1,
    default: AxisOrder = AxisOrder.LAT_LON,
) -> AxisOrder:
    """
    Decide whether bare pairs are (lat, lon) or (lon, lat), for the whole list.

    1. Endpoint proximity: the first pair that lands within `tolerance` of a
       known endpoint under exactly one reading decides.
    2. Range: the first pair with exactly one value outside [-90, 90] decides,
       that value being the longitude.
    3. Otherwise `default`.
    """
    known = [e for e in endpoints if e is not None]

    if known:
        for a, b in pairs:
            as_lat_lon = any(_near(e, a, b, tolerance) for e in known)
            as_lon_lat = any(_near(e, b, a, tolerance) for e in known)
            if as_lat_lon and not as_lon_lat:
                return AxisOrder.LAT_LON
            if as_lon_lat and not as_lat_lon:
                return AxisOrder.LON_LAT

    for a, b in pairs:
        a_outside = abs(a) > 90.0
        b_outside = abs(b) > 90.0
        if a_outside and not b_outside:
            return AxisOrder.LON_LAT
        if b_outside and not a_outside:
            return AxisOrder.LAT_LON

    return default


def _from_labelled(obj: Mapping[str, Any]) -> Optional[Coordinate]:
    for lat_key, lon_key in COORDINATE_KEY_PAIRS:
        if lat_key in obj and lon_key in obj:
            coord = make_coordinate(obj[lat_key], obj[lon_key])
            if coord is not None:
                return coord
    return None


def resolve_coordinate(value: Any, default_order: AxisOrder = AxisOrder.LAT_LON) -> Optional[Coordinate]:
    if isinstance(value, Mapping):
        coord = _from_labelled(value)
        if coord is not None:
            return coord
        if str(value.get("type", "")).lower() == "point":
            pair = numeric_pair(value.get("coordinates"))
            if pair is not None:
                return pair_to_coordinate(pair, AxisOrder.LON_LAT)
        return None

    pair = numeric_pair(value)
    if pair is None:
        return None
    order = detect_axis_order([pair], default=default_order)
    return pair_to_coordinate(pair, order)


def to_pairs(coords: Iterable[Coordinate]) -> List[Tuple[float, float]]:
    return [(c.lat, c.lon) for c in coords]
