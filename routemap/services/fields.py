# path: route-map-api/routemap/services/fields.py

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple


# Ordered alias keys per concept; the first key holding a usable value wins.
ROUTE_ID_KEYS: Tuple[str, ...] = ("id", "routeId", "route_id")
ORIGIN_KEYS: Tuple[str, ...] = ("fromCity", "from_city", "origin")
DESTINATION_KEYS: Tuple[str, ...] = ("toCity", "to_city", "destination")

SEGMENT_ID_KEYS: Tuple[str, ...] = ("segmentId", "id", "segment_id")
PRIMARY_MODE_KEYS: Tuple[str, ...] = ("type",)
SECONDARY_MODE_KEYS: Tuple[str, ...] = ("transportType", "transport_type", "mode")
VIA_HUBS_KEYS: Tuple[str, ...] = ("viaHubs", "via_hubs")
GEOMETRY_KEYS: Tuple[str, ...] = ("pathGeometry", "path_geometry", "geometry")

FROM_STOP_KEYS: Tuple[str, ...] = ("from", "fromStop", "from_stop")
TO_STOP_KEYS: Tuple[str, ...] = ("to", "toStop", "to_stop")
FROM_STOP_ID_KEYS: Tuple[str, ...] = ("fromStopId", "from_stop_id")
TO_STOP_ID_KEYS: Tuple[str, ...] = ("toStopId", "to_stop_id")

STOP_ID_KEYS: Tuple[str, ...] = ("id", "stopId", "stop_id")
STOP_NAME_KEYS: Tuple[str, ...] = ("name", "title")
STOP_KIND_KEYS: Tuple[str, ...] = ("type", "kind", "stopType")
STOP_COORDINATE_KEYS: Tuple[str, ...] = ("coordinates", "coords", "location")
HUB_FLAG_KEYS: Tuple[str, ...] = ("isHub", "is_hub")
HUB_LEVEL_KEYS: Tuple[str, ...] = ("hubLevel", "hub_level")

# Labelled coordinate objects, (latitude key, longitude key).
COORDINATE_KEY_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("latitude", "longitude"),
    ("lat", "lon"),
    ("lat", "lng"),
)

ANNOTATION_KEYS: Tuple[str, ...] = ("riskScore", "warnings", "validation")


def _usable(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def first_present(obj: Any, keys: Sequence[str]) -> Optional[Any]:
    if not isinstance(obj, Mapping):
        return None
    for key in keys:
        value = obj.get(key)
        if _usable(value):
            return value
    return None


def first_text(obj: Any, keys: Sequence[str]) -> Optional[str]:
    if not isinstance(obj, Mapping):
        return None
    for key in keys:
        value = obj.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            try:
                return str(value)
            except ValueError:
                # ints past the interpreter's digit limit
                continue
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def as_mapping(obj: Any) -> Optional[Mapping[str, Any]]:
    return obj if isinstance(obj, Mapping) else None
