# path: route-map-api/routemap/services/transport.py

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple
import logging

from routemap.models.route_models import TransportMode
from routemap.services.fields import (
    FROM_STOP_KEYS,
    PRIMARY_MODE_KEYS,
    SECONDARY_MODE_KEYS,
    STOP_KIND_KEYS,
    TO_STOP_KEYS,
    VIA_HUBS_KEYS,
    first_present,
    first_text,
)

logger = logging.getLogger(__name__)


MODE_SYNONYMS: Dict[str, TransportMode] = {
    "airplane": TransportMode.AIRPLANE,
    "air": TransportMode.AIRPLANE,
    "plane": TransportMode.AIRPLANE,
    "aeroplane": TransportMode.AIRPLANE,
    "flight": TransportMode.AIRPLANE,
    "avia": TransportMode.AIRPLANE,
    "train": TransportMode.TRAIN,
    "rail": TransportMode.TRAIN,
    "railway": TransportMode.TRAIN,
    "bus": TransportMode.BUS,
    "coach": TransportMode.BUS,
    "ferry": TransportMode.FERRY,
    "boat": TransportMode.FERRY,
    "ship": TransportMode.FERRY,
    "water": TransportMode.FERRY,
    "river": TransportMode.FERRY,
    "taxi": TransportMode.TAXI,
    "car": TransportMode.TAXI,
    "winter_road": TransportMode.WINTER_ROAD,
    "winter-road": TransportMode.WINTER_ROAD,
    "winterroad": TransportMode.WINTER_ROAD,
    "зимник": TransportMode.WINTER_ROAD,
    "unknown": TransportMode.UNKNOWN,
}

# Checked in order, each kind against both stop kinds. Bus comes before train
# because "bus_station" and "автовокзал" also contain the train keywords.
STOP_KIND_KEYWORDS: Tuple[Tuple[TransportMode, Tuple[str, ...]], ...] = (
    (TransportMode.AIRPLANE, ("airport", "аэропорт", "airfield", "аэродром")),
    (TransportMode.BUS, ("bus", "автовокзал", "автостанция")),
    (TransportMode.TRAIN, ("train", "rail", "station", "вокзал", "жд")),
    (TransportMode.FERRY, ("ferry", "pier", "port", "порт", "пристань", "причал")),
    (TransportMode.TAXI, ("taxi", "такси")),
    (TransportMode.WINTER_ROAD, ("winter_road", "зимник")),
)


def recognize_mode(value: Any) -> Optional[TransportMode]:
    if not isinstance(value, str):
        return None
    return MODE_SYNONYMS.get(value.strip().lower())


def _stop_kind(segment: Mapping[str, Any], stop_keys) -> str:
    kind = first_text(first_present(segment, stop_keys), STOP_KIND_KEYS)
    return kind.lower() if kind else ""


def mode_from_stop_kinds(from_kind: str, to_kind: str) -> Optional[TransportMode]:
    for mode, keywords in STOP_KIND_KEYWORDS:
        for keyword in keywords:
            if keyword in from_kind or keyword in to_kind:
                return mode
    return None


def classify_transport_mode(segment: Any) -> TransportMode:
    if not isinstance(segment, Mapping):
        return TransportMode.UNKNOWN

    for key in PRIMARY_MODE_KEYS + SECONDARY_MODE_KEYS:
        mode = recognize_mode(segment.get(key))
        if mode is not None:
            return mode

    mode = mode_from_stop_kinds(_stop_kind(segment, FROM_STOP_KEYS), _stop_kind(segment, TO_STOP_KEYS))
    if mode is not None:
        return mode

    via_hubs = first_present(segment, VIA_HUBS_KEYS)
    if isinstance(via_hubs, list) and via_hubs:
        return TransportMode.AIRPLANE

    logger.debug("No transport mode signal in segment keys %s", sorted(segment.keys()))
    return TransportMode.UNKNOWN
