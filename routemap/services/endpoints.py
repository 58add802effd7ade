# path: route-map-api/routemap/services/endpoints.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence
import logging
import re

from routemap.models.route_models import AxisOrder, Coordinate, CoordinateSource
from routemap.services.coordinates import resolve_coordinate
from routemap.services.fields import (
    FROM_STOP_ID_KEYS,
    FROM_STOP_KEYS,
    HUB_FLAG_KEYS,
    HUB_LEVEL_KEYS,
    SEGMENT_ID_KEYS,
    STOP_COORDINATE_KEYS,
    STOP_ID_KEYS,
    STOP_KIND_KEYS,
    STOP_NAME_KEYS,
    TO_STOP_ID_KEYS,
    TO_STOP_KEYS,
    as_mapping,
    first_present,
    first_text,
)
from routemap.services.gazetteer import Gazetteer
from routemap.services.stop_names import StopNameCache
from routemap.services.transfers import Boundary

logger = logging.getLogger(__name__)

# keys an outer wrapper may override on a nested {"segment": {...}} entry
WRAPPER_OVERRIDE_KEYS = ("departureTime", "arrivalTime", "duration", "price")


@dataclass(frozen=True)
class SegmentView:
    index: int
    raw: Optional[Mapping[str, Any]]
    segment_id: str
    from_stop: Optional[Mapping[str, Any]]
    to_stop: Optional[Mapping[str, Any]]
    from_stop_id: Optional[str]
    to_stop_id: Optional[str]

    def stop(self, boundary: Boundary) -> Optional[Mapping[str, Any]]:
        return self.from_stop if boundary == "from" else self.to_stop

    def stop_id_alias(self, boundary: Boundary) -> Optional[str]:
        return self.from_stop_id if boundary == "from" else self.to_stop_id


def unwrap_segment(entry: Any) -> Optional[Mapping[str, Any]]:
    seg = as_mapping(entry)
    if seg is None:
        return None
    inner = as_mapping(seg.get("segment"))
    if inner is None:
        return seg
    merged = dict(inner)
    for key in WRAPPER_OVERRIDE_KEYS:
        if seg.get(key) is not None:
            merged[key] = seg[key]
    if first_text(merged, SEGMENT_ID_KEYS) is None:
        outer_id = first_text(seg, SEGMENT_ID_KEYS)
        if outer_id is not None:
            merged["id"] = outer_id
    return merged


def build_segment_views(entries: Sequence[Any]) -> List[SegmentView]:
    views = []
    for i, entry in enumerate(entries):
        raw = unwrap_segment(entry)
        views.append(
            SegmentView(
                index=i,
                raw=raw,
                segment_id=first_text(raw, SEGMENT_ID_KEYS) or f"segment-{i}",
                from_stop=as_mapping(first_present(raw, FROM_STOP_KEYS)),
                to_stop=as_mapping(first_present(raw, TO_STOP_KEYS)),
                from_stop_id=first_text(raw, FROM_STOP_ID_KEYS),
                to_stop_id=first_text(raw, TO_STOP_ID_KEYS),
            )
        )
    return views


def stop_coordinate(stop: Optional[Mapping[str, Any]], default_order: AxisOrder = AxisOrder.LAT_LON) -> Optional[Coordinate]:
    if stop is None:
        return None
    for key in STOP_COORDINATE_KEYS:
        if stop.get(key) is not None:
            coord = resolve_coordinate(stop[key], default_order)
            if coord is not None:
                return coord
    # some producers put lat/lon straight on the stop
    return resolve_coordinate(stop, default_order)


@dataclass(frozen=True)
class RoutePlace:
    id: Optional[str]
    name: Optional[str]
    coordinate: Optional[Coordinate]


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def resolve_place(raw: Any, gazetteer: Gazetteer, default_order: AxisOrder = AxisOrder.LAT_LON) -> Optional[RoutePlace]:
    if isinstance(raw, str):
        if not raw.strip():
            return None
        coord = gazetteer.lookup(raw)
        if coord is not None:
            logger.info("Route place %r given as a bare name, using gazetteer coordinates", raw)
        return RoutePlace(id=_slug(raw), name=raw.strip(), coordinate=coord)

    place = as_mapping(raw)
    if place is None:
        return None
    place_id = first_text(place, STOP_ID_KEYS)
    name = first_text(place, STOP_NAME_KEYS)
    coord = stop_coordinate(place, default_order)
    if coord is None:
        coord = gazetteer.lookup(name) or gazetteer.lookup(place_id)
    return RoutePlace(id=place_id, name=name or place_id, coordinate=coord)


@dataclass(frozen=True)
class StopIdentity:
    id: str
    name: str
    kind: Optional[str] = None
    is_hub: bool = False
    hub_level: Optional[str] = None


@dataclass(frozen=True)
class ResolvedEndpoint:
    identity: StopIdentity
    coordinate: Optional[Coordinate]
    source: Optional[CoordinateSource]


class EndpointResolver:
    # sources in order: own, route origin/destination, adjacent shared stop, gazetteer

    def __init__(
        self,
        views: Sequence[SegmentView],
        origin: Optional[RoutePlace],
        destination: Optional[RoutePlace],
        gazetteer: Gazetteer,
        name_cache: StopNameCache,
        default_order: AxisOrder = AxisOrder.LAT_LON,
    ) -> None:
        self.views = views
        self.origin = origin
        self.destination = destination
        self.gazetteer = gazetteer
        self.name_cache = name_cache
        self.default_order = default_order

    def _is_route_start(self, index: int, boundary: Boundary) -> bool:
        return boundary == "from" and index == 0

    def _is_route_end(self, index: int, boundary: Boundary) -> bool:
        return boundary == "to" and index == len(self.views) - 1

    def _route_place(self, index: int, boundary: Boundary) -> Optional[RoutePlace]:
        if self._is_route_start(index, boundary):
            return self.origin
        if self._is_route_end(index, boundary):
            return self.destination
        return None

    def _adjacent_stop(self, index: int, boundary: Boundary) -> Optional[Mapping[str, Any]]:
        if boundary == "from" and index > 0:
            return self.views[index - 1].to_stop
        if boundary == "to" and index < len(self.views) - 1:
            return self.views[index + 1].from_stop
        return None

    def _descriptor(self, index: int, boundary: Boundary) -> Optional[Mapping[str, Any]]:
        view = self.views[index]
        stop = view.stop(boundary)
        if stop is None and view.stop_id_alias(boundary) is None:
            # a missing stop is the same physical stop as the neighbour's
            stop = self._adjacent_stop(index, boundary)
        return stop

    def _id_and_name(self, index: int, boundary: Boundary):
        stop = self._descriptor(index, boundary)
        stop_id = first_text(stop, STOP_ID_KEYS) or self.views[index].stop_id_alias(boundary)
        name = first_text(stop, STOP_NAME_KEYS) or self.name_cache.lookup(stop_id)
        return stop, stop_id, name

    def identity(self, index: int, boundary: Boundary) -> StopIdentity:
        view = self.views[index]
        if view.stop(boundary) is None and view.stop_id_alias(boundary) is None:
            place = self._route_place(index, boundary)
            if place is not None and place.coordinate is not None:
                place_id = place.id or _slug(place.name or "")
                return StopIdentity(id=f"city-{place_id}", name=place.name or place_id, kind="city")

        stop, stop_id, name = self._id_and_name(index, boundary)
        hub_flag = first_present(stop, HUB_FLAG_KEYS)
        return StopIdentity(
            id=stop_id or f"{view.segment_id}-{boundary}",
            name=name or stop_id or f"{view.segment_id} {boundary}",
            kind=first_text(stop, STOP_KIND_KEYS),
            is_hub=hub_flag is True,
            hub_level=first_text(stop, HUB_LEVEL_KEYS),
        )

    def _gazetteer_coordinate(self, index: int, boundary: Boundary) -> Optional[Coordinate]:
        _, stop_id, name = self._id_and_name(index, boundary)
        for key in (name, stop_id):
            coord = self.gazetteer.lookup(key)
            if coord is not None:
                return coord
        return None

    def resolve(self, index: int, boundary: Boundary) -> ResolvedEndpoint:
        identity = self.identity(index, boundary)
        segment_id = self.views[index].segment_id

        coord = stop_coordinate(self.views[index].stop(boundary), self.default_order)
        if coord is not None:
            return ResolvedEndpoint(identity, coord, CoordinateSource.OWN)

        place = self._route_place(index, boundary)
        if place is not None and place.coordinate is not None:
            logger.warning(
                "Segment %s %s stop has no coordinates, using route %s",
                segment_id, boundary, "origin" if boundary == "from" else "destination",
            )
            return ResolvedEndpoint(identity, place.coordinate, CoordinateSource.ROUTE_PLACE)

        coord = stop_coordinate(self._adjacent_stop(index, boundary), self.default_order)
        if coord is not None:
            logger.warning(
                "Segment %s %s stop has no coordinates, using the %s segment's shared stop",
                segment_id, boundary, "previous" if boundary == "from" else "next",
            )
            return ResolvedEndpoint(identity, coord, CoordinateSource.ADJACENT)

        coord = self._gazetteer_coordinate(index, boundary)
        if coord is not None:
            logger.warning("Segment %s %s stop %r resolved from the gazetteer", segment_id, boundary, identity.name)
            return ResolvedEndpoint(identity, coord, CoordinateSource.GAZETTEER)

        return ResolvedEndpoint(identity, None, None)
