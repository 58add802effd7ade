from __future__ import annotations

from routemap.models.route_models import Coordinate, CoordinateSource
from routemap.services.endpoints import (
    EndpointResolver,
    build_segment_views,
    resolve_place,
    stop_coordinate,
    unwrap_segment,
)
from routemap.services.gazetteer import DEFAULT_GAZETTEER
from routemap.services.stop_names import StopNameCache


def _resolver(segments, origin=None, destination=None, cache=None):
    views = build_segment_views(segments)
    return EndpointResolver(
        views,
        origin=resolve_place(origin, DEFAULT_GAZETTEER),
        destination=resolve_place(destination, DEFAULT_GAZETTEER),
        gazetteer=DEFAULT_GAZETTEER,
        name_cache=cache or StopNameCache(),
    )


def test_stop_coordinate_shapes(make_stop):
    assert stop_coordinate(make_stop("a", 61.0, 129.0)) == Coordinate(lat=61.0, lon=129.0)
    assert stop_coordinate({"id": "a", "coords": {"lat": 61.0, "lon": 129.0}}) == Coordinate(lat=61.0, lon=129.0)
    assert stop_coordinate({"id": "a", "lat": 61.0, "lng": 129.0}) == Coordinate(lat=61.0, lon=129.0)
    assert stop_coordinate({"id": "a", "coordinates": {"latitude": None, "longitude": 129.0}}) is None
    assert stop_coordinate(None) is None


def test_resolve_place_from_bare_name():
    place = resolve_place("Нерюнгри", DEFAULT_GAZETTEER)
    assert place.id == "нерюнгри"
    assert place.coordinate == Coordinate(lat=56.6583, lon=124.7264)


def test_resolve_place_object_without_coordinates_uses_gazetteer():
    place = resolve_place({"id": "lensk", "name": "Ленск"}, DEFAULT_GAZETTEER)
    assert place.coordinate == Coordinate(lat=60.7253, lon=114.93)
    assert resolve_place(None, DEFAULT_GAZETTEER) is None
    assert resolve_place("  ", DEFAULT_GAZETTEER) is None


def test_own_coordinate_wins_over_route_place(make_stop, make_segment):
    resolver = _resolver(
        [make_segment("s1", make_stop("A", 61.0, 128.0), make_stop("B", 60.0, 120.0))],
        origin={"id": "yakutsk", "name": "Якутск", "coordinates": {"latitude": 62.03, "longitude": 129.73}},
    )
    ep = resolver.resolve(0, "from")
    assert ep.coordinate == Coordinate(lat=61.0, lon=128.0)
    assert ep.source is CoordinateSource.OWN


def test_route_origin_and_destination_at_route_ends(make_stop, make_segment):
    resolver = _resolver(
        [
            make_segment("s1", make_stop("A"), make_stop("B", 60.0, 120.0)),
            make_segment("s2", make_stop("B", 60.0, 120.0), make_stop("C")),
        ],
        origin={"id": "yakutsk", "name": "Якутск", "coordinates": {"latitude": 62.03, "longitude": 129.73}},
        destination={"id": "moscow", "name": "Москва", "coordinates": {"latitude": 55.75, "longitude": 37.61}},
    )
    start = resolver.resolve(0, "from")
    end = resolver.resolve(1, "to")
    assert start.coordinate == Coordinate(lat=62.03, lon=129.73)
    assert start.source is CoordinateSource.ROUTE_PLACE
    assert end.coordinate == Coordinate(lat=55.75, lon=37.61)
    assert end.source is CoordinateSource.ROUTE_PLACE


def test_route_place_is_not_used_for_inner_boundaries(make_stop, make_segment):
    resolver = _resolver(
        [
            make_segment("s1", make_stop("A", 61.0, 128.0), make_stop("x-1")),
            make_segment("s2", make_stop("x-2"), make_stop("C", 55.0, 37.0)),
        ],
        destination={"id": "moscow", "coordinates": {"latitude": 55.75, "longitude": 37.61}},
    )
    assert resolver.resolve(0, "to").coordinate is None
    assert resolver.resolve(1, "from").coordinate is None


def test_previous_segment_to_fills_from(make_stop, make_segment):
    resolver = _resolver(
        [
            make_segment("s1", make_stop("A", 61.0, 128.0), make_stop("B", 61.5, 129.1)),
            make_segment("s2", make_stop("B"), make_stop("C", 55.0, 37.0)),
        ]
    )
    ep = resolver.resolve(1, "from")
    assert ep.coordinate == Coordinate(lat=61.5, lon=129.1)
    assert ep.source is CoordinateSource.ADJACENT


def test_next_segment_from_fills_to(make_stop, make_segment):
    resolver = _resolver(
        [
            make_segment("s1", make_stop("A", 61.0, 128.0), make_stop("B")),
            make_segment("s2", make_stop("B", 61.5, 129.1), make_stop("C", 55.0, 37.0)),
        ]
    )
    ep = resolver.resolve(0, "to")
    assert ep.coordinate == Coordinate(lat=61.5, lon=129.1)
    assert ep.source is CoordinateSource.ADJACENT


def test_gazetteer_by_name_then_id(make_stop, make_segment):
    resolver = _resolver(
        [make_segment("s1", make_stop("stop-011", name="Mirny Airport"), make_stop("tiksi-port"))]
    )
    start = resolver.resolve(0, "from")
    end = resolver.resolve(0, "to")
    assert start.coordinate == Coordinate(lat=62.5353, lon=113.9614)
    assert start.source is CoordinateSource.GAZETTEER
    assert end.coordinate == Coordinate(lat=71.69, lon=128.87)


def test_cached_name_feeds_gazetteer(make_stop, make_segment):
    cache = StopNameCache({"stop-011": "Удачный"})
    resolver = _resolver([make_segment("s1", make_stop("stop-011"), make_stop("C", 55.0, 37.0))], cache=cache)
    ep = resolver.resolve(0, "from")
    assert ep.identity.name == "Удачный"
    assert ep.coordinate == Coordinate(lat=66.4167, lon=112.4)


def test_unresolvable_endpoint(make_stop, make_segment):
    resolver = _resolver([make_segment("s1", make_stop("x-1", name="Atlantis"), make_stop("x-2", name="Lemuria"))])
    ep = resolver.resolve(0, "from")
    assert ep.coordinate is None
    assert ep.source is None
    assert ep.identity.id == "x-1"


def test_missing_stop_borrows_route_place_identity(make_stop):
    resolver = _resolver(
        [{"id": "s1", "from": None, "to": make_stop("B", 60.0, 120.0)}],
        origin="Якутск",
    )
    ep = resolver.resolve(0, "from")
    assert ep.identity.id == "city-якутск"
    assert ep.identity.kind == "city"
    assert ep.coordinate == Coordinate(lat=62.0355, lon=129.6755)


def test_missing_stop_borrows_adjacent_identity(make_stop):
    resolver = _resolver(
        [
            {"id": "s1", "from": make_stop("A", 61.0, 128.0), "to": make_stop("B", 60.0, 120.0, name="Ленск")},
            {"id": "s2", "to": make_stop("C", 55.0, 37.0)},
        ]
    )
    ep = resolver.resolve(1, "from")
    assert ep.identity.id == "B"
    assert ep.identity.name == "Ленск"
    assert ep.coordinate == Coordinate(lat=60.0, lon=120.0)


def test_stop_id_alias_and_placeholder_identity():
    resolver = _resolver([{"segmentId": "seg-9", "fromStopId": "stop-7", "to": None}])
    assert resolver.identity(0, "from").id == "stop-7"
    assert resolver.identity(0, "to").id == "seg-9-to"


def test_unwrap_nested_segment():
    entry = {
        "segment": {"id": "inner", "type": "bus", "price": {"total": 100}},
        "departureTime": "2024-01-01T08:00:00Z",
        "price": {"total": 250, "currency": "RUB"},
    }
    seg = unwrap_segment(entry)
    assert seg["id"] == "inner"
    assert seg["type"] == "bus"
    assert seg["departureTime"] == "2024-01-01T08:00:00Z"
    assert seg["price"] == {"total": 250, "currency": "RUB"}
    assert unwrap_segment(None) is None
    assert unwrap_segment(["not", "a", "segment"]) is None


def test_stop_id_alias_beats_route_place_identity(make_stop):
    resolver = _resolver(
        [{"id": "s1", "fromStopId": "yks-bus", "from": None, "to": make_stop("B", 60.0, 120.0)}],
        origin="Якутск",
    )
    ep = resolver.resolve(0, "from")
    assert ep.identity.id == "yks-bus"
    assert ep.identity.kind is None
    # the coordinate still comes from the route origin
    assert ep.coordinate == Coordinate(lat=62.0355, lon=129.6755)
    assert ep.source is CoordinateSource.ROUTE_PLACE
