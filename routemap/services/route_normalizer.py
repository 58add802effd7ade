# path: route-map-api/routemap/services/route_normalizer.py

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
import logging

from routemap.config import Settings, get_settings
from routemap.errors import InvalidRouteDescriptor
from routemap.models.route_models import (
    AxisOrder,
    BoundingBox,
    Diagnostic,
    DiagnosticKind,
    RenderableSegment,
    ResolvedStop,
    RouteRenderModel,
    RouteRenderResult,
    SegmentMetadata,
)
from routemap.services.coordinates import finite_number, to_pairs
from routemap.services.endpoints import (
    EndpointResolver,
    ResolvedEndpoint,
    SegmentView,
    build_segment_views,
    resolve_place,
)
from routemap.services.fields import (
    ANNOTATION_KEYS,
    DESTINATION_KEYS,
    GEOMETRY_KEYS,
    ORIGIN_KEYS,
    ROUTE_ID_KEYS,
    STOP_ID_KEYS,
    STOP_NAME_KEYS,
    VIA_HUBS_KEYS,
    as_mapping,
    first_present,
    first_text,
)
from routemap.services.gazetteer import DEFAULT_GAZETTEER, Gazetteer
from routemap.services.geometry import extract_path_geometry
from routemap.services.stop_names import StopNameCache
from routemap.services.transfers import is_transfer
from routemap.services.transport import classify_transport_mode
from routemap.utils.geo import BoundsAccumulator, haversine_km, polyline_length_km

logger = logging.getLogger(__name__)


UNKNOWN_ROUTE_ID = "unknown-route"
METERS_UNITS = ("m", "meter", "meters", "metre", "metres")
HOURS_UNITS = ("h", "hour", "hours")


def _quantity(raw: Any, *keys: str) -> Optional[float]:
    number = finite_number(raw)
    if number is not None:
        return number
    obj = as_mapping(raw)
    if obj is None:
        return None
    for key in keys:
        number = finite_number(obj.get(key))
        if number is not None:
            return number
    return None


def _unit(raw: Any) -> str:
    obj = as_mapping(raw)
    unit = obj.get("unit") if obj is not None else None
    return unit.strip().lower() if isinstance(unit, str) else ""


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


def extract_metadata(seg: Mapping[str, Any]) -> SegmentMetadata:
    distance = _quantity(seg.get("distance"), "value")
    if distance is not None and _unit(seg.get("distance")) in METERS_UNITS:
        distance = distance / 1000.0

    duration = _quantity(seg.get("duration"), "value")
    if duration is not None and _unit(seg.get("duration")) in HOURS_UNITS:
        duration = duration * 60.0

    price_raw = seg.get("price")
    price = _quantity(price_raw, "total", "base")
    price_obj = as_mapping(price_raw)
    currency = _text(price_obj.get("currency")) if price_obj is not None else None

    schedule = as_mapping(seg.get("schedule")) or {}
    departure = _text(schedule.get("departureTime")) or _text(seg.get("departureTime"))
    arrival = _text(schedule.get("arrivalTime")) or _text(seg.get("arrivalTime"))

    via_hubs: List[Dict[str, Any]] = []
    raw_hubs = first_present(seg, VIA_HUBS_KEYS)
    if isinstance(raw_hubs, list):
        for hub in raw_hubs:
            if isinstance(hub, Mapping):
                via_hubs.append(dict(hub))
            elif isinstance(hub, str) and hub.strip():
                via_hubs.append({"name": hub.strip()})

    is_direct = seg.get("isDirect")
    return SegmentMetadata(
        distance_km=distance,
        duration_min=duration,
        price=price,
        currency=currency,
        departure_time=departure,
        arrival_time=arrival,
        is_direct=is_direct if isinstance(is_direct, bool) else None,
        via_hubs=via_hubs,
    )


def extract_annotations(seg: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: seg[key] for key in ANNOTATION_KEYS if seg.get(key) is not None}


def _resolved_stop(endpoint: ResolvedEndpoint, transfer: bool) -> ResolvedStop:
    ident = endpoint.identity
    return ResolvedStop(
        id=ident.id,
        name=ident.name,
        kind=ident.kind,
        is_hub=ident.is_hub,
        hub_level=ident.hub_level,
        coordinate=endpoint.coordinate,
        is_transfer=transfer,
        coordinate_source=endpoint.source,
    )


def _remember_names(views: List[SegmentView], cache: StopNameCache) -> None:
    for view in views:
        for stop in (view.from_stop, view.to_stop):
            cache.remember(first_text(stop, STOP_ID_KEYS), first_text(stop, STOP_NAME_KEYS))


def fallback_bounds(settings: Settings) -> BoundingBox:
    north, south, east, west = settings.fallback_bounds
    return BoundingBox(north=north, south=south, east=east, west=west)


def normalize_raw_route(
    raw: Any,
    *,
    route_id: Optional[str] = None,
    settings: Optional[Settings] = None,
    name_cache: Optional[StopNameCache] = None,
    gazetteer: Optional[Gazetteer] = None,
) -> RouteRenderResult:
    """Untrusted itinerary JSON -> renderable map model plus per-segment diagnostics."""
    settings = settings or get_settings()
    name_cache = name_cache if name_cache is not None else StopNameCache()
    gazetteer = gazetteer or DEFAULT_GAZETTEER
    default_order = AxisOrder(settings.default_axis_order)

    if not isinstance(raw, Mapping):
        raise InvalidRouteDescriptor(f"Route descriptor must be an object, got {type(raw).__name__}")
    entries = raw.get("segments")
    if not isinstance(entries, list):
        raise InvalidRouteDescriptor(f"Route descriptor 'segments' must be a list, got {type(entries).__name__}")

    route_id = route_id or first_text(raw, ROUTE_ID_KEYS) or UNKNOWN_ROUTE_ID
    views = build_segment_views(entries)
    _remember_names(views, name_cache)

    resolver = EndpointResolver(
        views,
        origin=resolve_place(first_present(raw, ORIGIN_KEYS), gazetteer, default_order),
        destination=resolve_place(first_present(raw, DESTINATION_KEYS), gazetteer, default_order),
        gazetteer=gazetteer,
        name_cache=name_cache,
        default_order=default_order,
    )
    stop_ids = [(resolver.identity(v.index, "from").id, resolver.identity(v.index, "to").id) for v in views]

    segments: List[RenderableSegment] = []
    diagnostics: List[Diagnostic] = []
    bounds = BoundsAccumulator()

    for view in views:
        i = view.index
        if view.raw is None:
            diagnostics.append(
                Diagnostic(
                    segment_index=i,
                    segment_id=view.segment_id,
                    kind=DiagnosticKind.INVALID_SEGMENT,
                    reason=f"segment entry is {type(entries[i]).__name__}, not an object",
                )
            )
            logger.warning("Segment %d is not an object, skipping", i)
            continue

        start = resolver.resolve(i, "from")
        end = resolver.resolve(i, "to")
        if start.coordinate is None or end.coordinate is None:
            missing = [name for name, ep in (("from", start), ("to", end)) if ep.coordinate is None]
            reason = "no coordinates for %s stop (%s) after own, route, adjacent and gazetteer fallbacks" % (
                " and ".join(missing),
                ", ".join(repr(ep.identity.name) for ep in (start, end) if ep.coordinate is None),
            )
            diagnostics.append(
                Diagnostic(
                    segment_index=i,
                    segment_id=view.segment_id,
                    kind=DiagnosticKind.UNRESOLVED_ENDPOINT,
                    reason=reason,
                )
            )
            logger.warning("Segment %d (%s): %s, skipping", i, view.segment_id, reason)
            continue

        geometry = extract_path_geometry(
            first_present(view.raw, GEOMETRY_KEYS),
            start.coordinate,
            end.coordinate,
            tolerance=settings.axis_tolerance_deg,
            default_order=default_order,
        )
        if geometry.discard_reason:
            diagnostics.append(
                Diagnostic(
                    segment_index=i,
                    segment_id=view.segment_id,
                    kind=DiagnosticKind.MALFORMED_GEOMETRY,
                    reason=geometry.discard_reason,
                )
            )
            logger.warning("Segment %d (%s): %s, drawing a straight line", i, view.segment_id, geometry.discard_reason)

        segment = RenderableSegment(
            segment_id=view.segment_id,
            index=i,
            transport_mode=classify_transport_mode(view.raw),
            from_stop=_resolved_stop(start, is_transfer(stop_ids, i, "from")),
            to_stop=_resolved_stop(end, is_transfer(stop_ids, i, "to")),
            path_geometry=geometry.points,
            axis_order=geometry.axis_order if geometry.points else None,
            straight_line_km=haversine_km(
                start.coordinate.lat, start.coordinate.lon, end.coordinate.lat, end.coordinate.lon
            ),
            metadata=extract_metadata(view.raw),
            annotations=extract_annotations(view.raw),
        )
        bounds.extend(to_pairs(segment.coordinates()))
        segments.append(segment)
        if segment.path_geometry:
            drawn_km = polyline_length_km(to_pairs(segment.path_geometry))
        else:
            drawn_km = segment.straight_line_km
        logger.debug(
            "Segment %d (%s): %s, %s -> %s, %d path point(s), %.1f km drawn",
            i, segment.segment_id, segment.transport_mode.value, segment.from_stop.id, segment.to_stop.id,
            len(segment.path_geometry or []), drawn_km,
        )

    box = bounds.result()
    if box is None:
        model = RouteRenderModel(route_id=route_id, segments=[], bounds=fallback_bounds(settings), is_fallback_bounds=True)
        if entries:
            logger.error("Route %s: all %d segment(s) skipped, returning an empty model", route_id, len(entries))
    else:
        model = RouteRenderModel(route_id=route_id, segments=segments, bounds=BoundingBox(**box))

    if diagnostics:
        logger.warning(
            "Route %s: %d of %d segment(s) converted, %d diagnostic(s)",
            route_id, len(segments), len(entries), len(diagnostics),
        )
    else:
        logger.info("Route %s: all %d segment(s) converted", route_id, len(segments))

    return RouteRenderResult(model=model, diagnostics=diagnostics)
