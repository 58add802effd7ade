# path: route-map-api/routemap/services/rendering.py

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Tuple
import logging

from routemap.models.route_models import BoundingBox, RouteRenderModel, TransportMode

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]

MODE_COLORS: Dict[TransportMode, str] = {
    TransportMode.AIRPLANE: "#1e88e5",
    TransportMode.TRAIN: "#43a047",
    TransportMode.BUS: "#fb8c00",
    TransportMode.FERRY: "#00acc1",
    TransportMode.TAXI: "#fdd835",
    TransportMode.WINTER_ROAD: "#8e24aa",
    TransportMode.UNKNOWN: "#757575",
}


class MapSurface(Protocol):
    def initialize(self, bounds: BoundingBox) -> None: ...

    def is_ready(self) -> bool: ...

    def add_polyline(self, points: List[LatLon], options: Optional[Dict[str, Any]] = None) -> str: ...

    def add_marker(self, point: LatLon, options: Optional[Dict[str, Any]] = None) -> str: ...


class SurfaceNotReady(RuntimeError):
    pass


def render_to_surface(model: RouteRenderModel, surface: MapSurface) -> Dict[str, List[str]]:
    surface.initialize(model.bounds)
    if not surface.is_ready():
        raise SurfaceNotReady("map surface did not become ready after initialize()")

    polylines: List[str] = []
    markers: List[str] = []
    seen_stops = set()

    for segment in model.segments:
        if segment.path_geometry:
            points = [(c.lat, c.lon) for c in segment.path_geometry]
        else:
            points = [
                (segment.from_stop.coordinate.lat, segment.from_stop.coordinate.lon),
                (segment.to_stop.coordinate.lat, segment.to_stop.coordinate.lon),
            ]
        polylines.append(
            surface.add_polyline(
                points,
                {
                    "segment_id": segment.segment_id,
                    "color": MODE_COLORS[segment.transport_mode],
                    "dashed": segment.path_geometry is None,
                },
            )
        )

        for stop in (segment.from_stop, segment.to_stop):
            if stop.id in seen_stops:
                continue
            seen_stops.add(stop.id)
            markers.append(
                surface.add_marker(
                    (stop.coordinate.lat, stop.coordinate.lon),
                    {"title": stop.name, "is_transfer": stop.is_transfer, "is_hub": stop.is_hub},
                )
            )

    logger.debug("Rendered route %s: %d polyline(s), %d marker(s)", model.route_id, len(polylines), len(markers))
    return {"polylines": polylines, "markers": markers}
