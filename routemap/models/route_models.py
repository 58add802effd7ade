# path: route-map-api/routemap/models/route_models.py

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from routemap.utils.geo import pad_bounds


RouteVersion = Literal["1.0"]


class TransportMode(str, Enum):
    AIRPLANE = "airplane"
    TRAIN = "train"
    BUS = "bus"
    FERRY = "ferry"
    TAXI = "taxi"
    WINTER_ROAD = "winter_road"
    UNKNOWN = "unknown"


class AxisOrder(str, Enum):
    LAT_LON = "lat_lon"
    LON_LAT = "lon_lat"


class CoordinateSource(str, Enum):
    OWN = "own"
    ROUTE_PLACE = "route_place"
    ADJACENT = "adjacent"
    GAZETTEER = "gazetteer"


class DiagnosticKind(str, Enum):
    UNRESOLVED_ENDPOINT = "unresolved_endpoint"
    MALFORMED_GEOMETRY = "malformed_geometry"
    INVALID_SEGMENT = "invalid_segment"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lon: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)


class ResolvedStop(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: Optional[str] = None
    is_hub: bool = False
    hub_level: Optional[str] = None
    coordinate: Coordinate
    is_transfer: bool = False
    coordinate_source: CoordinateSource = CoordinateSource.OWN


class SegmentMetadata(BaseModel):
    distance_km: Optional[float] = None
    duration_min: Optional[float] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    is_direct: Optional[bool] = None
    via_hubs: List[Dict[str, Any]] = Field(default_factory=list)


class RenderableSegment(BaseModel):
    segment_id: str
    index: int = Field(ge=0)
    transport_mode: TransportMode
    from_stop: ResolvedStop
    to_stop: ResolvedStop
    # None means "draw a straight line between from and to"
    path_geometry: Optional[List[Coordinate]] = None
    axis_order: Optional[AxisOrder] = None
    straight_line_km: float = Field(ge=0)
    metadata: SegmentMetadata = Field(default_factory=SegmentMetadata)
    annotations: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_geometry(self):
        if self.path_geometry is not None and len(self.path_geometry) < 2:
            raise ValueError("path_geometry must hold at least 2 points when present")
        return self

    def coordinates(self) -> List[Coordinate]:
        out = [self.from_stop.coordinate, self.to_stop.coordinate]
        if self.path_geometry:
            out.extend(self.path_geometry)
        return out


class BoundingBox(BaseModel):
    north: float = Field(ge=-90.0, le=90.0)
    south: float = Field(ge=-90.0, le=90.0)
    east: float = Field(ge=-180.0, le=180.0)
    west: float = Field(ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def validate_order(self):
        if self.south > self.north:
            raise ValueError("south must not exceed north")
        if self.west > self.east:
            raise ValueError("west must not exceed east")
        return self

    def contains(self, coord: Coordinate) -> bool:
        return self.south <= coord.lat <= self.north and self.west <= coord.lon <= self.east

    def padded(self, fraction: float = 0.15) -> BoundingBox:
        return BoundingBox(**pad_bounds(self.model_dump(), fraction))


class RouteRenderModel(BaseModel):
    route_version: RouteVersion = "1.0"
    route_id: str
    segments: List[RenderableSegment] = Field(default_factory=list)
    bounds: BoundingBox
    is_fallback_bounds: bool = False


class Diagnostic(BaseModel):
    segment_index: int = Field(ge=0)
    segment_id: str
    kind: DiagnosticKind
    reason: str


class RouteRenderResult(BaseModel):
    model: RouteRenderModel
    diagnostics: List[Diagnostic] = Field(default_factory=list)
