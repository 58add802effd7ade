# path: route-map-api/routemap/services/geometry.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from routemap.models.route_models import AxisOrder, Coordinate
from routemap.services.coordinates import (
    RawPair,
    detect_axis_order,
    numeric_pair,
    pair_to_coordinate,
    resolve_coordinate,
)


@dataclass(frozen=True)
class ExtractedGeometry:
    points: Optional[List[Coordinate]]
    axis_order: Optional[AxisOrder] = None
    # set when a payload was present but had to be dropped
    discard_reason: Optional[str] = None


ABSENT = ExtractedGeometry(points=None)


def _raw_items(payload: Any) -> Optional[List[Any]]:
    if isinstance(payload, (list, tuple)):
        return list(payload)
    if isinstance(payload, Mapping):
        coords = payload.get("coordinates")
        if isinstance(coords, (list, tuple)):
            return list(coords)
    return None


def _split_items(items: List[Any]) -> Tuple[List[Tuple[int, RawPair]], List[Tuple[int, Coordinate]]]:
    # bare pairs need an axis decision; labelled points do not
    bare: List[Tuple[int, RawPair]] = []
    labelled: List[Tuple[int, Coordinate]] = []
    for pos, item in enumerate(items):
        if isinstance(item, Mapping):
            coord = resolve_coordinate(item)
            if coord is not None:
                labelled.append((pos, coord))
            continue
        pair = numeric_pair(item)
        if pair is not None:
            bare.append((pos, pair))
    return bare, labelled


def extract_path_geometry(
    payload: Any,
    from_coord: Optional[Coordinate],
    to_coord: Optional[Coordinate],
    tolerance: float = 0.1,
    default_order: AxisOrder = AxisOrder.LAT_LON,
) -> ExtractedGeometry:
    items = _raw_items(payload)
    if not items:
        return ABSENT

    bare, labelled = _split_items(items)
    usable = len(bare) + len(labelled)
    if usable < 2:
        return ExtractedGeometry(
            points=None,
            discard_reason=f"path geometry has {usable} usable point(s) of {len(items)}, need at least 2",
        )

    order: Optional[AxisOrder] = None
    placed: List[Tuple[int, Coordinate]] = list(labelled)
    if bare:
        order = detect_axis_order(
            [pair for _, pair in bare],
            endpoints=(from_coord, to_coord),
            tolerance=tolerance,
            default=default_order,
        )
        for pos, pair in bare:
            coord = pair_to_coordinate(pair, order)
            if coord is not None:
                placed.append((pos, coord))

    if len(placed) < 2:
        return ExtractedGeometry(
            points=None,
            axis_order=order,
            discard_reason=f"path geometry has {len(placed)} valid point(s) after axis resolution, need at least 2",
        )

    placed.sort(key=lambda item: item[0])
    return ExtractedGeometry(points=[coord for _, coord in placed], axis_order=order)
