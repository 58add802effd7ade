# path: route-map-api/routemap/services/transfers.py

from __future__ import annotations

from typing import Literal, Optional, Sequence, Tuple

Boundary = Literal["from", "to"]

# (from stop id, to stop id) per segment, in route order
StopIdPairs = Sequence[Tuple[Optional[str], Optional[str]]]


def is_transfer(stop_ids: StopIdPairs, index: int, boundary: Boundary) -> bool:
    if boundary == "from":
        if index <= 0 or index >= len(stop_ids):
            return False
        own = stop_ids[index][0]
        other = stop_ids[index - 1][1]
    else:
        if index < 0 or index >= len(stop_ids) - 1:
            return False
        own = stop_ids[index][1]
        other = stop_ids[index + 1][0]
    return bool(own) and own == other
