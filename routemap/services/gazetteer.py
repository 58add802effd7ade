# path: route-map-api/routemap/services/gazetteer.py

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
import json
import logging

from routemap.models.route_models import Coordinate
from routemap.services.coordinates import make_coordinate

logger = logging.getLogger(__name__)

DEFAULT_GAZETTEER_PATH = Path(__file__).resolve().parent.parent / "data" / "gazetteer.json"


def _normalize_key(name_or_id: str) -> str:
    return name_or_id.strip().lower()


class Gazetteer:
    def __init__(self, entries: Iterable[Tuple[str, Coordinate]], version: str = "unversioned") -> None:
        table: Dict[str, Coordinate] = {}
        for name, coord in entries:
            key = _normalize_key(name)
            if key and key not in table:
                table[key] = coord
        self._entries: Mapping[str, Coordinate] = MappingProxyType(table)
        self.version = version

    @property
    def entries(self) -> Mapping[str, Coordinate]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, name_or_id: Any) -> Optional[Coordinate]:
        if not isinstance(name_or_id, str):
            return None
        key = _normalize_key(name_or_id)
        if not key:
            return None

        # exact key first, then the first key in table order containing or contained in the query
        exact = self._entries.get(key)
        if exact is not None:
            return exact

        for entry_key, coord in self._entries.items():
            if entry_key in key or key in entry_key:
                return coord
        return None


def load_gazetteer(path: Path = DEFAULT_GAZETTEER_PATH) -> Gazetteer:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    entries = []
    for i, row in enumerate(data.get("entries", [])):
        coord = make_coordinate(row.get("lat"), row.get("lon"))
        if coord is None:
            raise ValueError(f"Gazetteer entry {i} in {path} has an invalid coordinate: {row!r}")
        for name in row.get("names", []):
            entries.append((name, coord))

    gazetteer = Gazetteer(entries, version=str(data.get("version", "unversioned")))
    logger.debug("Loaded gazetteer %s with %d keys from %s", gazetteer.version, len(gazetteer), path)
    return gazetteer


DEFAULT_GAZETTEER = load_gazetteer()
