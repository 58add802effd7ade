# path: route-map-api/routemap/services/stop_names.py

from __future__ import annotations

from typing import Dict, Optional


class StopNameCache:
    # owned by the caller; share one instance across runs to carry names over

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._names: Dict[str, str] = dict(initial or {})

    def remember(self, stop_id: Optional[str], name: Optional[str]) -> None:
        if not stop_id or not name or name == stop_id:
            return
        self._names[stop_id] = name

    def lookup(self, stop_id: Optional[str]) -> Optional[str]:
        if not stop_id:
            return None
        return self._names.get(stop_id)

    def __contains__(self, stop_id: object) -> bool:
        return stop_id in self._names

    def __len__(self) -> int:
        return len(self._names)
