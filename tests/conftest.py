from __future__ import annotations

import pytest

from routemap.config import Settings
from routemap.services.stop_names import StopNameCache


YAKUTSK = (62.0355, 129.6755)
MIRNY = (62.5353, 113.9614)
MOSCOW = (55.7558, 37.6173)


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def name_cache():
    return StopNameCache()


@pytest.fixture()
def make_stop():
    def _make(stop_id, lat=None, lon=None, **extra):
        stop = {"id": stop_id}
        if lat is not None and lon is not None:
            stop["coordinates"] = {"latitude": lat, "longitude": lon}
        stop.update(extra)
        return stop

    return _make


@pytest.fixture()
def make_segment():
    def _make(seg_id, from_stop, to_stop, **extra):
        seg = {"id": seg_id, "from": from_stop, "to": to_stop}
        seg.update(extra)
        return seg

    return _make
