from __future__ import annotations

import pytest

from routemap.config import DEFAULT_FALLBACK_BOUNDS, Settings, load_settings


ENV_VARS = (
    "ROUTEMAP_AXIS_TOLERANCE_DEG",
    "ROUTEMAP_DEFAULT_AXIS_ORDER",
    "ROUTEMAP_FALLBACK_BOUNDS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert load_settings() == Settings()
    assert Settings().fallback_bounds == (73.0, 55.0, 140.0, 105.0)
    assert Settings().axis_tolerance_deg == 0.1


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("ROUTEMAP_AXIS_TOLERANCE_DEG", "0.25")
    monkeypatch.setenv("ROUTEMAP_DEFAULT_AXIS_ORDER", "lon-lat")
    monkeypatch.setenv("ROUTEMAP_FALLBACK_BOUNDS", "60, 50, 130, 110")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.axis_tolerance_deg == 0.25
    assert settings.default_axis_order == "lon_lat"
    assert settings.fallback_bounds == (60.0, 50.0, 130.0, 110.0)
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "name,value",
    [
        ("ROUTEMAP_AXIS_TOLERANCE_DEG", "wide"),
        ("ROUTEMAP_AXIS_TOLERANCE_DEG", "-1"),
        ("ROUTEMAP_AXIS_TOLERANCE_DEG", "nan"),
        ("ROUTEMAP_DEFAULT_AXIS_ORDER", "xy"),
        ("ROUTEMAP_FALLBACK_BOUNDS", "1,2,3"),
        ("ROUTEMAP_FALLBACK_BOUNDS", "50,60,130,110"),
        ("ROUTEMAP_FALLBACK_BOUNDS", "north,south,east,west"),
        ("LOG_LEVEL", "chatty"),
    ],
)
def test_invalid_values_fall_back_to_defaults(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    assert load_settings() == Settings()


def test_settings_are_immutable():
    with pytest.raises(AttributeError):
        Settings().fallback_bounds = DEFAULT_FALLBACK_BOUNDS
