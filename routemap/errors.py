# path: route-map-api/routemap/errors.py

from __future__ import annotations


class RouteMapError(Exception):
    """Base class for errors raised by the route-map pipeline."""


class InvalidRouteDescriptor(RouteMapError, ValueError):
    """Descriptor is not an object, or its `segments` is not a list."""
