# path: route-map-api/routemap/api/routes/routes.py

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query

from routemap.models.route_models import RouteRenderResult
from routemap.services.route_normalizer import normalize_raw_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/render-model", response_model=RouteRenderResult)
def build_render_model(
    raw: Dict[str, Any] = Body(...),
    padding: Optional[float] = Query(None, ge=0.0, le=1.0),
) -> RouteRenderResult:
    # Pure transformation of an itinerary already built upstream; nothing is stored.
    try:
        result = normalize_raw_route(raw)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if padding and result.model.segments:
        result.model.bounds = result.model.bounds.padded(padding)
    return result
