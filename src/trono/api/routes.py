"""
API routes.

Endpoints:
- GET  `/api/health`: liveness check.
- GET  `/api/settings`: public display/location settings for clients.
- POST `/api/nearby`: filter + rank the catalog snapshot for a reference position.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from trono.catalog.loader import load_pois
from trono.config.settings import get_settings
from trono.display.format import format_distance, format_price, format_rating, format_short_address
from trono.domain.models import FilterCriteria, PointOfInterest, Position, RankedPoi
from trono.ranking.filters import RankingMemo

router = APIRouter()


class NearbyRequest(BaseModel):
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)
    reference: Position | None = None
    limit: int | None = Field(default=None, ge=1, le=500)


class NearbyItem(BaseModel):
    poi: PointOfInterest
    distance_m: float | None = None
    distance_label: str | None = None
    price_label: str
    rating_label: str
    short_address: str


class NearbyResponse(BaseModel):
    count: int
    results: list[NearbyItem]


@lru_cache
def _pois() -> list[PointOfInterest]:
    return load_pois(get_settings().catalog.path)


@lru_cache
def _memo() -> RankingMemo:
    return RankingMemo(gender_fallback=get_settings().ranking.gender_fallback)


def _to_item(ranked: RankedPoi) -> NearbyItem:
    display = get_settings().display
    poi = ranked.poi
    return NearbyItem(
        poi=poi,
        distance_m=ranked.distance_m,
        distance_label=format_distance(ranked.distance_m) if ranked.distance_m is not None else None,
        price_label=format_price(poi.price, free_label=display.free_label, currency=display.currency),
        rating_label=format_rating(poi.rating, vote_count=poi.vote_count, no_rating_label=display.no_rating_label),
        short_address=format_short_address(poi.address, display.address_placeholder),
    )


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/settings")
def get_public_settings() -> dict[str, Any]:
    """Return the client-relevant subset of settings."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name},
        "display": settings.display.model_dump(),
        "location": settings.location.model_dump(exclude={"storage_key"}),
        "map": settings.map.model_dump(),
    }


@router.post("/api/nearby", response_model=NearbyResponse)
def post_nearby(request: NearbyRequest) -> NearbyResponse:
    ranked = _memo().ranked(_pois(), request.criteria, request.reference)
    if request.limit is not None:
        ranked = ranked[: request.limit]
    return NearbyResponse(count=len(ranked), results=[_to_item(r) for r in ranked])
