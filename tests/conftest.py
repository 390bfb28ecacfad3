from __future__ import annotations

import math

import pytest

from trono.config.settings import get_settings
from trono.core.geo import EARTH_RADIUS_M
from trono.domain.models import PointOfInterest


def north_of(lat: float, meters: float) -> float:
    """Latitude `meters` due north of `lat` (exact on the haversine sphere)."""
    return lat + math.degrees(meters / EARTH_RADIUS_M)


def make_poi(poi_id: str, **overrides) -> PointOfInterest:
    data = {
        "id": poi_id,
        "name": f"POI {poi_id}",
        "latitude": 19.4326,
        "longitude": -99.1332,
        "price": 0,
        "is_free": True,
        "verified": True,
        "amenities": [],
    }
    data.update(overrides)
    return PointOfInterest.model_validate(data)


@pytest.fixture(autouse=True)
def _fresh_settings():
    # Settings are lru_cached; tests that touch env vars must not leak into others.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
