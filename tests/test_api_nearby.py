from conftest import make_poi, north_of
from starlette.testclient import TestClient

from trono.api.app import app

ORIGIN = {"latitude": 19.4326, "longitude": -99.1332}

_POIS = [
    make_poi(
        "far",
        latitude=north_of(19.4326, 1234),
        is_free=False,
        price=10.5,
        rating=4.25,
        vote_count=3,
        address="Madero 32, Centro, CDMX",
    ),
    make_poi("near", latitude=north_of(19.4326, 73), amenities=["accessible"]),
    make_poi("hidden", verified=False),
]


def _client(monkeypatch):
    import trono.api.routes as routes

    monkeypatch.setattr(routes, "_pois", lambda: _POIS)
    return TestClient(app)


def test_health(monkeypatch):
    with _client(monkeypatch) as c:
        assert c.get("/api/health").json() == {"status": "ok"}


def test_nearby_ranks_and_formats(monkeypatch):
    with _client(monkeypatch) as c:
        resp = c.post("/api/nearby", json={"reference": ORIGIN})
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 2
    near, far = data["results"]
    assert near["poi"]["id"] == "near"
    assert near["distance_label"] == "70m"
    assert near["price_label"] == "Gratis"
    assert near["rating_label"] == "—"
    assert near["short_address"] == "Sin dirección"
    assert far["distance_label"] == "1.2km"
    assert far["price_label"] == "11 Bs"
    assert far["rating_label"] == "4.3"
    assert far["short_address"] == "Madero 32, Centro"


def test_nearby_filters_without_reference(monkeypatch):
    payload = {"criteria": {"is_accessible": True, "is_free": None}, "limit": 5}
    with _client(monkeypatch) as c:
        data = c.post("/api/nearby", json=payload).json()
    assert [r["poi"]["id"] for r in data["results"]] == ["near"]
    assert data["results"][0]["distance_m"] is None
    assert data["results"][0]["distance_label"] is None


def test_nearby_limit_and_validation(monkeypatch):
    with _client(monkeypatch) as c:
        limited = c.post("/api/nearby", json={"reference": ORIGIN, "limit": 1}).json()
        bad = c.post("/api/nearby", json={"criteria": {"types": ["robot"]}})
    assert [r["poi"]["id"] for r in limited["results"]] == ["near"]
    assert bad.status_code == 422


def test_public_settings_hide_storage_key(monkeypatch):
    with _client(monkeypatch) as c:
        data = c.get("/api/settings").json()
    assert data["display"]["free_label"] == "Gratis"
    assert data["location"]["min_movement_threshold_m"] == 10
    assert "storage_key" not in data["location"]


def test_cors_is_off_unless_origins_are_listed(monkeypatch):
    from trono.api.app import create_app

    monkeypatch.delenv("TRONO_CORS_ORIGINS", raising=False)
    with TestClient(create_app()) as c:
        resp = c.get("/api/health", headers={"Origin": "http://map.example"})
    assert "access-control-allow-origin" not in resp.headers

    monkeypatch.setenv("TRONO_CORS_ORIGINS", " http://map.example , ")
    with TestClient(create_app()) as c:
        allowed = c.get("/api/health", headers={"Origin": "http://map.example"})
        other = c.get("/api/health", headers={"Origin": "http://evil.example"})
    assert allowed.headers["access-control-allow-origin"] == "http://map.example"
    assert "access-control-allow-origin" not in other.headers
