import json
import logging

import pytest

from trono.catalog.loader import load_pois


def test_load_pois_keeps_order_and_normalizes_nulls(tmp_path):
    path = tmp_path / "pois.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "name": "One", "latitude": 1, "longitude": 2, "photos": None, "amenities": None},
                {"id": "2", "name": "Two", "latitude": 3, "longitude": 4, "tags": ["paper"], "verified": True},
            ]
        ),
        encoding="utf-8",
    )
    pois = load_pois(path)
    assert [p.id for p in pois] == ["1", "2"]
    assert pois[0].photos == [] and pois[0].amenities == []
    assert pois[1].has_tag("paper")
    assert pois[0].featured_photo is None


def test_load_pois_skips_invalid_entries(tmp_path, caplog):
    path = tmp_path / "pois.json"
    path.write_text(
        json.dumps(
            {
                "pois": [
                    {"id": "ok", "name": "Ok", "latitude": 1, "longitude": 2},
                    {"id": "bad", "name": "Bad", "latitude": 1, "longitude": 2, "amenities": ["jacuzzi"]},
                    {"id": "neg", "name": "Neg", "latitude": 1, "longitude": 2, "price": -1},
                ]
            }
        ),
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING, logger="trono.catalog.loader"):
        pois = load_pois(path)
    assert [p.id for p in pois] == ["ok"]
    assert "Skipping invalid POI" in caplog.text


def test_load_pois_rejects_non_list_root(tmp_path):
    path = tmp_path / "pois.json"
    path.write_text(json.dumps("nope"), encoding="utf-8")
    with pytest.raises(ValueError, match="expected a list"):
        load_pois(path)


def test_bundled_sample_catalog_loads():
    from trono.core.env import resolve_project_path

    pois = load_pois(resolve_project_path("data/pois.json"))
    assert len(pois) == 4
    assert sum(1 for p in pois if not p.verified) == 1


def test_audit_pois_flags_inconsistencies():
    from conftest import make_poi

    from trono.catalog.loader import audit_pois

    pois = [
        make_poi("a"),
        make_poi("a", verified=False),
        make_poi("b", price=5, is_free=True),
        make_poi("c", rating=4.0, vote_count=0),
    ]
    audit = audit_pois(pois)
    assert audit.total == 4
    assert audit.unverified == 1
    assert audit.duplicate_ids == ["a"]
    assert audit.price_mismatches == ["b"]
    assert audit.rated_without_votes == ["c"]
    assert not audit.ok
