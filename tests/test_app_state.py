from conftest import make_poi, north_of

from trono.config.settings import get_settings
from trono.domain.models import FilterCriteria, Position, TriState
from trono.state import AppState, DraftLocation, MapViewState


def test_defaults_from_settings():
    state = AppState.from_settings(get_settings())
    assert state.map_view == MapViewState(latitude=19.4326, longitude=-99.1332, zoom=13)
    assert state.selected_poi is None
    assert state.user_location is None
    assert state.filters == FilterCriteria()
    assert not state.is_add_modal_open
    assert not state.is_dark_mode


def test_visible_pois_follow_filters_and_location():
    state = AppState()
    state.set_pois(
        [
            make_poi("far", latitude=north_of(19.4326, 800), is_free=False, price=3),
            make_poi("near", latitude=north_of(19.4326, 50)),
            make_poi("hidden", verified=False),
        ]
    )
    assert [p.id for p in state.visible_pois()] == ["far", "near"]

    state.set_user_location(Position(latitude=19.4326, longitude=-99.1332))
    assert [p.id for p in state.visible_pois()] == ["near", "far"]

    criteria = state.update_filters(is_free=False)
    assert criteria.is_free is TriState.EXCLUDED
    assert [p.id for p in state.visible_pois()] == ["far"]

    state.set_filters(FilterCriteria())
    assert len(state.visible_pois()) == 2


def test_visible_list_is_memoized_until_collection_changes():
    state = AppState()
    state.set_pois([make_poi("a")])

    first = state.visible_ranked()
    assert state.visible_ranked() is first

    state.add_poi(make_poi("b"))
    assert [r.poi.id for r in state.visible_ranked()] == ["a", "b"]
    assert state.memo.misses == 2


def test_ui_setters():
    state = AppState()
    poi = make_poi("x")
    state.set_selected_poi(poi)
    state.set_map_view(MapViewState(latitude=20, longitude=-100, zoom=15))
    state.set_draft_location(DraftLocation(latitude=19.4, longitude=-99.1, address="Draft Address"))
    state.set_add_modal_open(True)
    state.set_dark_mode(True)

    assert state.selected_poi is poi
    assert state.map_view.zoom == 15
    assert state.draft_location.address == "Draft Address"
    assert state.is_add_modal_open and state.is_dark_mode

    state.set_selected_poi(None)
    assert state.selected_poi is None
