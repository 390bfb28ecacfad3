"""
Application state for presentation layers.

One explicit object per session instead of a module-level store: the UI (or the
API/CLI) owns an `AppState`, mutates it through setters, and asks it for the
visible list. The core modules (`trono.core`, `trono.location`, `trono.ranking`,
`trono.display`) never import this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from trono.config.settings import Settings
from trono.domain.models import FilterCriteria, PointOfInterest, Position, RankedPoi
from trono.ranking.filters import RankingMemo


@dataclass(frozen=True)
class MapViewState:
    latitude: float = 19.4326
    longitude: float = -99.1332
    zoom: float = 13


@dataclass(frozen=True)
class DraftLocation:
    """A pin dropped during the "add POI" flow."""

    latitude: float
    longitude: float
    address: str | None = None


@dataclass
class AppState:
    pois: list[PointOfInterest] = field(default_factory=list)
    pois_version: int = 0
    filters: FilterCriteria = field(default_factory=FilterCriteria)
    user_location: Position | None = None
    selected_poi: PointOfInterest | None = None
    map_view: MapViewState = field(default_factory=MapViewState)
    draft_location: DraftLocation | None = None
    is_add_modal_open: bool = False
    is_dark_mode: bool = False
    memo: RankingMemo = field(default_factory=RankingMemo, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppState":
        return cls(
            map_view=MapViewState(
                latitude=settings.map.default_latitude,
                longitude=settings.map.default_longitude,
                zoom=settings.map.default_zoom,
            ),
            memo=RankingMemo(gender_fallback=settings.ranking.gender_fallback),
        )

    def set_pois(self, pois: list[PointOfInterest]) -> None:
        self.pois = list(pois)
        self.pois_version += 1

    def add_poi(self, poi: PointOfInterest) -> None:
        self.pois.append(poi)
        self.pois_version += 1

    def set_filters(self, filters: FilterCriteria) -> None:
        self.filters = filters

    def update_filters(self, **changes: object) -> FilterCriteria:
        """Replace individual facets, e.g. `update_filters(is_free=True)`."""
        self.filters = FilterCriteria.model_validate({**self.filters.model_dump(), **changes})
        return self.filters

    def set_user_location(self, location: Position | None) -> None:
        self.user_location = location

    def set_selected_poi(self, poi: PointOfInterest | None) -> None:
        self.selected_poi = poi

    def set_map_view(self, view: MapViewState) -> None:
        self.map_view = view

    def set_draft_location(self, draft: DraftLocation | None) -> None:
        self.draft_location = draft

    def set_add_modal_open(self, is_open: bool) -> None:
        self.is_add_modal_open = is_open

    def set_dark_mode(self, dark: bool) -> None:
        self.is_dark_mode = dark

    def visible_ranked(self) -> tuple[RankedPoi, ...]:
        return self.memo.ranked(self.pois, self.filters, self.user_location, version=self.pois_version)

    def visible_pois(self) -> list[PointOfInterest]:
        return [r.poi for r in self.visible_ranked()]
