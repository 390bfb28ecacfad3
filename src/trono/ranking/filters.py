from __future__ import annotations

# Facet filtering + distance ranking for the "nearby" list.
#
# Everything here is pure and synchronous: the presentation layer calls it on every
# filter toggle or accepted position update, so it must never do I/O.
#
# Rules run in a fixed order and a POI is dropped at the first failing rule:
#   verified -> accessible -> baby_changing -> paper -> soap -> sink -> price -> gender/type tags

import threading
from dataclasses import dataclass, field
from typing import Sequence

from trono.core.geo import distance_m
from trono.domain.models import GENDER_TAGS, FilterCriteria, PointOfInterest, Position, RankedPoi

# (criteria attribute, amenity tag) pairs, in evaluation order.
AMENITY_FACETS: tuple[tuple[str, str], ...] = (
    ("is_accessible", "accessible"),
    ("has_baby_changer", "baby_changing"),
    ("has_paper", "paper"),
    ("has_soap", "soap"),
    ("has_sink", "sink"),
)


def _matches_type(poi: PointOfInterest, selected: Sequence[str], *, gender_fallback: bool) -> bool:
    if any(poi.has_tag(t) for t in selected):
        return True
    if not gender_fallback:
        return False
    # Legacy heuristic: a POI with no gender tag at all serves both male and female.
    untagged = not any(poi.has_tag(t) for t in GENDER_TAGS)
    return untagged and any(t in ("male", "female") for t in selected)


def passes_filters(poi: PointOfInterest, criteria: FilterCriteria, *, gender_fallback: bool = False) -> bool:
    """Return True if `poi` should be visible under `criteria`."""
    # Unverified submissions only show up in admin views, which bypass this module.
    if not poi.verified:
        return False

    for attr, tag in AMENITY_FACETS:
        if not getattr(criteria, attr).admits(poi.has_tag(tag)):
            return False

    if not criteria.is_free.admits(poi.is_free):
        return False

    if criteria.types and not _matches_type(poi, criteria.types, gender_fallback=gender_fallback):
        return False

    return True


def rank_with_distances(
    pois: Sequence[PointOfInterest],
    criteria: FilterCriteria,
    reference: Position | None,
    *,
    gender_fallback: bool = False,
) -> list[RankedPoi]:
    """Filter `pois` and attach distances; sorted by distance when `reference` is given."""
    survivors = [p for p in pois if passes_filters(p, criteria, gender_fallback=gender_fallback)]
    if reference is None:
        return [RankedPoi(poi=p) for p in survivors]

    ranked = [
        RankedPoi(
            poi=p,
            distance_m=distance_m(reference.latitude, reference.longitude, p.latitude, p.longitude),
        )
        for p in survivors
    ]
    # `sorted` is stable, so equal distances keep input order.
    return sorted(ranked, key=lambda r: r.distance_m)


def filter_and_rank(
    pois: Sequence[PointOfInterest],
    criteria: FilterCriteria,
    reference: Position | None = None,
    *,
    gender_fallback: bool = False,
) -> list[PointOfInterest]:
    """Return the visible POIs, nearest first (or in input order without a reference)."""
    return [r.poi for r in rank_with_distances(pois, criteria, reference, gender_fallback=gender_fallback)]


@dataclass
class RankingMemo:
    """Caches the last `filter_and_rank` result.

    The key is (collection identity, collection version, criteria, reference).
    POI models are mutable, so callers bump `version` whenever they change the
    collection in place; replacing the list object is detected by identity.
    """

    gender_fallback: bool = False
    hits: int = 0
    misses: int = 0
    # (pois, key, value); always replaced as a whole.
    _entry: tuple | None = field(default=None, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def ranked(
        self,
        pois: Sequence[PointOfInterest],
        criteria: FilterCriteria,
        reference: Position | None,
        *,
        version: int = 0,
    ) -> tuple[RankedPoi, ...]:
        key = (version, criteria, reference)
        entry = self._entry
        if entry is not None and entry[0] is pois and entry[1] == key:
            with self._lock:
                self.hits += 1
            return entry[2]
        value = tuple(rank_with_distances(pois, criteria, reference, gender_fallback=self.gender_fallback))
        self._entry = (pois, key, value)
        with self._lock:
            self.misses += 1
        return value

    def __call__(
        self,
        pois: Sequence[PointOfInterest],
        criteria: FilterCriteria,
        reference: Position | None,
        *,
        version: int = 0,
    ) -> list[PointOfInterest]:
        return [r.poi for r in self.ranked(pois, criteria, reference, version=version)]

    def invalidate(self) -> None:
        self._entry = None
