"""
POI catalog loader.

The catalog is a local JSON snapshot (default: `data/pois.json`) of the POI table:
a list of objects with coordinates, facets and moderation flags. Entries are
validated one by one into `PointOfInterest`; invalid entries are logged and
skipped so one bad submission does not hide the whole map.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from trono.core.env import resolve_project_path
from trono.domain.models import PointOfInterest

logger = logging.getLogger(__name__)


def load_pois(path: str | Path) -> list[PointOfInterest]:
    """Load and validate a POI catalog JSON file (input order is preserved)."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("pois", [])
    if not isinstance(payload, list):
        raise ValueError(f"Invalid catalog root in {resolved}; expected a list of POIs.")

    pois: list[PointOfInterest] = []
    for i, raw in enumerate(payload):
        try:
            pois.append(PointOfInterest.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping invalid POI #%d in %s: %s", i, resolved.name, exc.errors()[:1])
    return pois


@dataclass
class CatalogAudit:
    """Offline consistency report for a POI snapshot."""

    total: int = 0
    unverified: int = 0
    duplicate_ids: list[str] = field(default_factory=list)
    price_mismatches: list[str] = field(default_factory=list)
    rated_without_votes: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.duplicate_ids


def audit_pois(pois: list[PointOfInterest]) -> CatalogAudit:
    """Flag records the filters would treat surprisingly.

    `is_free` is authoritative for filtering, so a disagreement with `price == 0`
    is reported rather than fixed.
    """
    audit = CatalogAudit(total=len(pois))
    seen: set[str] = set()
    for p in pois:
        if p.id in seen:
            audit.duplicate_ids.append(p.id)
        seen.add(p.id)
        if not p.verified:
            audit.unverified += 1
        if p.is_free != (p.price == 0):
            audit.price_mismatches.append(p.id)
        if p.vote_count == 0 and p.rating > 0:
            audit.rated_without_votes.append(p.id)
    return audit
