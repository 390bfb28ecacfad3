"""
Display formatting helpers.

Labels shown next to each POI are redrawn on every accepted position update, so
distances use tiered rounding that hides small fluctuations:
- under 100 m: nearest 10 m (never below "10m")
- 100 m up to 1 km: nearest 50 m, shown at most as "950m"
- 1 km and above: kilometers with one decimal

All rounding is half-up; Python's `round()` rounds half to even and would make
"95 m" read "100m" but "85 m" read "80m".

Non-finite inputs render as a placeholder instead of raising.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from trono.domain.models import ParsedAddress

# Shown when a number cannot be rendered (NaN or infinity).
UNKNOWN_LABEL = "-"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_distance(meters: float) -> str:
    if not math.isfinite(meters):
        return UNKNOWN_LABEL
    if meters < 100:
        return f"{max(10, round_half_up(meters / 10) * 10)}m"
    if meters < 1000:
        return f"{min(950, round_half_up(meters / 50) * 50)}m"
    km = round_half_up(meters / 100) / 10
    return f"{km:.1f}km"


def format_price(price: float, *, free_label: str = "Gratis", currency: str = "Bs") -> str:
    if not math.isfinite(price):
        return UNKNOWN_LABEL
    if price == 0:
        return free_label
    return f"{round_half_up(price)} {currency}"


def format_rating(rating: float, *, vote_count: int | None = None, no_rating_label: str = "—") -> str:
    """One decimal place; `no_rating_label` when the POI has no votes yet."""
    if vote_count == 0 or not math.isfinite(rating):
        return no_rating_label
    return str(Decimal(rating).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_address(full_address: str | None) -> ParsedAddress:
    """Split "street, city, state, country" into parts (heuristic; never raises)."""
    full = full_address or ""
    parts = [p.strip() for p in full.split(",")]
    parts = [p for p in parts if p]

    fields = ("street", "city", "state", "country")
    return ParsedAddress(full=full, **dict(zip(fields, parts)))


def format_short_address(full_address: str | None, fallback: str = "Sin dirección") -> str:
    parsed = parse_address(full_address)
    if parsed.street and parsed.city:
        return f"{parsed.street}, {parsed.city}"
    if parsed.street:
        return parsed.street
    if parsed.full:
        return parsed.full
    return fallback
