"""
Domain models (Pydantic).

These types are the stable "contract" between the core and its collaborators:
- POI snapshots handed in by the data source (`PointOfInterest`)
- device fixes produced by the location stabilizer (`Position`)
- facet filters set by the presentation layer (`FilterCriteria`)

Filter and position models are frozen so they can key the ranking memo.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PoiStatus = Literal["open", "closed", "unknown"]
PoiType = Literal["public", "commerce", "restaurant", "gas_station", "other"]
Amenity = Literal[
    "accessible",
    "unisex",
    "baby_changing",
    "paper",
    "soap",
    "sink",
    "private",
    "male",
    "female",
]
GenderTag = Literal["male", "female", "unisex"]

GENDER_TAGS: frozenset[str] = frozenset({"male", "female", "unisex"})


class TriState(str, Enum):
    """A filter facet: require the flag, require its absence, or ignore it."""

    REQUIRED = "required"
    EXCLUDED = "excluded"
    ANY = "any"

    @classmethod
    def coerce(cls, value: Any) -> "TriState":
        if value is None:
            return cls.ANY
        if value is True:
            return cls.REQUIRED
        if value is False:
            return cls.EXCLUDED
        return cls(value)

    def admits(self, flag: bool) -> bool:
        if self is TriState.REQUIRED:
            return flag
        if self is TriState.EXCLUDED:
            return not flag
        return True


class Position(BaseModel):
    """A device fix or reference location in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    accuracy: float | None = None  # meters
    timestamp: float | None = None  # epoch milliseconds


class PointOfInterest(BaseModel):
    """A discoverable amenity record (read-only inside the core)."""

    id: str
    name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    created_at: str | None = None

    address: str | None = None
    type: PoiType = "other"
    description: str | None = None

    price: float = Field(0, ge=0)
    is_free: bool = True

    rating: float = Field(0, ge=0, le=5)
    vote_count: int = Field(0, ge=0)

    status: PoiStatus = "unknown"
    opening_time: str | None = None
    closing_time: str | None = None

    amenities: list[Amenity] = Field(
        default_factory=list, validation_alias=AliasChoices("amenities", "tags")
    )
    verified: bool = False
    photos: list[str] = Field(default_factory=list)

    @field_validator("photos", mode="before")
    @classmethod
    def _none_photos(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("amenities", mode="before")
    @classmethod
    def _none_amenities(cls, value: Any) -> Any:
        return [] if value is None else value

    def has_tag(self, tag: str) -> bool:
        return tag in self.amenities

    @property
    def featured_photo(self) -> str | None:
        return self.photos[0] if self.photos else None


class FilterCriteria(BaseModel):
    """Facet filters; every field defaults to "no constraint"."""

    model_config = ConfigDict(frozen=True)

    types: tuple[GenderTag, ...] = ()
    is_accessible: TriState = TriState.ANY
    has_baby_changer: TriState = TriState.ANY
    has_paper: TriState = TriState.ANY
    has_soap: TriState = TriState.ANY
    has_sink: TriState = TriState.ANY
    is_free: TriState = TriState.ANY

    @field_validator(
        "is_accessible",
        "has_baby_changer",
        "has_paper",
        "has_soap",
        "has_sink",
        "is_free",
        mode="before",
    )
    @classmethod
    def _coerce_tristate(cls, value: Any) -> TriState:
        return TriState.coerce(value)

    @field_validator("types", mode="before")
    @classmethod
    def _types_to_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(dict.fromkeys(value))


class ParsedAddress(BaseModel):
    """Best-effort split of a comma-delimited address (most specific first)."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    full: str = ""


class RankedPoi(BaseModel):
    """A ranked POI plus its distance from the reference position, if any."""

    poi: PointOfInterest
    distance_m: float | None = None
