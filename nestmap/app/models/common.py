"""Common types and enums shared across all models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model for trip store payloads (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Geo(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class _LenientEnum(str, Enum):
    """String enum that maps unrecognized input to a fallback member."""

    @classmethod
    def fallback(cls) -> "_LenientEnum":
        raise NotImplementedError

    @classmethod
    def parse(cls, value: Any) -> "_LenientEnum":
        """Case-insensitive lookup; None, "null" and unknown strings fall back."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.fallback()
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.fallback()


class TravelMode(_LenientEnum):
    """Declared mode of transport from the previous activity."""

    walking = "walking"
    driving = "driving"
    transit = "transit"
    unknown = "unknown"

    @classmethod
    def fallback(cls) -> "TravelMode":
        return cls.unknown


class TravelIcon(str, Enum):
    """Icon shown next to the travel leg of an activity."""

    walking = "footprints"
    driving = "car"
    transit = "train"
    unknown = "navigation"


class ActivityTag(_LenientEnum):
    """Activity category."""

    food = "food"
    culture = "culture"
    sightseeing = "sightseeing"
    outdoor = "outdoor"
    nature = "nature"
    adventure = "adventure"
    shopping = "shopping"
    entertainment = "entertainment"
    nightlife = "nightlife"
    wellness = "wellness"
    transport = "transport"
    accommodation = "accommodation"
    other = "other"
    unknown = "unknown"

    @classmethod
    def fallback(cls) -> "ActivityTag":
        return cls.unknown


class CostCategory(_LenientEnum):
    """Spending category for budget tracking."""

    food = "food"
    accommodation = "accommodation"
    transport = "transport"
    activities = "activities"
    shopping = "shopping"
    other = "other"
    uncategorized = "uncategorized"

    @classmethod
    def fallback(cls) -> "CostCategory":
        return cls.uncategorized
