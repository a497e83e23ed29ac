"""Data models shared by the search client, the aggregator and the exporters."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .utils import dedup_key

NOT_AVAILABLE = "N/A"
DEFAULT_TYPE = "GMN"
PLACEHOLDER_URI = "#"


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class BusinessContact:
    """One business row extracted from a model reply.

    Two contacts describe the same business when their ``dedup_key`` matches;
    ``id`` only tells instances apart and is never compared for that.
    """

    name: str
    phone: str = NOT_AVAILABLE
    email: str = NOT_AVAILABLE
    address: str = NOT_AVAILABLE
    website: str = NOT_AVAILABLE
    rating: str = NOT_AVAILABLE
    type: str = DEFAULT_TYPE
    id: str = field(default_factory=_new_id, compare=False)

    @property
    def dedup_key(self) -> str:
        return dedup_key(self.name, self.phone)

    def to_row(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "website": self.website,
            "rating": self.rating,
            "type": self.type,
        }


@dataclass(frozen=True)
class GroundingSource:
    title: str
    uri: str = PLACEHOLDER_URI

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "uri": self.uri}


@dataclass
class SearchResult:
    """Outcome of a full aggregation run, in discovery order."""

    contacts: List[BusinessContact] = field(default_factory=list)
    sources: List[GroundingSource] = field(default_factory=list)
    raw_text: str = ""


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    @classmethod
    def from_values(cls, lat: object, lng: object) -> Optional["Location"]:
        """Build a location from loosely typed input, or None when unusable."""
        if lat in (None, "") or lng in (None, ""):
            return None
        try:
            latitude = float(lat)  # type: ignore[arg-type]
            longitude = float(lng)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
            return None
        return cls(latitude=latitude, longitude=longitude)


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"
