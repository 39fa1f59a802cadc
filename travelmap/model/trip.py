"""Trip data model - segments, stays and the trip that holds them.

The external trip shape (JSON-like dicts) is parsed leniently: a malformed
item still becomes a value so the engine can report it per render pass as
invalid input and carry on with the rest of the trip. Structural problems
(not a dict, no segments list) raise InvalidInputError immediately.

External shape:
    segments[]: {id, date, type, transport, origin{name, code?, coordinates}, destination{...}}
    stays[]: {id?, location, coordinates, dateStart, dateEnd, notes?}
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from travelmap.core.geo_calculator import GeoCalculator, LatLng
from travelmap.model.errors import InvalidInputError

logger = logging.getLogger(__name__)


def _parse_coordinates(raw: Any) -> LatLng:
    """Turn [lat, lng] into a float tuple; bad values become NaN."""
    try:
        lat, lng = raw
        return (float(lat), float(lng))
    except (TypeError, ValueError):
        return (float("nan"), float("nan"))


@dataclass(frozen=True)
class NamedLocation:
    """A geographic point with a display name and optional short code.

    Attributes:
        name: Display name ("Narita International Airport (NRT)")
        lat: Latitude in degrees
        lng: Longitude in degrees
        code: Short code, e.g. an airport code
    """

    name: str
    lat: float
    lng: float
    code: str | None = None

    @property
    def lat_lng(self) -> LatLng:
        return (self.lat, self.lng)

    @property
    def is_valid(self) -> bool:
        return GeoCalculator.is_valid_point(lat=self.lat, lng=self.lng)

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> "NamedLocation | None":
        if not data:
            return None
        lat, lng = _parse_coordinates(data.get("coordinates"))
        return NamedLocation(name=str(data.get("name", "")), lat=lat, lng=lng, code=data.get("code") or None)


@dataclass(frozen=True)
class Segment:
    """A directed transport event between two locations on a date.

    Attributes:
        id: Unique segment ID
        date: ISO 8601 date
        type: Transport class (flight, train, shuttle, walk, bus)
        transport: Human-readable label ("NH 11", "Skyliner")
        origin: Start location (None if missing in the source data)
        destination: End location (None if missing in the source data)
    """

    id: str
    date: str
    type: str
    transport: str
    origin: NamedLocation | None
    destination: NamedLocation | None

    def endpoints(self) -> tuple[NamedLocation, NamedLocation]:
        """Both endpoints, validated.

        Raises:
            InvalidInputError: Missing endpoint or unusable coordinates.
        """
        if self.origin is None or self.destination is None:
            raise InvalidInputError("segment is missing an endpoint", item_id=self.id)
        for role, location in (("origin", self.origin), ("destination", self.destination)):
            if not location.is_valid:
                raise InvalidInputError(
                    f"{role} has invalid coordinates ({location.lat}, {location.lng})", item_id=self.id
                )
        return self.origin, self.destination

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Segment":
        return Segment(
            id=str(data.get("id", "")),
            date=str(data.get("date", "")),
            type=str(data.get("type", "")),
            transport=str(data.get("transport", "")),
            origin=NamedLocation.from_dict(data.get("origin")),
            destination=NamedLocation.from_dict(data.get("destination")),
        )


@dataclass(frozen=True)
class Stay:
    """A lodging occurrence at one location over a date range."""

    id: str
    location: str
    lat: float
    lng: float
    date_start: str
    date_end: str
    notes: str | None = None

    @property
    def lat_lng(self) -> LatLng:
        return (self.lat, self.lng)

    def validate(self) -> None:
        """Raise InvalidInputError if the stay cannot be placed on the map."""
        if not GeoCalculator.is_valid_point(lat=self.lat, lng=self.lng):
            raise InvalidInputError(f"invalid coordinates ({self.lat}, {self.lng})", item_id=self.id)

    @staticmethod
    def default_id(location: str) -> str:
        """Stable ID derived from the location name: "stay-hyatt-regency-tokyo"."""
        return "stay-" + re.sub(r"\s+", "-", location.strip()).lower()

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Stay":
        location = str(data.get("location", ""))
        lat, lng = _parse_coordinates(data.get("coordinates"))
        return Stay(
            id=str(data.get("id") or data.get("_id") or Stay.default_id(location)),
            location=location,
            lat=lat,
            lng=lng,
            date_start=str(data.get("dateStart", "")),
            date_end=str(data.get("dateEnd", "")),
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class TripData:
    """A whole trip: ordered segments and stays."""

    segments: tuple[Segment, ...] = field(default_factory=tuple)
    stays: tuple[Stay, ...] = field(default_factory=tuple)
    name: str = ""

    def find_segment(self, item_id: str) -> Segment | None:
        return next((s for s in self.segments if s.id == item_id), None)

    def find_stay(self, item_id: str) -> Stay | None:
        return next((s for s in self.stays if s.id == item_id), None)

    def find_item(self, item_id: str | None) -> Segment | Stay | None:
        """Look up a focused item: segments first, then stays."""
        if item_id is None:
            return None
        return self.find_segment(item_id) or self.find_stay(item_id)

    @property
    def item_ids(self) -> list[str]:
        return [s.id for s in self.segments] + [s.id for s in self.stays]

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "TripData":
        """Parse the external trip shape.

        Raises:
            InvalidInputError: data is not a dict or segments/stays are not lists.
        """
        if not isinstance(data, dict):
            raise InvalidInputError(f"trip data must be a mapping, got {type(data).__name__}")
        raw_segments = data.get("segments", [])
        raw_stays = data.get("stays", [])
        if not isinstance(raw_segments, list) or not isinstance(raw_stays, list):
            raise InvalidInputError("trip data 'segments' and 'stays' must be lists")

        segments = tuple(Segment.from_dict(s) for s in raw_segments)
        stays = tuple(Stay.from_dict(s) for s in raw_stays)
        logger.info(f"[INPUT] Parsed trip: {len(segments)} segments, {len(stays)} stays")
        return TripData(segments=segments, stays=stays, name=str(data.get("tripName", "")))
