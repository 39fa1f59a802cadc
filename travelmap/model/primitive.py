"""Map primitives - the values the engine hands to the host map.

Primitives are ephemeral: they are rebuilt from the trip data on every
render pass and compared by value (dataclass equality), which is what makes
two identical render passes produce identical layer contents.

- Marker: one point with an icon style and popup
- Polyline: ordered points with a line style and popup

Styles and popups are frozen and shared by reference between world copies;
coordinates are per-copy.
"""

from dataclasses import dataclass
from enum import Enum

from travelmap.core.geo_calculator import LatLng


class MarkerRole(Enum):
    """What a marker represents for its item."""

    ORIGIN = "origin"
    DESTINATION = "destination"
    STAY = "stay"


@dataclass(frozen=True)
class MarkerStyle:
    """Icon style keyed by transport class and active flag.

    Attributes:
        color: Fill color (hex)
        border_px: White border width (2 inactive, 3 active)
        size_px: Icon diameter in pixels
        glyph: Optional text drawn on the icon ("H" for stays)
    """

    color: str
    border_px: int
    size_px: int
    glyph: str | None = None


@dataclass(frozen=True)
class PolylineStyle:
    """Line style keyed by transport class and active flag."""

    color: str
    weight: int
    opacity: float
    dash: tuple[int, int] | None = None


@dataclass(frozen=True)
class RoutePopup:
    """Popup for a route polyline."""

    transport: str
    origin_name: str
    destination_name: str

    @property
    def lines(self) -> list[str]:
        return [self.transport, f"From: {self.origin_name}", f"To: {self.destination_name}"]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class LocationPopup:
    """Popup for a segment endpoint: "name (code)"."""

    name: str
    code: str | None = None

    @property
    def lines(self) -> list[str]:
        return [f"{self.name} ({self.code})" if self.code else self.name]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class StayPopup:
    """Popup for a stay marker: name, notes and date range."""

    name: str
    date_start: str
    date_end: str
    notes: str | None = None

    @property
    def date_range(self) -> str:
        return f"{self.date_start} to {self.date_end}"

    @property
    def lines(self) -> list[str]:
        lines = [self.name]
        if self.notes:
            lines.append(self.notes)
        lines.append(self.date_range)
        return lines

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


PopupPayload = RoutePopup | LocationPopup | StayPopup


@dataclass
class Marker:
    """A point primitive.

    Attributes:
        item_id: ID of the segment or stay this marker belongs to
        role: Origin, destination or stay
        lat: Latitude in degrees
        lng: Longitude in degrees (may exceed ±180 after world-wrap)
        style: Shared icon style
        popup: Shared popup payload
        layer_key: Destination layer group
        lng_offset: World-copy shift applied to lng (0 for the home copy)
        no_wrap: True once replicated - the host must not re-wrap it
    """

    item_id: str
    role: MarkerRole
    lat: float
    lng: float
    style: MarkerStyle
    popup: PopupPayload
    layer_key: str
    lng_offset: float = 0.0
    no_wrap: bool = False

    @property
    def position(self) -> LatLng:
        return (self.lat, self.lng)

    @property
    def dedup_key(self) -> tuple[str, MarkerRole, float]:
        """Identity of this marker within one engine state."""
        return (self.item_id, self.role, self.lng_offset)


@dataclass
class Polyline:
    """A line primitive.

    Attributes:
        item_id: ID of the segment this line belongs to
        points: Ordered (lat, lng) points
        style: Shared line style
        popup: Shared popup payload
        layer_key: Destination layer group
        lng_offset: World-copy shift applied to every point
        no_wrap: True once replicated
        part: Index of the sub-polyline after antimeridian splitting
    """

    item_id: str
    points: list[LatLng]
    style: PolylineStyle
    popup: PopupPayload
    layer_key: str
    lng_offset: float = 0.0
    no_wrap: bool = False
    part: int = 0

    @property
    def is_degenerate(self) -> bool:
        """True if every point coincides (nothing to draw)."""
        return len(set(self.points)) < 2


Primitive = Marker | Polyline
