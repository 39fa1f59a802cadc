"""Data structures for the travel map engine.

- TripData, Segment, Stay, NamedLocation: the trip being drawn
- Marker, Polyline: primitives handed to the host map
- FixedView, FitView, Bounds, RegionPreset, ViewMode: view values
- Messages and errors surfaced by the render engine
"""

from travelmap.model.errors import (
    EngineInvariantError,
    HostMapUnavailableError,
    InvalidInputError,
    LayerGroupFaultError,
    TravelMapError,
)
from travelmap.model.message import (
    HostMapUnavailableMessage,
    InvalidItemMessage,
    Message,
    MessageLevel,
    RenderErrorMessage,
    RenderFailedMessage,
)
from travelmap.model.primitive import (
    LocationPopup,
    Marker,
    MarkerRole,
    MarkerStyle,
    Polyline,
    PolylineStyle,
    Primitive,
    RoutePopup,
    StayPopup,
)
from travelmap.model.trip import NamedLocation, Segment, Stay, TripData
from travelmap.model.view import Bounds, FitView, FixedView, RegionPreset, TargetView, ViewMode

__all__ = [
    # Trip
    "TripData",
    "Segment",
    "Stay",
    "NamedLocation",
    # Primitives
    "Marker",
    "MarkerRole",
    "MarkerStyle",
    "Polyline",
    "PolylineStyle",
    "Primitive",
    "RoutePopup",
    "LocationPopup",
    "StayPopup",
    # Views
    "ViewMode",
    "Bounds",
    "FixedView",
    "FitView",
    "TargetView",
    "RegionPreset",
    # Messages
    "Message",
    "MessageLevel",
    "RenderErrorMessage",
    "HostMapUnavailableMessage",
    "RenderFailedMessage",
    "InvalidItemMessage",
    # Errors
    "TravelMapError",
    "InvalidInputError",
    "HostMapUnavailableError",
    "LayerGroupFaultError",
    "EngineInvariantError",
]
