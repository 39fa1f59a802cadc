"""Host map contract - what the render engine needs from a map library.

The engine drives a host map through this narrow interface only:
- named layer groups that accept primitives and can be cleared or removed
- set_view / fit_bounds to apply a target view
- invalidate_size with an optional completion callback

Tile source, attribution and zoom controls belong to the hosting application.
DeckHostMap (pydeck) is the production implementation; tests use a recording
implementation.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from travelmap.core.geo_calculator import LatLng
from travelmap.model.primitive import Primitive
from travelmap.model.view import Bounds


class HostLayerGroup(ABC):
    """A named container of primitives on the host map."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def add(self, primitive: Primitive) -> None:
        """Attach a primitive to this group."""
        raise NotImplementedError

    @abstractmethod
    def clear_layers(self) -> None:
        """Detach every primitive from this group."""
        raise NotImplementedError

    @abstractmethod
    def remove(self) -> None:
        """Remove the group itself from the host map."""
        raise NotImplementedError


class HostMap(ABC):
    """Map library facade owned by one render engine.

    Implementations raise HostMapUnavailableError from any method once their
    container has been torn down.
    """

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """True once the map container exists and can take layers."""
        raise NotImplementedError

    @property
    @abstractmethod
    def viewport_px(self) -> tuple[int, int]:
        """Current viewport size (width, height) in pixels."""
        raise NotImplementedError

    @abstractmethod
    def create_layer_group(self, name: str) -> HostLayerGroup:
        raise NotImplementedError

    def has_layer_group(self, group: HostLayerGroup) -> bool:
        """False if the host tore group down behind the engine's back."""
        return True

    @abstractmethod
    def set_view(self, center: LatLng, zoom: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def fit_bounds(self, bounds: Bounds, padding_px: tuple[int, int], max_zoom: int) -> None:
        """Fit bounds into the viewport with padding on each side, not zooming past max_zoom."""
        raise NotImplementedError

    @abstractmethod
    def invalidate_size(self, on_done: Callable[[], None] | None = None) -> None:
        """Ask the host to re-measure its container; on_done runs when it has."""
        raise NotImplementedError
