"""View values - what the view selector returns and the host map applies.

- ViewMode: world, region or local
- FixedView: center + zoom
- FitView: bounding box + pixel padding + max zoom
- Bounds: (south, west, north, east); east may exceed 180 for crossing boxes
- RegionPreset: application-supplied regional window
"""

from dataclasses import dataclass
from enum import Enum

from travelmap.constants import RegionConfig
from travelmap.core.geo_calculator import LatLng


class ViewMode(Enum):
    """Requested map view."""

    WORLD = "world"
    REGION = "region"
    LOCAL = "local"


@dataclass(frozen=True)
class Bounds:
    """Geographic bounding box in degrees."""

    south: float
    west: float
    north: float
    east: float

    @property
    def south_west(self) -> LatLng:
        return (self.south, self.west)

    @property
    def north_east(self) -> LatLng:
        return (self.north, self.east)

    @property
    def center(self) -> LatLng:
        return ((self.south + self.north) / 2, (self.west + self.east) / 2)

    def contains(self, lat: float, lng: float) -> bool:
        """Strict containment (points on the edge are outside)."""
        return self.south < lat < self.north and self.west < lng < self.east

    def inflated(self, margin_deg: float) -> "Bounds":
        return Bounds(
            south=self.south - margin_deg,
            west=self.west - margin_deg,
            north=self.north + margin_deg,
            east=self.east + margin_deg,
        )

    @staticmethod
    def from_corners(p1: LatLng, p2: LatLng) -> "Bounds":
        return Bounds(
            south=min(p1[0], p2[0]),
            west=min(p1[1], p2[1]),
            north=max(p1[0], p2[0]),
            east=max(p1[1], p2[1]),
        )


@dataclass(frozen=True)
class FixedView:
    """Fixed center and zoom."""

    center: LatLng
    zoom: int


@dataclass(frozen=True)
class FitView:
    """Fit a bounding box with padding (pixels per side) up to max_zoom."""

    bounds: Bounds
    padding_px: tuple[int, int]
    max_zoom: int


TargetView = FixedView | FitView


@dataclass(frozen=True)
class RegionPreset:
    """Regional window used by the region view mode."""

    name: str
    center: LatLng
    zoom: int
    bounds: Bounds

    @staticmethod
    def japan() -> "RegionPreset":
        """Default preset from RegionConfig."""
        (south, west), (north, east) = RegionConfig.BOUNDS
        return RegionPreset(
            name=RegionConfig.NAME,
            center=RegionConfig.CENTER,
            zoom=RegionConfig.ZOOM,
            bounds=Bounds(south=south, west=west, north=north, east=east),
        )
