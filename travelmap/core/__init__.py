"""Core geometry for map rendering.

- GeoCalculator: Spherical geometry (haversine distance, great-circle sampling)
- PathSplitter: Antimeridian splitting of sampled routes
- WorldWrap: World-copy replication (import directly from world_wrap module)
"""

from travelmap.core.geo_calculator import GeoCalculator, LatLng
from travelmap.core.path_splitter import PathSplitter

# WorldWrap has a circular import with model.primitive
# Import directly: from travelmap.core.world_wrap import WorldWrap

__all__ = [
    "GeoCalculator",
    "LatLng",
    "PathSplitter",
]
