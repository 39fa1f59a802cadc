"""PathSplitter - Split sampled polylines at the antimeridian.

A great-circle route sampled by GeoCalculator.sample_great_circle has its
longitudes normalized into [-180, 180]. Where the route crosses ±180° two
consecutive points jump by more than 180° of longitude; drawn as-is, the
host map would connect them with a line across the whole world.

The splitter walks the point sequence and cuts it at every such jump:
1. Close the current sub-polyline with a boundary point at ±180 (the side of pᵢ)
2. Open the next sub-polyline at the same latitude on the opposite side
3. Continue with pᵢ₊₁

The crossing latitude is linearly interpolated over the unwrapped longitude
step, which is accurate because sampled points are dense.
"""

import logging

from travelmap.constants import GeometryConfig
from travelmap.core.geo_calculator import LatLng

logger = logging.getLogger(__name__)


class PathSplitter:
    """Static methods for antimeridian splitting."""

    ANTIMERIDIAN_LNG = GeometryConfig.ANTIMERIDIAN_LNG

    @staticmethod
    def crosses_antimeridian(lng_a: float, lng_b: float) -> bool:
        """True if the step from lng_a to lng_b jumps across ±180°."""
        return abs(lng_b - lng_a) > 180.0

    @staticmethod
    def crossing_latitude(p_a: LatLng, p_b: LatLng) -> float:
        """Latitude where the step from p_a to p_b reaches the antimeridian.

        Args:
            p_a: Point before the crossing (lat, lng)
            p_b: Point after the crossing (lat, lng)

        Returns:
            Interpolated latitude at lng = ±180.
        """
        lat_a, lng_a = p_a
        lat_b, lng_b = p_b
        boundary = PathSplitter.ANTIMERIDIAN_LNG if lng_a > 0 else -PathSplitter.ANTIMERIDIAN_LNG

        # Unwrapped step: e.g. 170 -> -170 is +20, not -340
        step = lng_b - lng_a
        if step > 180.0:
            step -= 360.0
        elif step < -180.0:
            step += 360.0

        t = (boundary - lng_a) / step if step != 0.0 else 0.0
        return lat_a + t * (lat_b - lat_a)

    @staticmethod
    def split(points: list[LatLng]) -> list[list[LatLng]]:
        """Split a polyline into sub-polylines that never jump across ±180°.

        Args:
            points: Ordered (lat, lng) points with lng in [-180, 180]

        Returns:
            List of sub-polylines. A polyline without crossings comes back as
            a single sub-polyline equal to the input. Split pieces with fewer
            than two points (two consecutive points sitting exactly on the
            antimeridian) are discarded.
        """
        if not points:
            return []

        sub_polylines: list[list[LatLng]] = []
        current: list[LatLng] = [points[0]]

        for p_a, p_b in zip(points, points[1:]):
            if not PathSplitter.crosses_antimeridian(lng_a=p_a[1], lng_b=p_b[1]):
                current.append(p_b)
                continue

            lat_cross = PathSplitter.crossing_latitude(p_a=p_a, p_b=p_b)
            boundary = PathSplitter.ANTIMERIDIAN_LNG if p_a[1] > 0 else -PathSplitter.ANTIMERIDIAN_LNG

            closing_point = (lat_cross, boundary)
            if current[-1] != closing_point:
                current.append(closing_point)
            sub_polylines.append(current)

            opening_point = (lat_cross, -boundary)
            current = [opening_point]
            if p_b != opening_point:
                current.append(p_b)

        sub_polylines.append(current)

        if len(sub_polylines) == 1:
            return sub_polylines

        kept = [sub for sub in sub_polylines if len(sub) >= 2]
        logger.debug(f"[GEO] Split polyline into {len(kept)} pieces ({len(sub_polylines) - len(kept)} discarded)")
        return kept
