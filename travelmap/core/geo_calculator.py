"""Spherical geometry on Earth's surface.

Provides the geographic helper functions used by every other component:
- Degree/radian conversion
- Great-circle angular distance (Haversine formula)
- Antimeridian-aware longitude normalization
- Great-circle point sampling (spherical linear interpolation)

All calculations use a spherical Earth approximation (R = 6,371 km).
Points are (lat, lng) tuples in decimal degrees.
"""

from math import asin, cos, degrees, radians, sin, sqrt

import numpy as np

from travelmap.constants import GeometryConfig

# (lat, lng) in decimal degrees - Leaflet/geographic order
LatLng = tuple[float, float]


class GeoCalculator:
    """Static methods for spherical calculations.

    All methods are pure. Longitudes may be given in any real range and are
    normalized where the method says so; latitudes must be within ±90°.
    """

    EARTH_RADIUS_KM = GeometryConfig.EARTH_RADIUS_KM

    @staticmethod
    def to_radians(deg: float) -> float:
        return radians(deg)

    @staticmethod
    def to_degrees(rad: float) -> float:
        return degrees(rad)

    @staticmethod
    def normalize_lng(lng: float) -> float:
        """Wrap a longitude into [-180, 180].

        Values already in range are returned unchanged, so ±180 keep their sign.
        """
        if -180.0 <= lng <= 180.0:
            return lng
        wrapped = (lng + 180.0) % 360.0 - 180.0
        return wrapped

    @staticmethod
    def great_circle_distance(p1: LatLng, p2: LatLng) -> float:
        """Angular distance between two points using the Haversine formula.

        Args:
            p1: First point (lat, lng) in degrees
            p2: Second point (lat, lng) in degrees

        Returns:
            Central angle in radians. Exactly 0.0 when the points are equal.
        """
        lat1, lng1 = radians(p1[0]), radians(p1[1])
        lat2, lng2 = radians(p2[0]), radians(p2[1])
        a = sin((lat2 - lat1) / 2) ** 2 + cos(lat1) * cos(lat2) * sin((lng2 - lng1) / 2) ** 2
        return 2 * asin(sqrt(min(1.0, a)))

    @staticmethod
    def haversine_distance_km(p1: LatLng, p2: LatLng) -> float:
        """Great-circle distance in kilometers."""
        return GeoCalculator.EARTH_RADIUS_KM * GeoCalculator.great_circle_distance(p1, p2)

    @staticmethod
    def sample_great_circle(p1: LatLng, p2: LatLng, n: int) -> list[LatLng]:
        """Sample n + 1 points along the great circle from p1 to p2.

        Longitudes are first brought within 180° of each other (adding 360°
        to the smaller one), then interpolated on the unit sphere with
        weights A = sin((1-f)·d)/sin(d) and B = sin(f·d)/sin(d). Output
        longitudes are normalized into [-180, 180], so a route crossing the
        antimeridian shows a jump that PathSplitter resolves.

        Args:
            p1: Start point (lat, lng) in degrees
            p2: End point (lat, lng) in degrees
            n: Number of intervals (must be >= 1)

        Returns:
            List of n + 1 (lat, lng) points including both endpoints. A
            zero-length route gives n + 1 copies of p1 exactly as passed in.
        """
        if n < 1:
            raise ValueError(f"Great-circle sampling needs n >= 1, got {n}")

        lat1_deg = p1[0]
        lat2_deg = p2[0]
        lng1_deg = GeoCalculator.normalize_lng(p1[1])
        lng2_deg = GeoCalculator.normalize_lng(p2[1])

        if abs(lng1_deg - lng2_deg) > 180.0:
            if lng1_deg < lng2_deg:
                lng1_deg += 360.0
            else:
                lng2_deg += 360.0

        d = GeoCalculator.great_circle_distance((lat1_deg, lng1_deg), (lat2_deg, lng2_deg))
        if d == 0.0:
            return [(p1[0], p1[1])] * (n + 1)

        lat1, lng1 = radians(lat1_deg), radians(lng1_deg)
        lat2, lng2 = radians(lat2_deg), radians(lng2_deg)

        f = np.linspace(0.0, 1.0, n + 1)
        a = np.sin((1.0 - f) * d) / np.sin(d)
        b = np.sin(f * d) / np.sin(d)

        x = a * cos(lat1) * cos(lng1) + b * cos(lat2) * cos(lng2)
        y = a * cos(lat1) * sin(lng1) + b * cos(lat2) * sin(lng2)
        z = a * sin(lat1) + b * sin(lat2)

        lats = np.degrees(np.arctan2(z, np.sqrt(x * x + y * y)))
        lngs = np.degrees(np.arctan2(y, x))

        return [
            (float(lat), GeoCalculator.normalize_lng(float(lng)))
            for lat, lng in zip(lats, lngs)
        ]

    @staticmethod
    def is_valid_point(lat: float, lng: float) -> bool:
        """True if both coordinates are finite and latitude is within ±90°."""
        if not (np.isfinite(lat) and np.isfinite(lng)):
            return False
        return -GeometryConfig.LAT_LIMIT <= lat <= GeometryConfig.LAT_LIMIT
