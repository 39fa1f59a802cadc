"""WorldWrap - Replicate primitives across the three world copies.

The host map shows several horizontal copies of the world when the user pans
past ±180°, but it does not duplicate layer contents into those copies.
Every primitive is therefore emitted three times, shifted by -360°, 0° and
+360°, and marked no-wrap so the host draws each copy where it is placed.

Copies share style and popup objects; coordinates are copied per replica.
"""

from dataclasses import replace

from travelmap.constants import GeometryConfig
from travelmap.model.primitive import Marker, Polyline, Primitive


class WorldWrap:
    """Static methods for world-copy replication."""

    OFFSETS = GeometryConfig.WORLD_COPY_OFFSETS

    @staticmethod
    def shift(primitive: Primitive, lng_offset: float) -> Primitive:
        """Return a no-wrap copy of primitive shifted east by lng_offset degrees."""
        if isinstance(primitive, Marker):
            return replace(
                primitive,
                lng=primitive.lng + lng_offset,
                lng_offset=primitive.lng_offset + lng_offset,
                no_wrap=True,
            )
        if isinstance(primitive, Polyline):
            return replace(
                primitive,
                points=[(lat, lng + lng_offset) for lat, lng in primitive.points],
                lng_offset=primitive.lng_offset + lng_offset,
                no_wrap=True,
            )
        raise TypeError(f"Cannot replicate {type(primitive).__name__}")

    @staticmethod
    def replicate(primitive: Primitive) -> list[Primitive]:
        """Emit the west, home and east copies of a primitive.

        Args:
            primitive: Marker or Polyline with longitudes in [-180, 180]

        Returns:
            Exactly three replicas, in offset order (-360, 0, +360).
        """
        return [WorldWrap.shift(primitive=primitive, lng_offset=offset) for offset in WorldWrap.OFFSETS]
