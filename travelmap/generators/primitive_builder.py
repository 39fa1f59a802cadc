"""PrimitiveBuilder - Turn segments and stays into map primitives.

Segment → primitives:
- flight: great circle sampled with 200 intervals, split at the antimeridian,
  one Polyline per piece, plus origin and destination Markers
- other classes: one straight two-point Polyline plus two Markers (split
  as well if it would jump across ±180°)

Stay → primitives: one Marker with the "H" glyph.

Output is deterministic: the same item and active flag always give equal
primitive lists. World-copy replication is not done here; LayerManager
applies it when primitives are added to the host map.
"""

import logging

from travelmap.constants import GeometryConfig, LayerConfig, StyleConfig, TransportConfig
from travelmap.core.geo_calculator import GeoCalculator, LatLng
from travelmap.core.path_splitter import PathSplitter
from travelmap.model.errors import InvalidInputError
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
from travelmap.model.trip import NamedLocation, Segment, Stay

logger = logging.getLogger(__name__)


class PrimitiveBuilder:
    """Builds primitives for one item at a time.

    Example:
        builder = PrimitiveBuilder()
        primitives = builder.build_segment(segment=segment, is_active=False)
    """

    def __init__(self, flight_sample_points: int = GeometryConfig.FLIGHT_SAMPLE_POINTS) -> None:
        self.flight_sample_points = flight_sample_points

    # =========================================================================
    # STYLES
    # =========================================================================

    @staticmethod
    def marker_style(transport_type: str, is_active: bool) -> MarkerStyle:
        return MarkerStyle(
            color=StyleConfig.ROUTE_COLORS[transport_type],
            border_px=StyleConfig.MARKER_BORDER_PX[is_active],
            size_px=StyleConfig.MARKER_SIZE_PX[is_active],
        )

    @staticmethod
    def stay_marker_style(is_active: bool) -> MarkerStyle:
        return MarkerStyle(
            color=StyleConfig.STAY_COLOR,
            border_px=StyleConfig.MARKER_BORDER_PX[is_active],
            size_px=StyleConfig.STAY_MARKER_SIZE_PX[is_active],
            glyph=StyleConfig.STAY_GLYPH,
        )

    @staticmethod
    def polyline_style(transport_type: str, is_active: bool) -> PolylineStyle:
        return PolylineStyle(
            color=StyleConfig.ROUTE_COLORS[transport_type],
            weight=StyleConfig.POLYLINE_WEIGHT[is_active],
            opacity=StyleConfig.POLYLINE_OPACITY[is_active],
            dash=StyleConfig.POLYLINE_DASH[transport_type],
        )

    @staticmethod
    def layer_key_for(transport_type: str, is_active: bool) -> str:
        if is_active:
            return LayerConfig.ACTIVE
        return LayerConfig.TRANSPORT_LAYERS[transport_type]

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def route_points(self, segment: Segment) -> list[list[LatLng]]:
        """Point sequences to draw for a segment (one per sub-polyline)."""
        origin, destination = segment.endpoints()
        if segment.type == TransportConfig.FLIGHT:
            sampled = GeoCalculator.sample_great_circle(
                p1=origin.lat_lng,
                p2=destination.lat_lng,
                n=self.flight_sample_points,
            )
            return PathSplitter.split(points=sampled)
        straight = [
            (origin.lat, GeoCalculator.normalize_lng(origin.lng)),
            (destination.lat, GeoCalculator.normalize_lng(destination.lng)),
        ]
        # Straight lines never draw across the whole world either
        return PathSplitter.split(points=straight)

    # =========================================================================
    # BUILDERS
    # =========================================================================

    def build_segment(self, segment: Segment, is_active: bool) -> list[Primitive]:
        """Build polylines and endpoint markers for a segment.

        Args:
            segment: Segment to draw
            is_active: Whether the segment is the focused item

        Returns:
            Polylines (in path order) followed by origin and destination markers.

        Raises:
            InvalidInputError: Unknown transport class, missing endpoint or bad coordinates.
        """
        if segment.type not in TransportConfig.TYPES:
            raise InvalidInputError(f"unknown transport class '{segment.type}'", item_id=segment.id)
        origin, destination = segment.endpoints()

        layer_key = self.layer_key_for(transport_type=segment.type, is_active=is_active)
        line_style = self.polyline_style(transport_type=segment.type, is_active=is_active)
        icon_style = self.marker_style(transport_type=segment.type, is_active=is_active)
        route_popup = RoutePopup(
            transport=segment.transport,
            origin_name=origin.name,
            destination_name=destination.name,
        )

        primitives: list[Primitive] = []
        for part, points in enumerate(self.route_points(segment=segment)):
            polyline = Polyline(
                item_id=segment.id,
                points=points,
                style=line_style,
                popup=route_popup,
                layer_key=layer_key,
                part=part,
            )
            if polyline.is_degenerate:
                logger.debug(f"[RENDER] Segment {segment.id} has zero length, skipping polyline")
                continue
            primitives.append(polyline)

        primitives.append(self._endpoint_marker(segment.id, MarkerRole.ORIGIN, origin, icon_style, layer_key))
        primitives.append(
            self._endpoint_marker(segment.id, MarkerRole.DESTINATION, destination, icon_style, layer_key)
        )
        return primitives

    def build_stay(self, stay: Stay, is_active: bool) -> list[Primitive]:
        """Build the single stay marker.

        Raises:
            InvalidInputError: Bad coordinates.
        """
        stay.validate()
        return [
            Marker(
                item_id=stay.id,
                role=MarkerRole.STAY,
                lat=stay.lat,
                lng=GeoCalculator.normalize_lng(stay.lng),
                style=self.stay_marker_style(is_active=is_active),
                popup=StayPopup(
                    name=stay.location,
                    date_start=stay.date_start,
                    date_end=stay.date_end,
                    notes=stay.notes,
                ),
                layer_key=LayerConfig.ACTIVE if is_active else LayerConfig.STAYS,
            )
        ]

    @staticmethod
    def _endpoint_marker(
        item_id: str,
        role: MarkerRole,
        location: NamedLocation,
        style: MarkerStyle,
        layer_key: str,
    ) -> Marker:
        return Marker(
            item_id=item_id,
            role=role,
            lat=location.lat,
            lng=GeoCalculator.normalize_lng(location.lng),
            style=style,
            popup=LocationPopup(name=location.name, code=location.code),
            layer_key=layer_key,
        )
