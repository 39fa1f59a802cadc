"""ViewSelector - Compute the target view for a view mode and focused item.

Rules:
- world: FixedView((30, 0), 2), or (30, 0) @ 3 if the focused item is an
  intercontinental flight
- region: FixedView from the region preset
- local, intercontinental flight: FixedView((30, 0), 3)
- local, other segment: crossing-aware FitView of both endpoints with
  per-class padding and max zoom
- local, stay: FitView of the stay +/- STAY_HALF_EXTENT_DEG
- local, nothing focused: world view

The selector never touches the host map. It returns a value that the render
engine applies.
"""

import logging

from travelmap.constants import GeometryConfig, MapConfig, TransportConfig, ViewConfig
from travelmap.core.geo_calculator import GeoCalculator, LatLng
from travelmap.model.trip import Segment, Stay
from travelmap.model.view import Bounds, FitView, FixedView, RegionPreset, TargetView, ViewMode

logger = logging.getLogger(__name__)


class ViewSelector:
    """Chooses FixedView / FitView values.

    Args:
        region_preset: Window for the region mode
        viewport_px: Map viewport size (width, height) used for padding
        intercontinental_pairs: Optional allow-list of (origin code, destination code)
            pairs that count as intercontinental regardless of distance.
            Pairs match in either direction.
    """

    def __init__(
        self,
        region_preset: RegionPreset,
        viewport_px: tuple[int, int] = MapConfig.DEFAULT_VIEWPORT_PX,
        intercontinental_pairs: list[tuple[str, str]] | None = None,
    ) -> None:
        self.region_preset = region_preset
        self.viewport_px = viewport_px
        self.intercontinental_pairs: set[frozenset[str]] = {
            frozenset(pair) for pair in (intercontinental_pairs or [])
        }

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def is_intercontinental(self, segment: Segment) -> bool:
        """Flight whose endpoints are > 3000 km apart or allow-listed by code.

        Raises:
            InvalidInputError: Missing endpoint or bad coordinates.
        """
        if segment.type != TransportConfig.FLIGHT:
            return False
        origin, destination = segment.endpoints()
        if origin.code and destination.code:
            if frozenset((origin.code, destination.code)) in self.intercontinental_pairs:
                return True
        distance_km = GeoCalculator.haversine_distance_km(p1=origin.lat_lng, p2=destination.lat_lng)
        return distance_km > ViewConfig.INTERCONTINENTAL_THRESHOLD_KM

    # =========================================================================
    # BOUNDS
    # =========================================================================

    @staticmethod
    def crossing_aware_bounds(p1: LatLng, p2: LatLng) -> Bounds:
        """Bounding box of two points that never spans the long way round.

        If the longitudes are more than 180° apart, the smaller one is moved
        east by 360° so east - west stays within (0, 180]. Boxes smaller than
        DEGENERATE_EXTENT_DEG in both directions are inflated by INFLATE_DEG.
        """
        lat1, lng1 = p1
        lat2, lng2 = p2
        lng1 = GeoCalculator.normalize_lng(lng1)
        lng2 = GeoCalculator.normalize_lng(lng2)
        if abs(lng1 - lng2) > GeometryConfig.ANTIMERIDIAN_LNG:
            if lng1 < lng2:
                lng1 += 360.0
            else:
                lng2 += 360.0

        bounds = Bounds.from_corners((lat1, lng1), (lat2, lng2))
        extent = max(bounds.north - bounds.south, bounds.east - bounds.west)
        if extent < ViewConfig.DEGENERATE_EXTENT_DEG:
            logger.debug(f"[VIEW] Degenerate box ({extent:.6f}°), inflating by {ViewConfig.INFLATE_DEG}°")
            bounds = bounds.inflated(margin_deg=ViewConfig.INFLATE_DEG)
        return bounds

    def padding_px(self, pct: float) -> tuple[int, int]:
        width, height = self.viewport_px
        return (int(width * pct), int(height * pct))

    # =========================================================================
    # VIEWS
    # =========================================================================

    @staticmethod
    def world_view() -> FixedView:
        return FixedView(center=ViewConfig.WORLD_CENTER, zoom=ViewConfig.WORLD_ZOOM)

    @staticmethod
    def intercontinental_view() -> FixedView:
        return FixedView(center=ViewConfig.WORLD_CENTER, zoom=ViewConfig.INTERCONTINENTAL_ZOOM)

    def region_view(self) -> FixedView:
        return FixedView(center=self.region_preset.center, zoom=self.region_preset.zoom)

    def segment_view(self, segment: Segment) -> TargetView:
        """Frame a single segment."""
        if self.is_intercontinental(segment=segment):
            return self.intercontinental_view()
        origin, destination = segment.endpoints()
        pct = ViewConfig.PADDING_PCT.get(segment.type, ViewConfig.DEFAULT_PADDING_PCT)
        return FitView(
            bounds=self.crossing_aware_bounds(p1=origin.lat_lng, p2=destination.lat_lng),
            padding_px=self.padding_px(pct=pct),
            max_zoom=ViewConfig.MAX_ZOOM.get(segment.type, ViewConfig.DEFAULT_MAX_ZOOM),
        )

    def stay_view(self, stay: Stay) -> FitView:
        stay.validate()
        half = ViewConfig.STAY_HALF_EXTENT_DEG
        lng = GeoCalculator.normalize_lng(stay.lng)
        return FitView(
            bounds=Bounds(south=stay.lat - half, west=lng - half, north=stay.lat + half, east=lng + half),
            padding_px=self.padding_px(pct=ViewConfig.DEFAULT_PADDING_PCT),
            max_zoom=ViewConfig.STAY_MAX_ZOOM,
        )

    def select(self, mode: ViewMode, focused_item: Segment | Stay | None = None) -> TargetView:
        """Target view for a view mode and optional focused item.

        Args:
            mode: Requested view mode
            focused_item: Resolved focused segment or stay (None if nothing is focused)

        Returns:
            FixedView or FitView. Never None.

        Raises:
            InvalidInputError: The focused item has unusable coordinates.
        """
        if mode == ViewMode.REGION:
            return self.region_view()

        if mode == ViewMode.WORLD:
            if isinstance(focused_item, Segment) and self.is_intercontinental(segment=focused_item):
                return self.intercontinental_view()
            return self.world_view()

        if isinstance(focused_item, Segment):
            return self.segment_view(segment=focused_item)
        if isinstance(focused_item, Stay):
            return self.stay_view(stay=focused_item)
        logger.debug("[VIEW] Local mode without a focused item, using world view")
        return self.world_view()
