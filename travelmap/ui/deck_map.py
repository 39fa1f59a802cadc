"""DeckHostMap - Pydeck implementation of the host map contract.

Layer groups keep their primitives in memory; to_deck() turns them into
deck.gl layers for st.pydeck_chart:
- polylines → PathLayer (flights dashed through PathStyleExtension)
- markers → ScatterplotLayer (pixel radius, white border)
- marker glyphs ("H" for stays) → TextLayer on top of the marker

Key differences from the engine's model:
- Uses [lng, lat] coordinate order (GeoJSON standard)
- Colors as RGBA lists [R, G, B, A] (0-255)
- Every layer sets wrap_longitude=False; world copies are already in the data

fit_bounds is resolved here into a Web-Mercator center + integer zoom for the
current viewport, because pydeck has no fitBounds of its own.
"""

import logging
import math
from collections.abc import Callable

import pydeck as pdk

from travelmap.constants import MapConfig, StyleConfig
from travelmap.core.geo_calculator import GeoCalculator, LatLng
from travelmap.model.errors import HostMapUnavailableError
from travelmap.model.primitive import Marker, Polyline, Primitive
from travelmap.model.view import Bounds
from travelmap.ui.basemap import ESRI_STREET_STYLE
from travelmap.ui.host_map import HostLayerGroup, HostMap

logger = logging.getLogger(__name__)

# Web-Mercator is undefined at the poles
MERCATOR_LAT_LIMIT = 85.05112878


def hex_to_rgba(hex_color: str, opacity: float = 1.0) -> list[int]:
    """Convert "#rrggbb" to an RGBA list for deck.gl."""
    hex_color = hex_color.lstrip("#")
    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)
    return [r, g, b, int(round(opacity * 255))]


def mercator_y(lat: float) -> float:
    lat = max(-MERCATOR_LAT_LIMIT, min(MERCATOR_LAT_LIMIT, lat))
    return math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))


def inverse_mercator_y(y: float) -> float:
    return math.degrees(2 * math.atan(math.exp(y)) - math.pi / 2)


class DeckLayerGroup(HostLayerGroup):
    """In-memory layer group; contents are drawn by DeckHostMap.to_deck()."""

    def __init__(self, name: str, host: "DeckHostMap") -> None:
        super().__init__(name=name)
        self.host = host
        self.primitives: list[Primitive] = []

    def add(self, primitive: Primitive) -> None:
        self.host.require_attached()
        self.primitives.append(primitive)

    def clear_layers(self) -> None:
        self.host.require_attached()
        self.primitives.clear()

    def remove(self) -> None:
        self.host.require_attached()
        self.primitives.clear()
        self.host.groups = [g for g in self.host.groups if g is not self]


class DeckHostMap(HostMap):
    """Host map rendered with pydeck.

    Example:
        host = DeckHostMap()
        engine = RenderEngine.create(host_map=host, region_preset=RegionPreset.japan())
        st.pydeck_chart(host.to_deck())
    """

    def __init__(
        self,
        viewport_px: tuple[int, int] = MapConfig.DEFAULT_VIEWPORT_PX,
        map_style: dict[str, object] | None = None,
    ) -> None:
        self._viewport_px = viewport_px
        self.map_style = map_style if map_style is not None else ESRI_STREET_STYLE
        self.groups: list[DeckLayerGroup] = []
        self.attached = True
        self.center: LatLng = (0.0, 0.0)
        self.zoom: int = MapConfig.MIN_ZOOM

    # =========================================================================
    # CONTAINER
    # =========================================================================

    @property
    def is_ready(self) -> bool:
        return self.attached

    @property
    def viewport_px(self) -> tuple[int, int]:
        self.require_attached()
        return self._viewport_px

    def resize(self, width: int, height: int) -> None:
        self._viewport_px = (width, height)

    def detach(self) -> None:
        """Tear down the container; every later call raises HostMapUnavailableError."""
        logger.info("[HOST] Map container detached")
        self.attached = False
        self.groups = []

    def require_attached(self) -> None:
        if not self.attached:
            raise HostMapUnavailableError("map container has been torn down")

    # =========================================================================
    # HOST MAP CONTRACT
    # =========================================================================

    def create_layer_group(self, name: str) -> DeckLayerGroup:
        self.require_attached()
        group = DeckLayerGroup(name=name, host=self)
        self.groups.append(group)
        return group

    def has_layer_group(self, group: HostLayerGroup) -> bool:
        self.require_attached()
        return any(g is group for g in self.groups)

    def set_view(self, center: LatLng, zoom: int) -> None:
        self.require_attached()
        self.center = center
        self.zoom = max(MapConfig.MIN_ZOOM, min(MapConfig.MAX_ZOOM, zoom))

    def fit_bounds(self, bounds: Bounds, padding_px: tuple[int, int], max_zoom: int) -> None:
        self.require_attached()
        self.center, self.zoom = self.compute_fit(
            bounds=bounds, viewport_px=self._viewport_px, padding_px=padding_px, max_zoom=max_zoom
        )
        logger.debug(f"[HOST] Fit {bounds} → center={self.center}, zoom={self.zoom}")

    def invalidate_size(self, on_done: Callable[[], None] | None = None) -> None:
        self.require_attached()
        # Streamlit re-measures on every rerun, so the callback fires right away
        if on_done is not None:
            on_done()

    @staticmethod
    def compute_fit(
        bounds: Bounds,
        viewport_px: tuple[int, int],
        padding_px: tuple[int, int],
        max_zoom: int,
    ) -> tuple[LatLng, int]:
        """Web-Mercator center and integer zoom that fit bounds into the viewport.

        Args:
            bounds: Box to show (east may exceed 180 for crossing boxes)
            viewport_px: Viewport (width, height)
            padding_px: Padding per side (x, y)
            max_zoom: Upper zoom limit

        Returns:
            ((lat, lng), zoom) with lng normalized to [-180, 180].
        """
        width, height = viewport_px
        pad_x, pad_y = padding_px
        avail_w = max(1, width - 2 * pad_x)
        avail_h = max(1, height - 2 * pad_y)

        y_south = mercator_y(bounds.south)
        y_north = mercator_y(bounds.north)
        frac_x = (bounds.east - bounds.west) / 360.0
        frac_y = (y_north - y_south) / (2 * math.pi)

        zooms = []
        for avail, frac in ((avail_w, frac_x), (avail_h, frac_y)):
            if frac > 0:
                zooms.append(math.log2(avail / (MapConfig.TILE_SIZE_PX * frac)))
        zoom = math.floor(min(zooms)) if zooms else max_zoom
        zoom = max(MapConfig.MIN_ZOOM, min(max_zoom, MapConfig.MAX_ZOOM, zoom))

        center_lat = inverse_mercator_y((y_south + y_north) / 2)
        center_lng = GeoCalculator.normalize_lng((bounds.west + bounds.east) / 2)
        return (center_lat, center_lng), zoom

    # =========================================================================
    # PYDECK OUTPUT
    # =========================================================================

    def get_view_state(self) -> pdk.ViewState:
        """Create Pydeck ViewState from the last applied view."""
        lat, lng = self.center
        return pdk.ViewState(latitude=lat, longitude=lng, zoom=self.zoom, pitch=0, bearing=0)

    def to_deck(self) -> pdk.Deck:
        """Render every non-empty group, in creation order (= z-order)."""
        self.require_attached()
        layers: list[pdk.Layer] = []
        for group in self.groups:
            layers.extend(self._group_layers(group=group))
        return pdk.Deck(
            map_style=self.map_style,
            map_provider="mapbox",
            initial_view_state=self.get_view_state(),
            layers=layers,
            tooltip=self._create_tooltip_config(),
        )

    def _group_layers(self, group: DeckLayerGroup) -> list[pdk.Layer]:
        path_data = []
        marker_data = []
        glyph_data = []

        for primitive in group.primitives:
            if isinstance(primitive, Polyline):
                style = primitive.style
                path_data.append(
                    {
                        "id": f"{primitive.item_id}:{primitive.part}:{primitive.lng_offset:+.0f}",
                        "path": [[lng, lat] for lat, lng in primitive.points],
                        "color": hex_to_rgba(style.color, opacity=style.opacity),
                        "width": style.weight,
                        "dash": list(style.dash) if style.dash else [0, 0],
                        "name": primitive.popup.text,
                    }
                )
            elif isinstance(primitive, Marker):
                style = primitive.style
                row = {
                    "id": f"{primitive.item_id}:{primitive.role.value}:{primitive.lng_offset:+.0f}",
                    "position": [primitive.lng, primitive.lat],
                    "color": hex_to_rgba(style.color),
                    "radius": style.size_px * MapConfig.MARKER_RADIUS_SCALE,
                    "border": style.border_px,
                    "name": primitive.popup.text,
                }
                marker_data.append(row)
                if style.glyph:
                    glyph_data.append({**row, "glyph": style.glyph, "size": style.size_px * 0.7})

        layers = []
        if path_data:
            layers.append(
                pdk.Layer(
                    "PathLayer",
                    path_data,
                    get_path="path",
                    get_color="color",
                    get_width="width",
                    width_units="pixels",
                    get_dash_array="dash",
                    dash_justified=True,
                    extensions=[{"@@type": "PathStyleExtension", "dash": True}],
                    wrap_longitude=False,
                    pickable=True,
                    id=f"{group.name}_paths",
                )
            )
        if marker_data:
            layers.append(
                pdk.Layer(
                    "ScatterplotLayer",
                    marker_data,
                    get_position="position",
                    get_radius="radius",
                    radius_units="pixels",
                    get_fill_color="color",
                    get_line_color=hex_to_rgba(StyleConfig.MARKER_BORDER_COLOR),
                    get_line_width="border",
                    line_width_units="pixels",
                    stroked=True,
                    wrap_longitude=False,
                    pickable=True,
                    id=f"{group.name}_markers",
                )
            )
        if glyph_data:
            layers.append(
                pdk.Layer(
                    "TextLayer",
                    glyph_data,
                    get_position="position",
                    get_text="glyph",
                    get_size="size",
                    get_color=hex_to_rgba(StyleConfig.MARKER_BORDER_COLOR),
                    get_text_anchor="'middle'",
                    get_alignment_baseline="'center'",
                    wrap_longitude=False,
                    id=f"{group.name}_glyphs",
                )
            )
        return layers

    def _create_tooltip_config(self) -> dict[str, str | dict[str, str]]:
        """Popup text shown on hover."""
        return {
            "text": "{name}",
            "style": {
                "backgroundColor": "rgba(255, 255, 255, 0.95)",
                "color": "#333",
                "padding": "6px 10px",
                "borderRadius": "4px",
                "whiteSpace": "pre-line",
            },
        }
