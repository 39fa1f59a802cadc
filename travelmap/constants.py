"""Configuration constants for the travel map engine.

All configurable parameters are centralized here for easy tuning.

Classes:
    AppConfig: Streamlit host application settings
    GeometryConfig: Spherical geometry and world-copy parameters
    TransportConfig: Closed set of transport classes
    LayerConfig: Layer group keys and z-order
    StyleConfig: Colors, marker borders, polyline weights
    ViewConfig: View selection rules (zooms, padding, thresholds)
    RegionConfig: Default regional preset
    MapConfig: Pydeck host map defaults
"""

from pathlib import Path

# Package root directory (where travelmap/ lives)
PACKAGE_DIR = Path(__file__).parent

# Sample trip shipped with the package for the host application
SAMPLE_TRIP_PATH = PACKAGE_DIR / "data" / "sample_trip.json"


class AppConfig:
    """UI application settings."""

    TITLE = "Travel Map - Trip Timeline on a World Map"
    ICON = "🗺️"
    LAYOUT = "wide"

    # Airport-code pairs always treated as intercontinental (either direction)
    INTERCONTINENTAL_PAIRS = [("ORD", "NRT"), ("HND", "ORD")]


class GeometryConfig:
    """Spherical geometry parameters."""

    # Mean Earth radius (spherical approximation)
    EARTH_RADIUS_KM = 6371.0

    # Great-circle samples per flight (n intervals -> n + 1 points)
    FLIGHT_SAMPLE_POINTS = 200

    # Longitude of the antimeridian
    ANTIMERIDIAN_LNG = 180.0

    # Longitude shifts for the three world copies (west, home, east)
    WORLD_COPY_OFFSETS = (-360.0, 0.0, 360.0)

    LAT_LIMIT = 90.0


class TransportConfig:
    """Closed set of transport classes."""

    FLIGHT = "flight"
    TRAIN = "train"
    SHUTTLE = "shuttle"
    WALK = "walk"
    BUS = "bus"

    TYPES = [FLIGHT, TRAIN, SHUTTLE, WALK, BUS]

    DISPLAY_NAMES = {
        FLIGHT: "Flight",
        TRAIN: "Train",
        SHUTTLE: "Shuttle",
        WALK: "Walk",
        BUS: "Bus",
    }
    assert set(DISPLAY_NAMES.keys()) == set(TYPES)


class LayerConfig:
    """Layer group keys.

    Z-order (back to front): flights → trains → shuttles → walks → buses → stays → active
    """

    FLIGHTS = "flights"
    TRAINS = "trains"
    SHUTTLES = "shuttles"
    WALKS = "walks"
    BUSES = "buses"
    STAYS = "stays"
    ACTIVE = "active"

    # Creation order is the z-order contract
    LAYER_KEYS = [FLIGHTS, TRAINS, SHUTTLES, WALKS, BUSES, STAYS, ACTIVE]

    TRANSPORT_LAYERS = {
        TransportConfig.FLIGHT: FLIGHTS,
        TransportConfig.TRAIN: TRAINS,
        TransportConfig.SHUTTLE: SHUTTLES,
        TransportConfig.WALK: WALKS,
        TransportConfig.BUS: BUSES,
    }
    assert set(TRANSPORT_LAYERS.keys()) == set(TransportConfig.TYPES)
    assert set(TRANSPORT_LAYERS.values()) | {STAYS, ACTIVE} == set(LAYER_KEYS)


class StyleConfig:
    """Visual colors and styling."""

    ROUTE_COLORS = {
        TransportConfig.FLIGHT: "#3388ff",
        TransportConfig.TRAIN: "#ff3333",
        TransportConfig.SHUTTLE: "#33cc33",
        TransportConfig.WALK: "#ff9900",
        TransportConfig.BUS: "#9933cc",
    }
    assert set(ROUTE_COLORS.keys()) == set(TransportConfig.TYPES)

    STAY_COLOR = "#8800ff"
    STAY_GLYPH = "H"

    # Marker border in pixels, keyed by active flag
    MARKER_BORDER_PX = {False: 2, True: 3}

    # Marker diameter in pixels, keyed by active flag
    MARKER_SIZE_PX = {False: 16, True: 20}
    STAY_MARKER_SIZE_PX = {False: 20, True: 24}

    # Polyline styling, keyed by active flag
    POLYLINE_WEIGHT = {False: 2, True: 4}
    POLYLINE_OPACITY = {False: 0.7, True: 0.8}

    # Only flights are dashed
    POLYLINE_DASH = {
        TransportConfig.FLIGHT: (10, 10),
        TransportConfig.TRAIN: None,
        TransportConfig.SHUTTLE: None,
        TransportConfig.WALK: None,
        TransportConfig.BUS: None,
    }
    assert set(POLYLINE_DASH.keys()) == set(TransportConfig.TYPES)

    MARKER_BORDER_COLOR = "#ffffff"

    LEGEND_TITLE = "Transportation Types"
    STAY_LEGEND_LABEL = "Accommodation"


class ViewConfig:
    """View selection rules."""

    WORLD_CENTER = (30.0, 0.0)
    WORLD_ZOOM = 2

    # Focused intercontinental flight: whole route visible at once
    INTERCONTINENTAL_ZOOM = 3
    INTERCONTINENTAL_THRESHOLD_KM = 3000.0

    # Padding as a fraction of viewport size, per side
    PADDING_PCT = {
        TransportConfig.FLIGHT: 0.15,
        TransportConfig.TRAIN: 0.20,
        TransportConfig.SHUTTLE: 0.30,
        TransportConfig.WALK: 0.30,
    }
    DEFAULT_PADDING_PCT = 0.25

    MAX_ZOOM = {TransportConfig.WALK: 16}
    DEFAULT_MAX_ZOOM = 14

    # Endpoints closer than this (degrees) produce a degenerate box
    DEGENERATE_EXTENT_DEG = 1e-3
    INFLATE_DEG = 0.005

    # Focused stay framing
    STAY_HALF_EXTENT_DEG = 0.009
    STAY_MAX_ZOOM = 15
    STAY_NEARBY_DEG = 0.01


class RegionConfig:
    """Default regional preset (Japan)."""

    NAME = "Japan"
    CENTER = (36.5, 138.5)
    ZOOM = 6
    # ((south, west), (north, east))
    BOUNDS = ((30.0, 127.0), (46.0, 146.0))

    assert BOUNDS[0][0] < CENTER[0] < BOUNDS[1][0]
    assert BOUNDS[0][1] < CENTER[1] < BOUNDS[1][1]


class MapConfig:
    """Pydeck host map defaults."""

    DEFAULT_VIEWPORT_PX = (1000, 650)
    TILE_SIZE_PX = 256
    MIN_ZOOM = 0
    MAX_ZOOM = 19

    # Marker radius scaling from pixel diameter
    MARKER_RADIUS_SCALE = 0.5

    MAP_HEIGHT_PX = 650
