"""Shared pytest fixtures for travelmap tests.

Provides RecordingHostMap and reusable trip data for all unit tests.

HOST MAP:
    RecordingHostMap keeps every layer group's contents in plain lists and
    records every call the engine makes, so tests can assert on exactly
    what the engine told the map. tear_down() simulates the map container
    disappearing: from then on every call raises HostMapUnavailableError
    while is_ready stays True (the engine only finds out by calling).

COORDINATES:
    Real places from a Chicago → Tokyo trip. ORD → NRT is ~10,000 km and
    crosses the antimeridian over the North Pacific.
"""

from collections.abc import Callable

import pytest

from travelmap.model.errors import HostMapUnavailableError
from travelmap.model.primitive import Primitive
from travelmap.model.trip import Segment, Stay, TripData
from travelmap.model.view import Bounds, FitView, FixedView, RegionPreset, TargetView
from travelmap.ui.host_map import HostLayerGroup, HostMap
from travelmap.ui.render_engine import RenderEngine

# =============================================================================
# RECORDING HOST MAP
# =============================================================================


class RecordingLayerGroup(HostLayerGroup):
    """Layer group that stores primitives in a list."""

    def __init__(self, name: str, host: "RecordingHostMap") -> None:
        super().__init__(name=name)
        self.host = host
        self.items: list[Primitive] = []
        self.clear_count = 0
        self.removed = False
        self.fail_on_clear = False
        self.fail_on_add = False

    def add(self, primitive: Primitive) -> None:
        self.host.check()
        if self.fail_on_add:
            raise RuntimeError(f"{self.name}: add failed")
        self.items.append(primitive)

    def clear_layers(self) -> None:
        self.host.check()
        if self.fail_on_clear:
            raise RuntimeError(f"{self.name}: clear failed")
        self.items.clear()
        self.clear_count += 1

    def remove(self) -> None:
        self.host.check()
        self.removed = True
        self.items.clear()
        self.host.groups = [g for g in self.host.groups if g is not self]


class RecordingHostMap(HostMap):
    """In-memory host map that records every call."""

    def __init__(self, viewport_px: tuple[int, int] = (1000, 650), ready: bool = True) -> None:
        self.ready = ready
        self._viewport_px = viewport_px
        self.groups: list[RecordingLayerGroup] = []
        self.calls: list[tuple] = []
        self.view: TargetView | None = None
        self.torn_down = False
        self.defer_invalidation = False
        self.pending_callbacks: list[Callable[[], None]] = []

    def check(self) -> None:
        if self.torn_down:
            raise HostMapUnavailableError("container removed")

    @property
    def is_ready(self) -> bool:
        return self.ready

    @property
    def viewport_px(self) -> tuple[int, int]:
        self.check()
        return self._viewport_px

    def create_layer_group(self, name: str) -> RecordingLayerGroup:
        self.check()
        group = RecordingLayerGroup(name=name, host=self)
        self.groups.append(group)
        self.calls.append(("create_layer_group", name))
        return group

    def has_layer_group(self, group: HostLayerGroup) -> bool:
        return any(g is group for g in self.groups)

    def set_view(self, center: tuple[float, float], zoom: int) -> None:
        self.check()
        self.view = FixedView(center=center, zoom=zoom)
        self.calls.append(("set_view", center, zoom))

    def fit_bounds(self, bounds: Bounds, padding_px: tuple[int, int], max_zoom: int) -> None:
        self.check()
        self.view = FitView(bounds=bounds, padding_px=padding_px, max_zoom=max_zoom)
        self.calls.append(("fit_bounds", bounds, padding_px, max_zoom))

    def invalidate_size(self, on_done: Callable[[], None] | None = None) -> None:
        self.check()
        self.calls.append(("invalidate_size",))
        if on_done is None:
            return
        if self.defer_invalidation:
            self.pending_callbacks.append(on_done)
        else:
            on_done()

    # Test helpers

    def tear_down(self) -> None:
        self.torn_down = True

    def flush(self) -> None:
        """Run deferred invalidation callbacks."""
        callbacks, self.pending_callbacks = self.pending_callbacks, []
        for callback in callbacks:
            callback()

    def group(self, name: str) -> RecordingLayerGroup:
        return next(g for g in self.groups if g.name == name)

    def contents(self) -> dict[str, list[Primitive]]:
        return {g.name: list(g.items) for g in self.groups}

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


# =============================================================================
# TRIP DATA FACTORIES
# =============================================================================


def _location(name: str, coords: tuple[float, float] | None, code: str | None) -> dict | None:
    if coords is None:
        return None
    data = {"name": name, "coordinates": list(coords)}
    if code:
        data["code"] = code
    return data


@pytest.fixture
def make_segment() -> Callable[..., Segment]:
    """Factory: make_segment("s1", "shuttle", (35.5, 139.7), (35.6, 139.8))."""

    def factory(
        segment_id: str,
        transport_type: str,
        origin: tuple[float, float] | None,
        destination: tuple[float, float] | None,
        origin_code: str | None = None,
        destination_code: str | None = None,
        transport: str = "Test Transport",
    ) -> Segment:
        return Segment.from_dict(
            {
                "id": segment_id,
                "date": "2025-02-17",
                "type": transport_type,
                "transport": transport,
                "origin": _location(f"Origin {segment_id}", origin, origin_code),
                "destination": _location(f"Destination {segment_id}", destination, destination_code),
            }
        )

    return factory


@pytest.fixture
def make_stay() -> Callable[..., Stay]:
    """Factory: make_stay("Hyatt Regency Tokyo", (35.69, 139.69))."""

    def factory(location: str, coords: tuple[float, float], notes: str | None = None) -> Stay:
        return Stay.from_dict(
            {
                "location": location,
                "coordinates": list(coords),
                "dateStart": "2025-02-18",
                "dateEnd": "2025-02-19",
                "notes": notes,
            }
        )

    return factory


@pytest.fixture
def transpacific_flight(make_segment: Callable[..., Segment]) -> Segment:
    """ORD → NRT, crosses the antimeridian."""
    return make_segment(
        "ord-nrt",
        "flight",
        (41.9786, -87.9048),
        (35.7653, 140.3856),
        origin_code="ORD",
        destination_code="NRT",
        transport="NH 11",
    )


@pytest.fixture
def short_shuttle(make_segment: Callable[..., Segment]) -> Segment:
    """Haneda → Tokyo Disney area, ~13 km."""
    return make_segment("shuttle", "shuttle", (35.5494, 139.7798), (35.6329, 139.8836))


@pytest.fixture
def zero_walk(make_segment: Callable[..., Segment]) -> Segment:
    """Walk that starts and ends at the same point."""
    return make_segment("walk-zero", "walk", (35.6762, 139.6503), (35.6762, 139.6503))


@pytest.fixture
def japan_trip(make_segment: Callable[..., Segment], make_stay: Callable[..., Stay]) -> TripData:
    """Small trip: two flights, one of each ground class, two stays."""
    segments = (
        make_segment("dca-ord", "flight", (38.8512, -77.0402), (41.9742, -87.9073), "DCA", "ORD"),
        make_segment("ord-nrt", "flight", (41.9786, -87.9048), (35.7653, 140.3856), "ORD", "NRT"),
        make_segment("skyliner", "train", (35.7647, 140.3864), (35.7281, 139.7703)),
        make_segment("shuttle", "shuttle", (36.935862, 138.809237), (37.020567, 138.801704)),
        make_segment("walk", "walk", (35.4657, 139.6223), (35.445859, 139.645263)),
        make_segment("bus", "bus", (35.443927, 139.646748), (35.544512, 139.767891)),
    )
    stays = (
        make_stay("Hilton Garden Inn O'Hare", (42.000855, -87.864553)),
        make_stay("Hyatt Regency Yokohama", (35.445859, 139.645263), notes="Last night in Japan"),
    )
    return TripData(segments=segments, stays=stays, name="Test Trip")


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def japan() -> RegionPreset:
    return RegionPreset.japan()


@pytest.fixture
def host_map() -> RecordingHostMap:
    return RecordingHostMap()


@pytest.fixture
def engine(host_map: RecordingHostMap, japan: RegionPreset) -> RenderEngine:
    """Initialized engine on a recording host map, no trip yet."""
    return RenderEngine.create(host_map=host_map, region_preset=japan)
