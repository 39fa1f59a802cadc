"""Shared pytest fixtures for travelmap workflow tests.

Workflow tests drive a RenderEngine end to end on the real pydeck host map
(DeckHostMap) and inspect what ended up in its layer groups.

HOST MAPS:
    DeckHostMap: the production host; invalidate_size calls back at once.
    DeferredDeckHostMap: holds invalidate_size callbacks until flush(), like a
        browser map that redraws asynchronously.
    StaleDeckHostMap: keeps reporting ready after detach(), so the engine
        only learns the container is gone when a call raises.

COORDINATES:
    Real places from a Chicago → Tokyo trip (see travelmap/data/sample_trip.json).
"""

import json
from collections.abc import Callable

import pytest

from travelmap.constants import SAMPLE_TRIP_PATH, AppConfig
from travelmap.model.primitive import Primitive
from travelmap.model.trip import Segment, Stay, TripData
from travelmap.model.view import RegionPreset
from travelmap.ui.deck_map import DeckHostMap
from travelmap.ui.render_engine import RenderEngine
from travelmap.ui.state_machine import EngineContext, EngineLifecycle

# Type alias for sm_and_ctx fixture return value
SMAndCtx = tuple[EngineLifecycle, EngineContext]


class DeferredDeckHostMap(DeckHostMap):
    """DeckHostMap whose viewport invalidation completes only on flush()."""

    def __init__(self) -> None:
        super().__init__(viewport_px=(1000, 650))
        self.pending_callbacks: list[Callable[[], None]] = []

    def invalidate_size(self, on_done: Callable[[], None] | None = None) -> None:
        self.require_attached()
        if on_done is not None:
            self.pending_callbacks.append(on_done)

    def flush(self) -> None:
        callbacks, self.pending_callbacks = self.pending_callbacks, []
        for callback in callbacks:
            callback()


class StaleDeckHostMap(DeckHostMap):
    """DeckHostMap that still reports ready after detach(), like a stale container handle."""

    @property
    def is_ready(self) -> bool:
        return True

    def reattach(self) -> None:
        self.attached = True


def group_contents(host: DeckHostMap) -> dict[str, list[Primitive]]:
    """Per-group primitives currently attached to host."""
    return {group.name: list(group.primitives) for group in host.groups}


# =============================================================================
# HOST MAPS
# =============================================================================


@pytest.fixture
def deck_host() -> DeckHostMap:
    return DeckHostMap(viewport_px=(1000, 650))


@pytest.fixture
def deferred_host() -> DeferredDeckHostMap:
    return DeferredDeckHostMap()


@pytest.fixture
def stale_host() -> StaleDeckHostMap:
    return StaleDeckHostMap(viewport_px=(1000, 650))


@pytest.fixture
def contents() -> Callable[[DeckHostMap], dict[str, list[Primitive]]]:
    """Snapshot helper: contents(host) -> {group name: primitives}."""
    return group_contents


# =============================================================================
# TRIP DATA
# =============================================================================


@pytest.fixture
def sample_trip() -> TripData:
    """The bundled Japan trip: 16 segments, 5 stays."""
    with open(SAMPLE_TRIP_PATH, "r", encoding="utf-8") as fh:
        return TripData.from_dict(json.load(fh))


@pytest.fixture
def segment_trip() -> Callable[..., TripData]:
    """Factory: a trip holding one segment built from literal coordinates."""

    def factory(
        segment_id: str,
        transport_type: str,
        origin: tuple[float, float],
        destination: tuple[float, float],
        origin_code: str | None = None,
        destination_code: str | None = None,
    ) -> TripData:
        segment = Segment.from_dict(
            {
                "id": segment_id,
                "date": "2025-02-17",
                "type": transport_type,
                "transport": transport_type.title(),
                "origin": {"name": f"{segment_id} start", "code": origin_code, "coordinates": list(origin)},
                "destination": {
                    "name": f"{segment_id} end",
                    "code": destination_code,
                    "coordinates": list(destination),
                },
            }
        )
        return TripData(segments=(segment,), stays=(), name=segment_id)

    return factory


@pytest.fixture
def broken_trip(sample_trip: TripData) -> TripData:
    """Sample trip plus three bad items: missing endpoint, unknown class, bad stay."""
    bad_segments = (
        Segment.from_dict(
            {
                "id": "no-destination",
                "date": "2025-02-20",
                "type": "train",
                "transport": "Joetsu Shinkansen",
                "origin": {"name": "Tokyo Station", "coordinates": [35.6812, 139.7671]},
                "destination": None,
            }
        ),
        Segment.from_dict(
            {
                "id": "ferry",
                "date": "2025-02-21",
                "type": "boat",
                "transport": "Ferry",
                "origin": {"name": "Yokohama Pier", "coordinates": [35.4515, 139.6479]},
                "destination": {"name": "Tokyo Bay", "coordinates": [35.6200, 139.7800]},
            }
        ),
    )
    bad_stay = Stay.from_dict(
        {"location": "Nowhere Inn", "coordinates": [float("nan"), 139.0], "dateStart": "a", "dateEnd": "b"}
    )
    return TripData(
        segments=sample_trip.segments + bad_segments,
        stays=sample_trip.stays + (bad_stay,),
        name=sample_trip.name,
    )


# =============================================================================
# ENGINE
# =============================================================================


@pytest.fixture
def japan() -> RegionPreset:
    return RegionPreset.japan()


@pytest.fixture
def sample_engine(deck_host: DeckHostMap, japan: RegionPreset, sample_trip: TripData) -> RenderEngine:
    """Engine on the pydeck host with the bundled trip, as the Streamlit app builds it."""
    return RenderEngine.create(
        host_map=deck_host,
        region_preset=japan,
        intercontinental_pairs=AppConfig.INTERCONTINENTAL_PAIRS,
        trip_data=sample_trip,
    )


@pytest.fixture
def sm_and_ctx() -> SMAndCtx:
    """Fresh lifecycle machine with its context."""
    ctx = EngineContext()
    return EngineLifecycle(context=ctx), ctx
