"""Tests for travelmap data model classes.

Tests: TripData, Segment, Stay, NamedLocation, Bounds, RegionPreset, popups, messages, errors
Focus: Lenient parsing of the external trip shape, per-item validation, value semantics

Note: Fixtures are defined in conftest.py (make_segment, make_stay, japan_trip).
"""

import json
from collections.abc import Callable

import pytest

from travelmap.constants import SAMPLE_TRIP_PATH
from travelmap.model.errors import InvalidInputError, LayerGroupFaultError, TravelMapError
from travelmap.model.message import (
    HostMapUnavailableMessage,
    InvalidItemMessage,
    MessageLevel,
    RenderFailedMessage,
)
from travelmap.model.primitive import LocationPopup, Polyline, PolylineStyle, RoutePopup, StayPopup
from travelmap.model.trip import NamedLocation, Segment, Stay, TripData
from travelmap.model.view import Bounds, RegionPreset

# =============================================================================
# TRIP DATA
# =============================================================================


class TestTripParsing:
    """TripData.from_dict - external trip shape."""

    def test_segment_from_dict(self) -> None:
        segment = Segment.from_dict(
            {
                "id": "2",
                "date": "2025-02-17",
                "type": "flight",
                "transport": "NH 11",
                "origin": {"name": "O'Hare (ORD)", "code": "ORD", "coordinates": [41.9742, -87.9073]},
                "destination": {"name": "Narita (NRT)", "code": "NRT", "coordinates": [35.772, 140.3929]},
            }
        )
        assert segment.id == "2"
        assert segment.origin == NamedLocation(name="O'Hare (ORD)", lat=41.9742, lng=-87.9073, code="ORD")
        assert segment.destination is not None and segment.destination.code == "NRT"

    def test_location_without_code(self) -> None:
        location = NamedLocation.from_dict({"name": "Nippori Station", "coordinates": [35.7281, 139.7703]})
        assert location is not None and location.code is None

    def test_missing_location_is_none(self) -> None:
        assert NamedLocation.from_dict(None) is None

    def test_bad_coordinates_become_nan(self) -> None:
        location = NamedLocation.from_dict({"name": "Nowhere", "coordinates": "unknown"})
        assert location is not None and not location.is_valid

    def test_stay_default_id(self) -> None:
        stay = Stay.from_dict(
            {"location": "Hyatt Regency Tokyo", "coordinates": [35.691091, 139.691477], "dateStart": "a", "dateEnd": "b"}
        )
        assert stay.id == "stay-hyatt-regency-tokyo"
        assert stay.notes is None

    def test_stay_explicit_id_wins(self) -> None:
        stay = Stay.from_dict({"_id": "abc123", "location": "Ryugon", "coordinates": [37.05, 138.88]})
        assert stay.id == "abc123"

    def test_trip_rejects_non_mapping(self) -> None:
        with pytest.raises(InvalidInputError):
            TripData.from_dict([])  # type: ignore[arg-type]

    def test_trip_rejects_non_list_segments(self) -> None:
        with pytest.raises(InvalidInputError):
            TripData.from_dict({"segments": "none"})

    def test_sample_trip_loads(self) -> None:
        with open(SAMPLE_TRIP_PATH, "r", encoding="utf-8") as fh:
            trip = TripData.from_dict(json.load(fh))
        assert trip.name == "Japan Adventure 2025"
        assert len(trip.segments) == 16
        assert len(trip.stays) == 5
        assert all(s.endpoints() for s in trip.segments)

    def test_find_item(self, japan_trip: TripData) -> None:
        assert isinstance(japan_trip.find_item("walk"), Segment)
        assert isinstance(japan_trip.find_item("stay-hyatt-regency-yokohama"), Stay)
        assert japan_trip.find_item("missing") is None
        assert japan_trip.find_item(None) is None

    def test_item_ids_segments_first(self, japan_trip: TripData) -> None:
        assert japan_trip.item_ids[0] == "dca-ord"
        assert japan_trip.item_ids[-1] == "stay-hyatt-regency-yokohama"


class TestValidation:
    """Per-item validation raises InvalidInputError with the item id."""

    def test_valid_endpoints(self, make_segment: Callable[..., Segment]) -> None:
        segment = make_segment("ok", "train", (35.0, 139.0), (36.0, 139.5))
        origin, destination = segment.endpoints()
        assert origin.lat_lng == (35.0, 139.0)
        assert destination.lat_lng == (36.0, 139.5)

    def test_missing_endpoint(self, make_segment: Callable[..., Segment]) -> None:
        segment = make_segment("half", "train", (35.0, 139.0), None)
        with pytest.raises(InvalidInputError) as exc_info:
            segment.endpoints()
        assert exc_info.value.item_id == "half"

    @pytest.mark.parametrize("bad", [(float("nan"), 139.0), (91.0, 139.0), (35.0, float("inf"))])
    def test_invalid_coordinates(self, make_segment: Callable[..., Segment], bad: tuple[float, float]) -> None:
        segment = make_segment("bad", "train", bad, (36.0, 139.5))
        with pytest.raises(InvalidInputError, match="origin has invalid coordinates"):
            segment.endpoints()

    def test_stay_validate(self, make_stay: Callable[..., Stay]) -> None:
        make_stay("Fine", (35.0, 139.0)).validate()
        with pytest.raises(InvalidInputError):
            make_stay("Polar", (-95.0, 0.0)).validate()

    def test_error_is_value_error(self) -> None:
        error = InvalidInputError("unknown transport class 'boat'", item_id="7")
        assert isinstance(error, ValueError) and isinstance(error, TravelMapError)
        assert str(error) == "7: unknown transport class 'boat'"

    def test_layer_group_fault_message(self) -> None:
        fault = LayerGroupFaultError(layer_key="trains", cause=RuntimeError("boom"))
        assert "trains" in str(fault) and "RuntimeError" in str(fault)


# =============================================================================
# VIEW VALUES
# =============================================================================


class TestBounds:
    """Bounds - geographic boxes."""

    def test_from_corners_orders_edges(self) -> None:
        bounds = Bounds.from_corners((40.0, 10.0), (35.0, 5.0))
        assert bounds == Bounds(south=35.0, west=5.0, north=40.0, east=10.0)
        assert bounds.south_west == (35.0, 5.0)
        assert bounds.north_east == (40.0, 10.0)

    def test_contains_is_strict(self) -> None:
        bounds = Bounds(south=30.0, west=127.0, north=46.0, east=146.0)
        assert bounds.contains(lat=35.0, lng=139.0)
        assert not bounds.contains(lat=30.0, lng=139.0)
        assert not bounds.contains(lat=35.0, lng=146.0)

    def test_inflated(self) -> None:
        bounds = Bounds(south=1.0, west=2.0, north=1.0, east=2.0).inflated(margin_deg=0.5)
        assert bounds == Bounds(south=0.5, west=1.5, north=1.5, east=2.5)

    def test_center(self) -> None:
        assert Bounds(south=0.0, west=170.0, north=10.0, east=190.0).center == (5.0, 180.0)

    def test_japan_preset(self) -> None:
        japan = RegionPreset.japan()
        assert japan.center == (36.5, 138.5)
        assert japan.zoom == 6
        assert japan.bounds.contains(*japan.center)


# =============================================================================
# PRIMITIVES AND POPUPS
# =============================================================================


class TestPopups:
    """Popup payloads - explicit records with plain-text rendering."""

    def test_route_popup(self) -> None:
        popup = RoutePopup(transport="Skyliner", origin_name="Narita T1", destination_name="Nippori")
        assert popup.text == "Skyliner\nFrom: Narita T1\nTo: Nippori"

    def test_location_popup_with_and_without_code(self) -> None:
        assert LocationPopup(name="O'Hare", code="ORD").text == "O'Hare (ORD)"
        assert LocationPopup(name="Nippori Station").text == "Nippori Station"

    def test_stay_popup(self) -> None:
        popup = StayPopup(name="Ryugon", date_start="2025-02-20", date_end="2025-02-21", notes="Ryokan")
        assert popup.lines == ["Ryugon", "Ryokan", "2025-02-20 to 2025-02-21"]
        assert StayPopup(name="Ryugon", date_start="a", date_end="b").lines == ["Ryugon", "a to b"]

    def test_degenerate_polyline(self) -> None:
        style = PolylineStyle(color="#ff9900", weight=2, opacity=0.7)
        popup = RoutePopup(transport="Walking", origin_name="A", destination_name="A")
        same = Polyline(item_id="w", points=[(1.0, 2.0), (1.0, 2.0)], style=style, popup=popup, layer_key="walks")
        line = Polyline(item_id="w", points=[(1.0, 2.0), (1.0, 2.1)], style=style, popup=popup, layer_key="walks")
        assert same.is_degenerate
        assert not line.is_degenerate


# =============================================================================
# MESSAGES
# =============================================================================


class TestMessages:
    """Engine messages - level, recoverability, text."""

    def test_host_unavailable_is_recoverable(self) -> None:
        msg = HostMapUnavailableMessage(detail="container removed")
        assert msg.recoverable
        assert msg.level == MessageLevel.WARNING
        assert "container removed" in str(msg)

    def test_render_failed_is_fatal(self) -> None:
        msg = RenderFailedMessage(error_type="EngineInvariantError", detail="Unknown layer key 'boats'")
        assert not msg.recoverable
        assert msg.level == MessageLevel.ERROR
        assert "Reload" in msg.message

    def test_invalid_item_message(self, caplog: pytest.LogCaptureFixture) -> None:
        msg = InvalidItemMessage(item_id="7", reason="segment is missing an endpoint")
        assert msg.level == MessageLevel.INFO
        with caplog.at_level("WARNING"):
            msg.log()
        assert "[INPUT] Skipped 7" in caplog.text

    def test_messages_are_values(self) -> None:
        assert InvalidItemMessage(item_id="1", reason="x") == InvalidItemMessage(item_id="1", reason="x")
