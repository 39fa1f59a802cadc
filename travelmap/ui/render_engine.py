"""RenderEngine - Top of the map rendering pipeline.

Observes (trip data, view mode, focused item, host map ready) and runs one
render pass on every change:

1. Host map not ready → nothing (a recoverable render_error once groups exist)
2. Initialize the layer groups on first use; recreate any the host tore down
3. Clear every group
4. Build primitives for the current view mode
   - world: intercontinental flights only
   - region: segments inside the region bounds, plus every stay
   - local: the focused segment, or the focused stay plus nearby segments
5. Add them in z-order (flights → ... → stays → active), three world copies each
6. Apply the target view from the ViewSelector
7. Request a viewport-size invalidation; view_changed fires from its callback

Errors:
- InvalidInputError for one item: skip it, log, emit diagnostic
- HostMapUnavailableError, or the host map no longer ready: abort the pass,
  emit a recoverable render_error
- EngineInvariantError or any other exception: abort the pass, emit a fatal render_error
The engine stays INITIALIZED after all of them; the next input change retries.

Setters called while a pass is running (e.g. from an event handler) do not
nest: the running pass is marked dirty and one more pass runs after it.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from travelmap.constants import LayerConfig, TransportConfig, ViewConfig
from travelmap.generators.primitive_builder import PrimitiveBuilder
from travelmap.generators.view_selector import ViewSelector
from travelmap.model.errors import EngineInvariantError, HostMapUnavailableError, InvalidInputError
from travelmap.model.message import (
    HostMapUnavailableMessage,
    InvalidItemMessage,
    RenderErrorMessage,
    RenderFailedMessage,
)
from travelmap.model.primitive import Primitive
from travelmap.model.trip import Segment, Stay, TripData
from travelmap.model.view import FitView, FixedView, RegionPreset, TargetView, ViewMode
from travelmap.ui.host_map import HostMap
from travelmap.ui.layer_manager import LayerManager
from travelmap.ui.state_machine import EngineContext, EngineLifecycle, LayerTeardownListener

logger = logging.getLogger(__name__)

# Sort key for the z-order contract; unknown keys sort last and fail in LayerManager.add
LAYER_ORDER = {key: index for index, key in enumerate(LayerConfig.LAYER_KEYS)}


class EngineEvent(Enum):
    """Observable engine events."""

    RENDER_ERROR = "render_error"  # payload: RenderErrorMessage
    VIEW_CHANGED = "view_changed"  # payload: FixedView | FitView
    DIAGNOSTIC = "diagnostic"  # payload: InvalidItemMessage


class RenderEngine:
    """Drives PrimitiveBuilder → LayerManager → ViewSelector for one host map.

    Example:
        engine = RenderEngine.create(host_map=DeckHostMap(), region_preset=RegionPreset.japan())
        engine.on(EngineEvent.RENDER_ERROR, lambda msg: msg.display())
        engine.set_trip_data(trip_data=trip)
        engine.set_view_mode(mode=ViewMode.REGION)
    """

    def __init__(
        self,
        host_map: HostMap,
        region_preset: RegionPreset,
        intercontinental_pairs: list[tuple[str, str]] | None = None,
        builder: PrimitiveBuilder | None = None,
    ) -> None:
        self.host_map = host_map
        self.region_preset = region_preset
        self.intercontinental_pairs = intercontinental_pairs or []
        self.builder = builder or PrimitiveBuilder()

        self.context = EngineContext()
        self.layers = LayerManager()
        self.lifecycle = EngineLifecycle(context=self.context)
        self.lifecycle.add_listener(LayerTeardownListener(layers=self.layers))

        self.handlers: dict[EngineEvent, list[Callable[[Any], None]]] = {event: [] for event in EngineEvent}
        self.diagnostics: list[InvalidItemMessage] = []
        self.last_view: TargetView | None = None
        self.pass_count = 0

        self._rendering = False
        self._dirty = False

    @staticmethod
    def create(
        host_map: HostMap,
        region_preset: RegionPreset | None = None,
        intercontinental_pairs: list[tuple[str, str]] | None = None,
        trip_data: TripData | None = None,
    ) -> "RenderEngine":
        """Factory: build an engine and move it to INITIALIZED if the host is ready.

        Args:
            host_map: Map the engine exclusively owns from now on
            region_preset: Window for the region mode (Japan if None)
            intercontinental_pairs: Optional (origin code, destination code) allow-list
            trip_data: Optional initial trip

        Returns:
            The engine. If the host map is not ready yet, call notify_map_ready() later.
        """
        engine = RenderEngine(
            host_map=host_map,
            region_preset=region_preset or RegionPreset.japan(),
            intercontinental_pairs=intercontinental_pairs,
        )
        engine.context.trip_data = trip_data
        engine.notify_map_ready()
        return engine

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def is_disposed(self) -> bool:
        return self.lifecycle.is_disposed

    @property
    def is_initialized(self) -> bool:
        return self.lifecycle.is_initialized

    @property
    def state_name(self) -> str:
        return self.lifecycle.get_state_name()

    @property
    def render_error(self) -> RenderErrorMessage | None:
        return self.context.render_error

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def on(self, event: EngineEvent | str, handler: Callable[[Any], None]) -> None:
        """Subscribe handler to an engine event ("render_error", "view_changed", "diagnostic")."""
        self.handlers[EngineEvent(event)].append(handler)

    def set_trip_data(self, trip_data: TripData | None) -> None:
        if self.is_disposed:
            return
        self.context.trip_data = trip_data
        self.request_render()

    def set_view_mode(self, mode: ViewMode | str) -> None:
        if self.is_disposed:
            return
        self.context.view_mode = ViewMode(mode)
        self.request_render()

    def set_focused_item(self, item_id: str | None) -> None:
        if self.is_disposed:
            return
        self.context.focused_item_id = item_id
        self.request_render()

    def notify_map_ready(self) -> None:
        """Tell the engine the host map container exists; renders if it does."""
        if self.is_disposed:
            return
        if not self.host_map.is_ready:
            logger.info("[RENDER] Host map not ready, waiting")
            return
        self.lifecycle.try_transition("map_ready")
        self.request_render()

    def dispose(self) -> None:
        """Tear down layer groups; later calls of any kind are no-ops. Idempotent."""
        if self.is_disposed:
            return
        self.lifecycle.try_transition("dispose")

    # =========================================================================
    # RENDER PASS
    # =========================================================================

    def request_render(self) -> None:
        """Run a render pass now, or after the running one finishes."""
        if not self.is_initialized:
            return
        if self._rendering:
            self._dirty = True
            logger.debug("[RENDER] Pass already running, marked dirty")
            return
        self._rendering = True
        try:
            while True:
                self._dirty = False
                self._render_pass()
                if not self._dirty or not self.context.mounted:
                    break
        finally:
            self._rendering = False

    def _render_pass(self) -> None:
        if not self.host_map.is_ready:
            if self.layers.is_initialized:
                # Groups were attached to a container that is gone now
                logger.warning("[RENDER] Host map no longer ready")
                self._report(HostMapUnavailableMessage(detail="map container detached"))
            return
        self.pass_count += 1
        self.diagnostics = []
        try:
            if self.layers.is_initialized:
                self.layers.ensure_groups()
            else:
                self.layers.initialize(host_map=self.host_map)
            self.layers.clear_all()

            primitives = self.build_primitives()
            primitives.sort(key=lambda p: LAYER_ORDER.get(p.layer_key, len(LAYER_ORDER)))
            for primitive in primitives:
                self.layers.add(primitive=primitive)

            view = self.select_view()
            self.apply_view(view=view)
            self.host_map.invalidate_size(on_done=self._guarded(lambda: self._on_view_applied(view)))
            self.context.render_error = None
            logger.info(
                f"[RENDER] Pass {self.pass_count}: mode={self.context.view_mode.value}, "
                f"{len(primitives)} primitives, {self.layers.count()} attached"
            )
        except HostMapUnavailableError as e:
            logger.warning(f"[RENDER] Host map unavailable: {e}")
            self._report(HostMapUnavailableMessage(detail=str(e)))
        except EngineInvariantError as e:
            logger.error(f"[RENDER] Pass aborted: {e}", exc_info=e)
            self._report(RenderFailedMessage(error_type=type(e).__name__, detail=str(e)))
        except Exception as e:
            logger.error(f"[RENDER] Unexpected error in render pass: {e}", exc_info=e)
            self._report(RenderFailedMessage(error_type=type(e).__name__, detail=str(e)))

    def build_primitives(self) -> list[Primitive]:
        """Primitives for the current mode, in item order (not yet z-sorted)."""
        trip = self.context.trip_data
        if trip is None:
            return []
        mode = self.context.view_mode
        focused_id = self.context.focused_item_id
        selector = self._selector()
        seen_ids: set[str] = set()
        primitives: list[Primitive] = []

        def emit(item: Segment | Stay, build: Callable[[], list[Primitive]]) -> None:
            try:
                if item.id in seen_ids:
                    raise InvalidInputError("duplicate item id", item_id=item.id)
                seen_ids.add(item.id)
                primitives.extend(build())
            except InvalidInputError as e:
                self._diagnose(error=e)

        if mode == ViewMode.WORLD:
            for segment in trip.segments:
                if self._matches(segment, lambda s: selector.is_intercontinental(segment=s)):
                    emit(segment, self._segment_builder(segment=segment, is_active=segment.id == focused_id))

        elif mode == ViewMode.REGION:
            for segment in trip.segments:
                if self._matches(segment, self._in_region):
                    emit(segment, self._segment_builder(segment=segment, is_active=segment.id == focused_id))
            for stay in trip.stays:
                emit(stay, self._stay_builder(stay=stay, is_active=stay.id == focused_id))

        else:
            focused = trip.find_item(focused_id)
            if isinstance(focused, Segment):
                emit(focused, self._segment_builder(segment=focused, is_active=True))
            elif isinstance(focused, Stay):
                emit(focused, self._stay_builder(stay=focused, is_active=True))
                for segment in trip.segments:
                    if self._matches(segment, lambda s: self._near(s, focused)):
                        emit(segment, self._segment_builder(segment=segment, is_active=False))

        return primitives

    def select_view(self) -> TargetView:
        selector = self._selector()
        trip = self.context.trip_data
        focused = trip.find_item(self.context.focused_item_id) if trip is not None else None
        try:
            return selector.select(mode=self.context.view_mode, focused_item=focused)
        except InvalidInputError as e:
            self._diagnose(error=e)
            return selector.world_view()

    def apply_view(self, view: TargetView) -> None:
        if isinstance(view, FixedView):
            logger.debug(f"[VIEW] set_view center={view.center} zoom={view.zoom}")
            self.host_map.set_view(center=view.center, zoom=view.zoom)
        elif isinstance(view, FitView):
            logger.debug(f"[VIEW] fit_bounds {view.bounds} padding={view.padding_px} max_zoom={view.max_zoom}")
            self.host_map.fit_bounds(bounds=view.bounds, padding_px=view.padding_px, max_zoom=view.max_zoom)
        else:
            raise EngineInvariantError(f"Unknown view type {type(view).__name__}")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _selector(self) -> ViewSelector:
        return ViewSelector(
            region_preset=self.region_preset,
            viewport_px=self.host_map.viewport_px,
            intercontinental_pairs=self.intercontinental_pairs,
        )

    def _segment_builder(self, segment: Segment, is_active: bool) -> Callable[[], list[Primitive]]:
        return lambda: self.builder.build_segment(segment=segment, is_active=is_active)

    def _stay_builder(self, stay: Stay, is_active: bool) -> Callable[[], list[Primitive]]:
        return lambda: self.builder.build_stay(stay=stay, is_active=is_active)

    def _matches(self, segment: Segment, predicate: Callable[[Segment], bool]) -> bool:
        """Apply a mode filter; a segment the filter cannot judge is reported and skipped."""
        try:
            return predicate(segment)
        except InvalidInputError as e:
            self._diagnose(error=e)
            return False

    def _in_region(self, segment: Segment) -> bool:
        if segment.type not in TransportConfig.TYPES:
            raise InvalidInputError(f"unknown transport class '{segment.type}'", item_id=segment.id)
        origin, destination = segment.endpoints()
        bounds = self.region_preset.bounds
        return bounds.contains(lat=origin.lat, lng=origin.lng) and bounds.contains(
            lat=destination.lat, lng=destination.lng
        )

    @staticmethod
    def _near(segment: Segment, stay: Stay) -> bool:
        limit = ViewConfig.STAY_NEARBY_DEG
        origin, destination = segment.endpoints()
        return any(
            abs(location.lat - stay.lat) <= limit and abs(location.lng - stay.lng) <= limit
            for location in (origin, destination)
        )

    def _guarded(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Wrap a host callback so it does nothing once the engine is unmounted."""

        def run() -> None:
            if not self.context.mounted:
                logger.debug("[RENDER] Callback after dispose ignored")
                return
            callback()

        return run

    def _on_view_applied(self, view: TargetView) -> None:
        self.last_view = view
        self._emit(EngineEvent.VIEW_CHANGED, view)

    def _report(self, message: RenderErrorMessage) -> None:
        self.context.render_error = message
        self._emit(EngineEvent.RENDER_ERROR, message)

    def _diagnose(self, error: InvalidInputError) -> None:
        message = InvalidItemMessage(item_id=error.item_id, reason=error.reason)
        if message in self.diagnostics:
            # Same item failed again later in the pass (e.g. while framing the view)
            return
        message.log()
        self.diagnostics.append(message)
        self._emit(EngineEvent.DIAGNOSTIC, message)

    def _emit(self, event: EngineEvent, payload: Any) -> None:
        for handler in list(self.handlers[event]):
            handler(payload)
