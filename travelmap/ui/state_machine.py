"""Engine lifecycle state machine.

Uses python-statemachine for the engine's three lifecycle states:

States:
    UNINIT: Created, host map not ready yet; setters only record inputs
    INITIALIZED: Layer groups exist; every input change runs a render pass
    DISPOSED: Final; groups torn down, every call is a no-op

Transitions:
    UNINIT -> INITIALIZED: map_ready
    UNINIT -> DISPOSED: dispose
    INITIALIZED -> DISPOSED: dispose

Render failures do not change state: the engine stays INITIALIZED and
retries on the next input change.

EngineContext is the model object (model pattern): the machine stores the
current state value in its `state` field. LayerTeardownListener logs every
transition and releases the layer groups when the machine enters DISPOSED.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from travelmap.model.trip import TripData
from travelmap.model.view import ViewMode

if TYPE_CHECKING:
    from travelmap.model.message import RenderErrorMessage
    from travelmap.ui.layer_manager import LayerManager

logger = logging.getLogger(__name__)


@dataclass
class EngineContext:
    """Inputs and flags of one render engine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    # State managed by python-statemachine (model pattern)
    state: str | None = None

    trip_data: TripData | None = None
    view_mode: ViewMode = ViewMode.WORLD
    focused_item_id: str | None = None

    # False once disposed; every deferred host callback checks it first
    mounted: bool = True

    # Last error surfaced through render_error (None after a clean pass)
    render_error: RenderErrorMessage | None = None

    def __repr__(self) -> str:
        return (
            f"EngineContext(state={self.state}, mode={self.view_mode.value}, "
            f"focused={self.focused_item_id}, mounted={self.mounted})"
        )


class LayerTeardownListener:
    """Logs transitions and tears down layer groups on dispose.

    Usage:
        sm = EngineLifecycle(context=context)
        sm.add_listener(LayerTeardownListener(layers=layer_manager))
    """

    def __init__(self, layers: LayerManager) -> None:
        self.layers = layers

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[STATE] {source.name} --({event})--> {target.name}")
        if target.id == "disposed":
            self.layers.dispose()


class EngineLifecycle(StateMachine):
    """Lifecycle of a render engine. See module docstring for transitions."""

    # ==========================================================================
    # State Definitions
    # ==========================================================================

    uninit = State("Uninit", initial=True)
    initialized = State("Initialized")
    disposed = State("Disposed", final=True)

    # ==========================================================================
    # Transitions
    # ==========================================================================

    map_ready = uninit.to(initialized)
    dispose = uninit.to(disposed) | initialized.to(disposed)

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_uninit(self) -> bool:
        return self.uninit.is_active

    @property
    def is_initialized(self) -> bool:
        return self.initialized.is_active

    @property
    def is_disposed(self) -> bool:
        return self.disposed.is_active

    # ==========================================================================
    # Entry Hooks
    # ==========================================================================

    def on_enter_disposed(self) -> None:
        """Hook: pending callbacks become no-ops from here on."""
        self.context.mounted = False

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(self, context: EngineContext | None = None) -> None:
        model = context or EngineContext()
        super().__init__(model=model)

    @property
    def context(self) -> EngineContext:
        """Alias for model."""
        return self.model

    def get_state_name(self) -> str:
        return self.current_state.name

    def __repr__(self) -> str:
        return f"EngineLifecycle(state={self.get_state_name()}, model={self.context!r})"

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition

        Returns:
            True if transition succeeded, False otherwise.
        """
        if self.is_disposed:
            logger.debug(f"[STATE] '{event}' ignored, engine is disposed")
            return False
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.debug(f"[STATE] '{event}' not allowed from {self.get_state_name()}")
            return False
