"""Travel Map - Trip timeline on an interactive world map.

Shows a trip's transport segments and overnight stays on a pydeck map with
three view modes (world, region, local) and a focused item.

Run: streamlit run travelmap/app.py
"""

import json
import logging
import traceback
from pathlib import Path
from typing import Any

import streamlit as st

from travelmap.constants import SAMPLE_TRIP_PATH, AppConfig, MapConfig, StyleConfig, TransportConfig
from travelmap.model.trip import Segment, TripData
from travelmap.model.view import RegionPreset, ViewMode
from travelmap.ui.deck_map import DeckHostMap
from travelmap.ui.render_engine import EngineEvent, RenderEngine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


@st.cache_data
def load_trip_dict(path: str) -> dict[str, Any]:
    """Read the trip JSON once per file."""
    with open(Path(path), "r", encoding="utf-8") as fh:
        return json.load(fh)


def init_session_state() -> None:
    """Create the host map and render engine once per session."""
    if "engine" in st.session_state:
        return

    trip = TripData.from_dict(load_trip_dict(path=str(SAMPLE_TRIP_PATH)))
    host = DeckHostMap(viewport_px=(MapConfig.DEFAULT_VIEWPORT_PX[0], MapConfig.MAP_HEIGHT_PX))
    engine = RenderEngine.create(
        host_map=host,
        region_preset=RegionPreset.japan(),
        intercontinental_pairs=AppConfig.INTERCONTINENTAL_PAIRS,
    )

    engine.on(EngineEvent.RENDER_ERROR, lambda message: logger.warning(f"[MAIN] Render error: {message}"))
    engine.set_trip_data(trip_data=trip)

    st.session_state.trip = trip
    st.session_state.host_map = host
    st.session_state.engine = engine
    logger.info(f"[MAIN] Session initialized: {trip.name}, engine state={engine.state_name}")


def reset_engine() -> None:
    """Dispose the engine and start over with a fresh host map."""
    engine: RenderEngine | None = st.session_state.get("engine")
    if engine is not None:
        engine.dispose()
    for key in ("engine", "host_map", "trip"):
        st.session_state.pop(key, None)
    logger.info("[MAIN] Engine reset")


# =============================================================================
# SIDEBAR
# =============================================================================


def item_label(trip: TripData, item_id: str | None) -> str:
    if item_id is None:
        return "Nothing focused"
    item = trip.find_item(item_id)
    if isinstance(item, Segment):
        origin = item.origin.name if item.origin else "?"
        destination = item.destination.name if item.destination else "?"
        return f"{item.date} · {item.transport}: {origin} → {destination}"
    if item is not None:
        return f"{item.date_start} · Stay: {item.location}"
    return item_id


def render_sidebar(engine: RenderEngine, trip: TripData) -> None:
    """View mode and focused item controls."""
    st.sidebar.header(trip.name or "Trip")

    focused_id = st.sidebar.selectbox(
        "Focused item",
        options=[None, *trip.item_ids],
        format_func=lambda item_id: item_label(trip=trip, item_id=item_id),
    )

    # Local view needs something to frame
    modes = [ViewMode.WORLD, ViewMode.REGION]
    if focused_id is not None:
        modes.append(ViewMode.LOCAL)
    mode = st.sidebar.radio(
        "View",
        options=modes,
        format_func=lambda m: {
            ViewMode.WORLD: "World",
            ViewMode.REGION: engine.region_preset.name,
            ViewMode.LOCAL: "Focused item",
        }[m],
        horizontal=True,
    )

    if focused_id != engine.context.focused_item_id:
        engine.set_focused_item(item_id=focused_id)
    if mode != engine.context.view_mode:
        engine.set_view_mode(mode=mode)


def render_legend() -> None:
    """Color legend for transport classes and stays."""
    rows = [
        f'<span style="color:{StyleConfig.ROUTE_COLORS[t]}">&#9632;</span> {TransportConfig.DISPLAY_NAMES[t]}'
        for t in TransportConfig.TYPES
    ]
    rows.append(
        f'<span style="color:{StyleConfig.STAY_COLOR}"><b>{StyleConfig.STAY_GLYPH}</b></span> '
        f"{StyleConfig.STAY_LEGEND_LABEL}"
    )
    st.sidebar.markdown(f"**{StyleConfig.LEGEND_TITLE}**<br>" + "<br>".join(rows), unsafe_allow_html=True)


# =============================================================================
# MAIN
# =============================================================================


def _run_app_ui() -> None:
    engine: RenderEngine = st.session_state.engine
    host: DeckHostMap = st.session_state.host_map
    trip: TripData = st.session_state.trip

    render_sidebar(engine=engine, trip=trip)
    render_legend()

    logger.info(f"[MAIN] Render cycle: state={engine.state_name}, mode={engine.context.view_mode.value}")
    if engine.render_error is not None:
        engine.render_error.display()
        if not engine.render_error.recoverable and st.button("🔄 Reload map", type="primary"):
            reset_engine()
            st.rerun()

    if host.is_ready:
        st.pydeck_chart(host.to_deck(), height=MapConfig.MAP_HEIGHT_PX)

    if engine.diagnostics:
        with st.expander(f"Skipped items ({len(engine.diagnostics)})"):
            for message in engine.diagnostics:
                st.caption(message.message)


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)
    init_session_state()

    st.title(AppConfig.TITLE)

    try:
        _run_app_ui()
    except Exception as e:
        error_msg = f"{type(e).__name__}: {e}"
        logger.error(f"[UI] UI error caught: {error_msg}\n{traceback.format_exc()}")
        st.error(f"⚠️ [UI] Something went wrong: {error_msg}")
        reset_engine()
        if st.button("🔄 Reset and Continue", type="primary"):
            st.rerun()


if __name__ == "__main__":
    main()
