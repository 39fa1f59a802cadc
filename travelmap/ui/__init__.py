"""Map integration for the travel map engine.

File Structure:
- host_map.py: HostMap / HostLayerGroup contract
- deck_map.py: DeckHostMap, the pydeck implementation
- basemap.py: Esri street raster style for pydeck
- layer_manager.py: The seven named layer groups
- state_machine.py: EngineLifecycle (3 states) + EngineContext
- render_engine.py: RenderEngine, the top of the pipeline
"""

from travelmap.ui.deck_map import DeckHostMap
from travelmap.ui.host_map import HostLayerGroup, HostMap
from travelmap.ui.layer_manager import LayerManager
from travelmap.ui.render_engine import EngineEvent, RenderEngine
from travelmap.ui.state_machine import EngineContext, EngineLifecycle, LayerTeardownListener

__all__ = [
    "RenderEngine",
    "EngineEvent",
    "EngineLifecycle",
    "EngineContext",
    "LayerTeardownListener",
    "LayerManager",
    "HostMap",
    "HostLayerGroup",
    "DeckHostMap",
]
