"""Travel Map - Render a trip's routes and stays on a world map.

A map rendering engine for trip timelines featuring:
- Great-circle flight routes split cleanly at the antimeridian
- World-copy replication so panning past ±180° never shows empty copies
- Per-transport styling and view framing (world, region, local)
- State machine-based engine lifecycle with a pydeck host map

Modules:
    core: Pure geometry (great circles, antimeridian splitting, world copies)
    model: Data structures (trip, primitives, views, messages, errors)
    generators: Primitive builder and view selector
    ui: Host map contract, pydeck host, layer manager, render engine

Example:
    from travelmap.model import TripData, ViewMode
    from travelmap.ui import DeckHostMap, RenderEngine
"""
