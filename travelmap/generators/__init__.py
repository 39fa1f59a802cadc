"""Turn trip items into map primitives and views.

- PrimitiveBuilder: segment/stay → markers and (split) polylines
- ViewSelector: view mode + focused item → FixedView or FitView
"""

from travelmap.generators.primitive_builder import PrimitiveBuilder
from travelmap.generators.view_selector import ViewSelector

__all__ = [
    "PrimitiveBuilder",
    "ViewSelector",
]
