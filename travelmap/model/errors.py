"""Exception hierarchy for the travel map engine.

Categories:
- InvalidInputError: one trip item is unusable; the item is skipped
- HostMapUnavailableError: the host map container was torn down
- LayerGroupFaultError: clearing or attaching a layer group failed
- EngineInvariantError: an engine invariant was violated; the pass aborts
"""


class TravelMapError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(TravelMapError, ValueError):
    """Trip item with bad coordinates, a missing endpoint or an unknown class.

    Attributes:
        item_id: ID of the offending segment or stay (None if unknown)
        reason: Short human-readable reason
    """

    def __init__(self, reason: str, item_id: str | None = None) -> None:
        self.item_id = item_id
        self.reason = reason
        prefix = f"{item_id}: " if item_id is not None else ""
        super().__init__(f"{prefix}{reason}")


class HostMapUnavailableError(TravelMapError):
    """The host map reference is no longer usable."""


class LayerGroupFaultError(TravelMapError):
    """A layer group could not be cleared, attached or removed."""

    def __init__(self, layer_key: str, cause: Exception) -> None:
        self.layer_key = layer_key
        self.cause = cause
        super().__init__(f"Layer group '{layer_key}' failed: {type(cause).__name__}: {cause}")


class EngineInvariantError(TravelMapError):
    """Violation of an engine invariant (e.g. unknown layer key)."""
