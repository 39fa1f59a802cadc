"""LayerManager - Owns the seven named layer groups on the host map.

Group keys, created in this order (= z-order, back to front):
    flights → trains → shuttles → walks → buses → stays → active

Responsibilities:
- initialize(): create the groups once the host map is ready (idempotent)
- ensure_groups(): recreate any group the host tore down
- clear_all(): empty every group at the start of a render pass
- add(): replicate a primitive into the three world copies and attach them
- dispose(): clear and remove every group, then drop the host reference

A group that fails to clear is logged, dropped and recreated on the next
pass; the other groups are unaffected.
"""

import logging

from travelmap.constants import LayerConfig
from travelmap.core.world_wrap import WorldWrap
from travelmap.model.errors import (
    EngineInvariantError,
    HostMapUnavailableError,
    LayerGroupFaultError,
)
from travelmap.model.primitive import Marker, MarkerRole, Primitive
from travelmap.ui.host_map import HostLayerGroup, HostMap

logger = logging.getLogger(__name__)


class LayerManager:
    """Layer group bookkeeping for one host map.

    Example:
        layers = LayerManager()
        layers.initialize(host_map=host)
        layers.clear_all()
        for primitive in primitives:
            layers.add(primitive=primitive)
    """

    def __init__(self) -> None:
        self.host_map: HostMap | None = None
        self.groups: dict[str, HostLayerGroup] = {}
        # Contents of the current pass, per group (what the host was given)
        self.contents: dict[str, list[Primitive]] = {key: [] for key in LayerConfig.LAYER_KEYS}
        self._marker_keys: set[tuple[str, MarkerRole, float]] = set()

    @property
    def is_initialized(self) -> bool:
        return self.host_map is not None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self, host_map: HostMap) -> None:
        """Create the seven groups on host_map.

        Calling it again with the same host map keeps the existing groups
        and only clears them. A different host map takes the groups off the
        previous one first.
        """
        if self.host_map is host_map:
            self.clear_all()
            return
        if self.host_map is not None:
            logger.info("[LAYERS] Moving to a new host map")
            self.dispose()
        self.host_map = host_map
        self.groups = {}
        self.ensure_groups()
        logger.info(f"[LAYERS] Initialized {len(self.groups)} layer groups")

    def ensure_groups(self) -> None:
        """Recreate missing groups, keeping z-order."""
        if self.host_map is None:
            raise EngineInvariantError("LayerManager used before initialize()")
        for key, group in list(self.groups.items()):
            if not self.host_map.has_layer_group(group=group):
                del self.groups[key]
        missing =[key for key in LayerConfig.LAYER_KEYS if key not in self.groups]
        if not missing:
            return
        if len(missing) < len(LayerConfig.LAYER_KEYS):
            logger.warning(f"[LAYERS] Recreating missing groups: {missing}")
            # Groups draw in creation order; rebuild the whole stack so a
            # recreated group does not end up on top of the others
            self._remove_groups()
            missing = list(LayerConfig.LAYER_KEYS)
        for key in missing:
            self.groups[key] = self.host_map.create_layer_group(name=key)

    def dispose(self) -> None:
        """Clear and remove every group, then release the host map."""
        if self.host_map is None:
            return
        try:
            self.clear_all()
            self._remove_groups()
        except HostMapUnavailableError:
            logger.info("[LAYERS] Host map already gone, dropping group references")
        self.groups = {}
        self.host_map = None
        logger.info("[LAYERS] Disposed")

    def _remove_groups(self) -> None:
        for key, group in list(self.groups.items()):
            try:
                group.remove()
            except HostMapUnavailableError:
                raise
            except Exception as e:
                fault = LayerGroupFaultError(layer_key=key, cause=e)
                logger.warning(f"[LAYERS] {fault}", exc_info=e)
        self.groups = {}

    # =========================================================================
    # RENDER PASS
    # =========================================================================

    def clear_all(self) -> None:
        """Empty every group and forget the previous pass's contents.

        Raises:
            HostMapUnavailableError: The host map container is gone.
        """
        for key, group in list(self.groups.items()):
            try:
                group.clear_layers()
            except HostMapUnavailableError:
                raise
            except Exception as e:
                self._drop_group(key=key, cause=e)
        self.contents = {key: [] for key in LayerConfig.LAYER_KEYS}
        self._marker_keys = set()

    def add(self, primitive: Primitive) -> None:
        """Attach the three world copies of primitive to its layer group.

        Raises:
            EngineInvariantError: Unknown layer key or duplicate marker.
            HostMapUnavailableError: The host map container is gone.
        """
        key = primitive.layer_key
        if key not in LayerConfig.LAYER_KEYS:
            raise EngineInvariantError(f"Unknown layer key '{key}'")
        group = self.groups.get(key)
        if group is None:
            # Dropped after a fault earlier in this pass, recreated next pass
            logger.debug(f"[LAYERS] Group '{key}' unavailable, skipping {primitive.item_id}")
            return

        for replica in WorldWrap.replicate(primitive=primitive):
            if isinstance(replica, Marker):
                if replica.dedup_key in self._marker_keys:
                    raise EngineInvariantError(f"Duplicate marker {replica.dedup_key}")
                self._marker_keys.add(replica.dedup_key)
            try:
                group.add(replica)
            except HostMapUnavailableError:
                raise
            except Exception as e:
                self._drop_group(key=key, cause=e)
                self.contents[key] = []
                return
            self.contents[key].append(replica)

    def _drop_group(self, key: str, cause: Exception) -> None:
        """Forget a faulty group and take it off the host; ensure_groups() recreates it."""
        fault = LayerGroupFaultError(layer_key=key, cause=cause)
        logger.warning(f"[LAYERS] {fault}; group dropped", exc_info=cause)
        group = self.groups.pop(key)
        try:
            group.remove()
        except HostMapUnavailableError:
            raise
        except Exception as e:
            logger.warning(f"[LAYERS] Could not remove faulty group '{key}': {e}", exc_info=e)

    def snapshot(self) -> dict[str, list[Primitive]]:
        """Copy of the current per-group contents."""
        return {key: list(items) for key, items in self.contents.items()}

    def count(self, layer_key: str | None = None) -> int:
        if layer_key is not None:
            return len(self.contents[layer_key])
        return sum(len(items) for items in self.contents.values())
