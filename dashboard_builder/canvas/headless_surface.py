"""
Headless Grid Surface
=====================

In-process surface that mirrors the browser grid. The browser forwards its
gestures here; this surface applies them to its own items (clamped to the
column bound and the item constraints) and reports them through the same
dropped/changed events the browser grid raises.
"""

import logging
import uuid
from typing import List, Optional

from .surface import (
    GridSurface, SurfaceConfig, SurfaceNode, SurfaceRoot, SurfaceItem,
    DroppedHandler, ChangedHandler
)

logger = logging.getLogger(__name__)


class SurfaceGestureError(Exception):
    """A gesture the surface does not accept in its current configuration."""


class HeadlessGridSurface(GridSurface):
    """Grid surface without a renderer."""

    def __init__(self, config: SurfaceConfig, root: SurfaceRoot):
        self.config = config
        self.root = root
        self.destroyed = False
        self._items: List[SurfaceItem] = [SurfaceItem(self._clamp(node)) for node in config.nodes]
        self._dropped_handlers: List[DroppedHandler] = []
        self._changed_handlers: List[ChangedHandler] = []

    @classmethod
    def init(cls, config: SurfaceConfig, root: SurfaceRoot) -> "HeadlessGridSurface":
        logger.debug(f"[HEADLESS-SURFACE] Init with {config.columns} columns, static={config.static}")
        return cls(config, root)

    def on_dropped(self, handler: DroppedHandler) -> None:
        self._dropped_handlers.append(handler)

    def on_changed(self, handler: ChangedHandler) -> None:
        self._changed_handlers.append(handler)

    def get_items(self) -> List[SurfaceItem]:
        return list(self._items)

    def remove_item(self, item: SurfaceItem) -> None:
        if item in self._items:
            self._items.remove(item)

    def destroy(self, keep_content: bool = False) -> None:
        if not keep_content:
            self._items = []
        self._dropped_handlers = []
        self._changed_handlers = []
        self.destroyed = True

    def cell_width(self) -> float:
        return self.root.width / self.config.columns

    def cell_height(self) -> float:
        if self.config.cell_height == "auto":
            return self.cell_width()
        return float(self.config.cell_height)

    # Gestures

    def drop(self, node: SurfaceNode) -> SurfaceNode:
        """An item from outside the grid was released on it."""
        self._check_usable()
        if not self.config.accept_drops:
            raise SurfaceGestureError("Surface does not accept dropped items")

        placed = self._clamp(node)
        if placed.id is None:
            placed.id = f"placeholder-{uuid.uuid4().hex[:8]}"
        self._items.append(SurfaceItem(placed))
        for handler in list(self._dropped_handlers):
            handler(placed.model_copy())
        return placed

    def move(self, nodes: List[SurfaceNode]) -> List[SurfaceNode]:
        """
        Items were moved or resized.

        Nodes without a live item are ignored. Locked items keep their
        geometry, noMove/noResize keep position/size respectively.
        """
        self._check_usable()
        if self.config.static:
            raise SurfaceGestureError("Surface is static")

        changed: List[SurfaceNode] = []
        for node in nodes:
            item = self.find_item(node.id) if node.id else None
            if item is None:
                continue
            current = item.node
            if current.locked:
                continue
            update = {}
            if not current.no_move:
                update.update(x=node.x, y=node.y)
            if not current.no_resize:
                update.update(w=node.w, h=node.h)
            moved = self._clamp(current.model_copy(update=update))
            if (moved.x, moved.y, moved.w, moved.h) != (current.x, current.y, current.w, current.h):
                item.node = moved
                changed.append(moved.model_copy())

        if changed:
            for handler in list(self._changed_handlers):
                handler(changed)
        return changed

    def _check_usable(self) -> None:
        if self.destroyed:
            raise SurfaceGestureError("Surface has been destroyed")

    def _clamp(self, node: SurfaceNode) -> SurfaceNode:
        columns = self.config.columns
        w = max(node.w, node.min_w or 1)
        h = max(node.h, node.min_h or 1)
        w = min(w, columns)
        x = max(0, min(node.x, columns - w))
        return node.model_copy(update={"x": x, "w": w, "h": h})

    def find_node(self, node_id: str) -> Optional[SurfaceNode]:
        item = self.find_item(node_id)
        return item.node if item else None
