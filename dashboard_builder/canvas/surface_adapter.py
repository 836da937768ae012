"""
Layout Surface Adapter
======================

Owns the grid surface and keeps it isomorphic to the layout template.

Surface events become document mutations (dropped -> new widget,
changed -> geometry update), and template changes become a full
surface teardown and rebuild.
"""

import logging
from typing import List, Optional, Type

from ..models.preview_models import CellMetrics
from ..models.template_models import Template
from .events import EventEmitter, PreviewEvent
from .layout_document import LayoutDocument, ChangeOrigin
from .surface import GridSurface, SurfaceConfig, SurfaceNode, SurfaceRoot, SurfaceItem

logger = logging.getLogger(__name__)

SURFACE_MARGIN = 4


def template_to_nodes(template: Template) -> List[SurfaceNode]:
    """One surface node per widget, carrying the widget's grid item."""
    nodes = []
    for widget in template.widgets:
        item = widget.grid_item
        if item is None:
            continue
        nodes.append(SurfaceNode(
            id=item.id,
            x=item.x,
            y=item.y,
            w=item.w,
            h=item.h,
            min_w=item.min_w,
            min_h=item.min_h,
            no_resize=item.no_resize,
            no_move=item.no_move,
            locked=item.locked,
            widget_type=widget.widget_type
        ))
    return nodes


class LayoutSurfaceAdapter:
    """Lifecycle owner of the grid surface."""

    def __init__(
        self,
        document: LayoutDocument,
        events: EventEmitter,
        surface_class: Type[GridSurface],
        root: Optional[SurfaceRoot] = None
    ):
        self.document = document
        self.events = events
        self.surface_class = surface_class
        self.root = root
        self.surface: Optional[GridSurface] = None
        self.cell_metrics: Optional[CellMetrics] = None

    def initialize(self, template: Optional[Template], edit_mode: bool, force: bool = False) -> bool:
        """
        Build the surface for a template.

        Args:
            template: Template to lay out (an empty grid when None)
            edit_mode: Interactive surface accepting drops when True, static otherwise
            force: Destroy an existing surface first

        Returns:
            True if a new surface was constructed. Without a root nothing
            happens and the caller retries on its next render pass.
        """
        if self.root is None:
            logger.debug("[SURFACE-ADAPTER] No surface root yet, deferring initialization")
            return False

        if self.surface is not None:
            if not force:
                return False
            self.destroy()

        template = template or Template()
        config = SurfaceConfig(
            columns=template.columns,
            accept_drops=edit_mode,
            static=not edit_mode,
            margin=SURFACE_MARGIN,
            resize_handles="all",
            float_pack=True,
            animate=True,
            cell_height="auto",
            disable_one_column_mode=True,
            nodes=template_to_nodes(template)
        )
        self.surface = self.surface_class.init(config, self.root)
        self.surface.on_dropped(self._handle_dropped)
        self.surface.on_changed(self._handle_changed)

        self.cell_metrics = CellMetrics(
            width=self.surface.cell_width(),
            height=self.surface.cell_height()
        )
        self.root.style["background-size"] = self.cell_metrics.background_size
        self.root.style["height"] = "100%"
        self.root.style["min-height"] = "100%"

        logger.info(
            f"[SURFACE-ADAPTER] Surface initialized: {config.columns} columns, "
            f"{len(config.nodes)} items, edit_mode={edit_mode}"
        )
        return True

    def destroy(self) -> None:
        """Tear down the surface. The template is not touched."""
        if self.surface is not None:
            self.surface.destroy(False)
            self.surface = None
            self.cell_metrics = None

    def get_items(self) -> List[SurfaceItem]:
        if self.surface is None:
            return []
        return self.surface.get_items()

    def _handle_dropped(self, node: SurfaceNode) -> None:
        if self.surface is None:
            return

        # The placeholder is replaced by the item rendered for the new widget
        placeholder = self.surface.find_item(node.id) if node.id else None
        if placeholder is not None:
            self.surface.remove_item(placeholder)

        if node.widget_type is None:
            logger.warning("[SURFACE-ADAPTER] Dropped node without a widget type ignored")
            return

        widget = self.document.create_widget(node.widget_type, node.x, node.y)
        logger.info(f"[SURFACE-ADAPTER] Dropped '{widget.display_name}'")
        self.events.emit(PreviewEvent.DROPPED, node)

    def _handle_changed(self, nodes: List[SurfaceNode]) -> None:
        if self.document.template is None:
            return

        template = self.document.copy()
        matched = 0
        for node in nodes:
            widget = template.find_by_grid_item(node.id) if node.id else None
            if widget is None or widget.grid_item is None:
                continue
            widget.grid_item.x = node.x
            widget.grid_item.y = node.y
            widget.grid_item.w = node.w
            widget.grid_item.h = node.h
            matched += 1

        if not matched:
            return

        logger.info(f"[SURFACE-ADAPTER] Applied movement/sizing of {matched} items")
        self.document.replace(template, ChangeOrigin.CHANGED)
        self.events.emit(PreviewEvent.CHANGED, {"template": self.document.template})
