"""
Selection Controller
====================

Tracks the single selected widget and keeps the selection marker on
exactly the matching surface item.
"""

import logging
from typing import List, Optional

from ..models.template_models import Widget
from .events import EventEmitter, PreviewEvent
from .layout_document import LayoutDocument
from .surface import SurfaceItem
from .surface_adapter import LayoutSurfaceAdapter

logger = logging.getLogger(__name__)

SELECTED_MARKER = "grid-stack-item-content__active"


class SelectionController:
    """Unselected or Selected(widget id)."""

    def __init__(self, document: LayoutDocument, adapter: LayoutSurfaceAdapter, events: EventEmitter):
        self.document = document
        self.adapter = adapter
        self.events = events
        self._selected: Optional[Widget] = None

    @property
    def selected_widget_id(self) -> Optional[str]:
        return self._selected.id if self._selected else None

    @property
    def selected_widget(self) -> Optional[Widget]:
        """The selected widget as it is in the current template."""
        if self._selected is None:
            return None
        template = self.document.template
        current = template.find_widget(self._selected.id) if template else None
        return current or self._selected

    def select(self, widget: Widget) -> None:
        previous = self._selected
        if previous is not None and previous.id != widget.id:
            self.events.emit(PreviewEvent.DESELECTED, previous)

        self._mark(widget)
        self._selected = widget
        logger.info(f"[SELECTION] Selected '{widget.display_name}'")
        self.events.emit(PreviewEvent.SELECTED, widget)

    def clear(self) -> None:
        if self._selected is None:
            return
        previous = self._selected
        self._unmark_all(self.adapter.get_items())
        self._selected = None
        logger.info(f"[SELECTION] Deselected '{previous.display_name}'")
        self.events.emit(PreviewEvent.DESELECTED, previous)

    def handle_click(self, grid_item_id: str, edit_mode: bool) -> None:
        """Click on a surface item: toggles the selection, only in edit mode."""
        if not edit_mode:
            return

        selected = self.selected_widget
        if selected is not None and selected.grid_item is not None and selected.grid_item.id == grid_item_id:
            self.clear()
            return

        template = self.document.template
        widget = template.find_by_grid_item(grid_item_id) if template else None
        if widget is None:
            logger.debug(f"[SELECTION] Click on unknown grid item {grid_item_id} ignored")
            return
        self.select(widget)

    def refresh_marker(self) -> None:
        """Re-apply the marker, e.g. after the surface has been rebuilt."""
        if self._selected is None:
            return
        if self.document.template is None or self.document.template.find_widget(self._selected.id) is None:
            # Selected widget is gone from the document
            self.clear()
            return
        self._mark(self.selected_widget)

    def _mark(self, widget: Widget) -> None:
        items = self.adapter.get_items()
        self._unmark_all(items)
        if widget.grid_item is None:
            return
        for item in items:
            if item.id == widget.grid_item.id:
                item.add_marker(SELECTED_MARKER)
                break

    @staticmethod
    def _unmark_all(items: List[SurfaceItem]) -> None:
        for item in items:
            item.remove_marker(SELECTED_MARKER)
