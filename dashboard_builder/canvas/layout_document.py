"""
Layout Document
===============

Holds the current template and publishes a new copy on every change.
"""

import logging
import uuid
from enum import Enum
from typing import Callable, List, Optional

from ..models.template_models import (
    Template, Widget, GridItem, WidgetType, WIDGET_TYPE_CONFIG
)

logger = logging.getLogger(__name__)


class ChangeOrigin(str, Enum):
    """What caused a template to be replaced."""
    EXTERNAL = "external"
    DROPPED = "dropped"
    CHANGED = "changed"
    REMOVED = "removed"


DocumentObserver = Callable[[Template, ChangeOrigin], None]


def generate_id() -> str:
    """Random 128-bit identifier."""
    return uuid.uuid4().hex


class LayoutDocument:
    """
    Copy-on-write holder of the layout template.

    A published template is never edited again: every mutation works on a
    deep copy and hands it to replace(), which notifies the observers.
    """

    def __init__(self, template: Optional[Template] = None):
        self._template = template
        self._observers: List[DocumentObserver] = []

    @property
    def template(self) -> Optional[Template]:
        return self._template

    def subscribe(self, observer: DocumentObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: DocumentObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def replace(self, template: Optional[Template], origin: ChangeOrigin = ChangeOrigin.EXTERNAL) -> None:
        """Publish a new template value."""
        if template is not None:
            # Re-run validation, copies are edited without it
            template = Template.model_validate(template.model_dump(by_alias=True))
        self._template = template
        logger.info(
            f"[LAYOUT-DOCUMENT] Template replaced ({origin.value}), "
            f"{len(template.widgets) if template else 0} widgets"
        )
        for observer in list(self._observers):
            observer(template, origin)

    def copy(self) -> Template:
        """Deep copy of the current template (an empty one if none is loaded)."""
        if self._template is None:
            return Template()
        return self._template.model_copy(deep=True)

    def generate_display_name(self, widget_type: WidgetType) -> Optional[str]:
        """"<TypeLabel> #<N+1>", None when the type has no label."""
        config = WIDGET_TYPE_CONFIG.get(widget_type)
        if config is None:
            return None
        count = self._template.count_of_type(widget_type) if self._template else 0
        return f"{config['label']} #{count + 1}"

    def generate_grid_item(self, widget_type: WidgetType, x: int, y: int, columns: int) -> GridItem:
        """Grid item for a new widget, sized to its type and kept inside the columns."""
        config = WIDGET_TYPE_CONFIG.get(widget_type, {})
        min_w, min_h = config.get("min_size", (1, 1))
        default_w, default_h = config.get("default_size", (2, 2))
        w = min(max(default_w, min_w), columns)
        h = max(default_h, min_h)
        return GridItem(
            id=generate_id(),
            x=max(0, min(x, columns - w)),
            y=max(0, y),
            w=w,
            h=h,
            min_w=min(min_w, w),
            min_h=min_h,
            no_resize=False,
            no_move=False,
            locked=False
        )

    def create_widget(self, widget_type: WidgetType, x: int, y: int) -> Widget:
        """
        Create a widget at the given cell and publish the new template.

        Args:
            widget_type: Type of the dropped widget
            x: Target column
            y: Target row

        Returns:
            The created widget
        """
        template = self.copy()
        widget_id = generate_id()
        display_name = self.generate_display_name(widget_type)
        if display_name is None:
            display_name = f"Widget #{widget_id}"

        widget = Widget(
            id=widget_id,
            display_name=display_name,
            widget_type=widget_type,
            grid_item=self.generate_grid_item(widget_type, x, y, template.columns),
        )
        template.widgets.append(widget)
        logger.info(f"[LAYOUT-DOCUMENT] Created widget '{display_name}' at ({x}, {y})")
        self.replace(template, ChangeOrigin.DROPPED)
        return widget

    def remove_widget(self, widget_id: str) -> Optional[Widget]:
        """Remove a widget together with its grid item."""
        if self._template is None:
            return None
        template = self.copy()
        removed = template.find_widget(widget_id)
        if removed is None:
            return None
        template.widgets = [w for w in template.widgets if w.id != widget_id]
        logger.info(f"[LAYOUT-DOCUMENT] Removed widget '{removed.display_name}'")
        self.replace(template, ChangeOrigin.REMOVED)
        return removed
