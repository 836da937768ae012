"""Factories shared by the dashboard builder tests."""

from typing import Any, List, Optional

from dashboard_builder.canvas.events import PreviewEvent
from dashboard_builder.models.template_models import GridItem, Template, Widget, WidgetType


def make_widget(
    widget_id: str = "w1",
    grid_item_id: str = "g1",
    widget_type: Any = WidgetType.CHART,
    x: int = 0,
    y: int = 0,
    w: int = 2,
    h: int = 2,
    min_w: int = 2,
    min_h: int = 2,
    display_name: Optional[str] = None,
    **config: Any,
) -> Widget:
    return Widget(
        id=widget_id,
        display_name=display_name or f"Widget {widget_id}",
        widget_type=widget_type,
        grid_item=GridItem(id=grid_item_id, x=x, y=y, w=w, h=h, min_w=min_w, min_h=min_h),
        widget_config=config,
    )


def make_template(*widgets: Widget, columns: int = 12) -> Template:
    return Template(columns=columns, widgets=list(widgets))


class EventRecorder:
    """Listener collecting (event name, detail) pairs."""

    def __init__(self):
        self.events: List[tuple] = []

    def __call__(self, event: PreviewEvent, detail: Any) -> None:
        self.events.append((event.value, detail))

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events = []
