"""
Template Models for Dashboard Builder
======================================

Models for the layout document: the template, its widgets and their grid items.
"""

from enum import Enum
from typing import List, Optional, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator


DEFAULT_COLUMNS = 12


class WidgetType(str, Enum):
    """Widget types that can be placed on the grid."""
    MAP = "MAP"
    CHART = "CHART"


# Display label and minimum grid size per widget type
WIDGET_TYPE_CONFIG = {
    WidgetType.CHART: {
        "label": "Chart",
        "min_size": (2, 2),
        "default_size": (2, 2),
    },
    WidgetType.MAP: {
        "label": "Map",
        "min_size": (4, 4),
        "default_size": (2, 2),
    },
}


def coerce_widget_type(value: Any) -> Any:
    """Known type names become WidgetType members, anything else is left as is."""
    if isinstance(value, str) and value in WidgetType._value2member_map_:
        return WidgetType(value)
    return value


class AttributeRef(BaseModel):
    """Reference to a named attribute of an asset."""
    id: str
    name: str


_attribute_refs_adapter = TypeAdapter(List[AttributeRef])


class GridItem(BaseModel):
    """Placement of a widget on the grid."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    w: int = Field(default=2, ge=1)
    h: int = Field(default=2, ge=1)
    min_w: int = Field(default=1, ge=1, alias="minW")
    min_h: int = Field(default=1, ge=1, alias="minH")
    no_resize: bool = Field(default=False, alias="noResize")
    no_move: bool = Field(default=False, alias="noMove")
    locked: bool = False

    @model_validator(mode="after")
    def _check_min_size(self) -> "GridItem":
        if self.w < self.min_w:
            raise ValueError(f"Grid item {self.id}: w={self.w} is below minW={self.min_w}")
        if self.h < self.min_h:
            raise ValueError(f"Grid item {self.id}: h={self.h} is below minH={self.min_h}")
        return self


class Widget(BaseModel):
    """A configured unit of content placed on the grid."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: str = Field(alias="displayName")
    # Unknown types stay plain strings so one bad widget does not reject the document
    widget_type: Union[WidgetType, str] = Field(alias="widgetType")
    grid_item: Optional[GridItem] = Field(default=None, alias="gridItem")
    widget_config: Dict[str, Any] = Field(default_factory=dict, alias="widgetConfig")

    @field_validator("widget_type", mode="before")
    @classmethod
    def _coerce_widget_type(cls, value: Any) -> Any:
        return coerce_widget_type(value)

    @property
    def attribute_refs(self) -> List[AttributeRef]:
        """Attribute references from the chart configuration (raises ValidationError if malformed)."""
        return _attribute_refs_adapter.validate_python(self.widget_config.get("attributeRefs") or [])


class Template(BaseModel):
    """The layout document: column count plus an ordered list of widgets."""
    columns: int = Field(default=DEFAULT_COLUMNS, ge=1)
    widgets: List[Widget] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_invariants(self) -> "Template":
        widget_ids = set()
        grid_item_ids = set()
        for widget in self.widgets:
            if widget.id in widget_ids:
                raise ValueError(f"Duplicate widget id: {widget.id}")
            widget_ids.add(widget.id)

            item = widget.grid_item
            if item is None:
                continue
            if item.id in grid_item_ids:
                raise ValueError(f"Duplicate grid item id: {item.id}")
            grid_item_ids.add(item.id)
            if item.x + item.w > self.columns:
                raise ValueError(
                    f"Grid item {item.id} exceeds {self.columns} columns (x={item.x}, w={item.w})"
                )
        return self

    def find_by_grid_item(self, grid_item_id: str) -> Optional[Widget]:
        """Get the widget owning the given grid item."""
        for widget in self.widgets:
            if widget.grid_item is not None and widget.grid_item.id == grid_item_id:
                return widget
        return None

    def find_widget(self, widget_id: str) -> Optional[Widget]:
        """Get a widget by its id."""
        for widget in self.widgets:
            if widget.id == widget_id:
                return widget
        return None

    def count_of_type(self, widget_type: WidgetType) -> int:
        return len([w for w in self.widgets if w.widget_type == widget_type])
