"""
Grid Surface Interface
======================

The interactive grid surface as an abstract capability. The adapter only
talks to these types, so any surface (the browser grid mirrored by the
headless implementation, or a test double) can be substituted.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Set, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.template_models import WidgetType, coerce_widget_type


class SurfaceConfig(BaseModel):
    """Options a surface is constructed with."""
    columns: int = Field(ge=1)
    accept_drops: bool = False
    static: bool = True
    margin: int = 4
    resize_handles: str = "all"
    float_pack: bool = True
    animate: bool = True
    cell_height: Union[str, float] = "auto"
    disable_one_column_mode: bool = True
    nodes: List["SurfaceNode"] = Field(default_factory=list)


class SurfaceNode(BaseModel):
    """Geometry of one surface item as reported by the surface."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    w: int = Field(default=1, ge=1)
    h: int = Field(default=1, ge=1)
    min_w: Optional[int] = Field(default=None, alias="minW")
    min_h: Optional[int] = Field(default=None, alias="minH")
    no_resize: bool = Field(default=False, alias="noResize")
    no_move: bool = Field(default=False, alias="noMove")
    locked: bool = False
    # Set on nodes dragged in from the widget palette
    widget_type: Optional[Union[WidgetType, str]] = Field(default=None, alias="widgetType")

    @field_validator("widget_type", mode="before")
    @classmethod
    def _coerce_widget_type(cls, value: Any) -> Any:
        return coerce_widget_type(value)


SurfaceConfig.model_rebuild()


class SurfaceRoot:
    """The element a surface is mounted on, with the style the adapter publishes to it."""

    def __init__(self, width: float = 0, height: float = 0):
        self.width = width
        self.height = height
        self.style: Dict[str, str] = {}


class SurfaceItem:
    """Live handle of one item on a surface."""

    def __init__(self, node: SurfaceNode):
        self.node = node
        self.markers: Set[str] = set()

    @property
    def id(self) -> Optional[str]:
        return self.node.id

    def add_marker(self, marker: str) -> None:
        self.markers.add(marker)

    def remove_marker(self, marker: str) -> None:
        self.markers.discard(marker)

    def has_marker(self, marker: str) -> bool:
        return marker in self.markers


DroppedHandler = Callable[[SurfaceNode], None]
ChangedHandler = Callable[[List[SurfaceNode]], None]


class GridSurface(ABC):
    """Interface of an interactive grid surface."""

    @classmethod
    @abstractmethod
    def init(cls, config: SurfaceConfig, root: SurfaceRoot) -> "GridSurface":
        """Construct a surface on the given root."""

    @abstractmethod
    def on_dropped(self, handler: DroppedHandler) -> None:
        """Register the handler for items dropped from outside the grid."""

    @abstractmethod
    def on_changed(self, handler: ChangedHandler) -> None:
        """Register the handler for items moved or resized."""

    @abstractmethod
    def get_items(self) -> List[SurfaceItem]:
        """Live item handles."""

    @abstractmethod
    def remove_item(self, item: SurfaceItem) -> None:
        """Remove an item without reporting it as a change."""

    @abstractmethod
    def destroy(self, keep_content: bool = False) -> None:
        """Detach the surface from its root."""

    @abstractmethod
    def cell_width(self) -> float:
        """Pixel width of one column."""

    @abstractmethod
    def cell_height(self) -> float:
        """Pixel height of one row."""

    def find_item(self, node_id: str) -> Optional[SurfaceItem]:
        for item in self.get_items():
            if item.id == node_id:
                return item
        return None
