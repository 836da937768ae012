"""
Dashboard Preview
=================

The preview component: a layout template shown on a grid surface, with a
single selected widget, a negotiated container size, and resolved widget
content.

Every configurable property has its own setter that performs exactly the
downstream work that property needs:

- set_template: publish the template, rebuild the surface
- set_dashboard_id: fetch the template from the document store
- set_edit_mode: rebuild the surface as interactive or static
- set_selected_widget: select or clear through the selection controller
- set_preview_size / set_preview_width / set_preview_height / rotate:
  size negotiation (rebuilds follow from the resize the host reports)
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, Field

from ..models.content_models import ChartContent, MapContent, ErrorContent
from ..models.preview_models import (
    DashboardSizeOption, PreviewSize, ContainerStyle, CellMetrics, ResizeObservation, SizeOptionEntry
)
from ..models.template_models import Template, Widget
from ..services.content_resolver import ContentResolver
from ..services.dashboard_client import DashboardClient
from .events import EventEmitter
from .headless_surface import HeadlessGridSurface, SurfaceGestureError
from .layout_document import LayoutDocument, ChangeOrigin
from .selection import SelectionController, SELECTED_MARKER
from .size_negotiator import SizeNegotiator, ResizeSource
from .surface import GridSurface, SurfaceNode, SurfaceRoot
from .surface_adapter import LayoutSurfaceAdapter

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    """Whether the preview has a template to show."""
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class RenderedWidget(BaseModel):
    """A widget together with its resolved content."""
    widget: Widget
    content: Union[ChartContent, MapContent, ErrorContent] = Field(discriminator="kind")
    selected: bool = False


class PreviewSnapshot(BaseModel):
    """Result of one render pass."""
    load_state: LoadState
    error: Optional[str] = None
    edit_mode: bool
    columns: int
    preview_size: PreviewSize
    container_style: ContainerStyle
    size_options: List[SizeOptionEntry] = Field(default_factory=list)
    cell_metrics: Optional[CellMetrics] = None
    selected_widget_id: Optional[str] = None
    widgets: List[RenderedWidget] = Field(default_factory=list)


class DashboardPreview:
    """Composes the layout document, surface adapter, selection, sizing and content resolution."""

    def __init__(
        self,
        dashboard_client: Optional[DashboardClient] = None,
        content_resolver: Optional[ContentResolver] = None,
        surface_class: Type[GridSurface] = HeadlessGridSurface,
        events: Optional[EventEmitter] = None,
        size_option: DashboardSizeOption = DashboardSizeOption.MEDIUM,
        presets: Optional[Dict[DashboardSizeOption, Tuple[str, str]]] = None
    ):
        self.dashboard_client = dashboard_client
        self.content_resolver = content_resolver or ContentResolver()
        self.events = events or EventEmitter()
        self.document = LayoutDocument()
        self.adapter = LayoutSurfaceAdapter(self.document, self.events, surface_class)
        self.selection = SelectionController(self.document, self.adapter, self.events)
        self.sizer = SizeNegotiator(self._handle_resize, presets=presets, size_option=size_option)

        self.edit_mode = False
        self.dashboard_id: Optional[str] = None
        self.load_state = LoadState.EMPTY
        self.error: Optional[str] = None

        self.document.subscribe(self._on_template_replaced)

    @property
    def template(self) -> Optional[Template]:
        return self.document.template

    # Mounting

    def mount(self, root: SurfaceRoot, resize_source: Optional[ResizeSource] = None) -> None:
        """The surface root exists now; build the surface and follow container resizes."""
        self.adapter.root = root
        if resize_source is not None:
            self.sizer.attach(resize_source)
        self._setup_grid(force=True)

    def unmount(self) -> None:
        self.sizer.detach()
        self.adapter.destroy()
        self.adapter.root = None

    # Setters

    def set_template(self, template: Optional[Template]) -> None:
        """Replace the template; the surface is rebuilt for it."""
        self.error = None
        self.load_state = LoadState.READY if template is not None else LoadState.EMPTY
        self.document.replace(template, ChangeOrigin.EXTERNAL)
        self.check_configuration()

    async def set_dashboard_id(self, dashboard_id: Optional[str]) -> None:
        """Use a stored dashboard; its template is fetched unless one was supplied."""
        self.dashboard_id = dashboard_id
        if dashboard_id is not None and self.template is None:
            await self.load_document()
        self.check_configuration()

    async def load_document(self) -> None:
        """Fetch the template of the configured dashboard id."""
        if self.dashboard_id is None:
            return
        if self.dashboard_client is None:
            self._fail(f"No dashboard service to load '{self.dashboard_id}' from")
            return

        self.load_state = LoadState.LOADING
        response = await self.dashboard_client.get(self.dashboard_id)
        if not response.success:
            self._fail(response.error or f"Failed to load dashboard '{self.dashboard_id}'")
            return
        self.set_template(response.template)

    def set_edit_mode(self, edit_mode: bool) -> None:
        """Switch between the interactive and the static surface."""
        if edit_mode == self.edit_mode:
            return
        self.edit_mode = edit_mode
        logger.info(f"[PREVIEW] Edit mode {'enabled' if edit_mode else 'disabled'}, rebuilding grid")
        self._setup_grid(force=True)

    def set_selected_widget(self, widget: Optional[Widget]) -> None:
        if widget is None:
            self.selection.clear()
            return
        current = self.template.find_widget(widget.id) if self.template else None
        self.selection.select(current or widget)

    def set_preview_size(self, option: DashboardSizeOption) -> PreviewSize:
        return self.sizer.set_preview_size(option)

    def set_preview_width(self, width: Union[int, str]) -> PreviewSize:
        return self.sizer.set_preview_width(width)

    def set_preview_height(self, height: Union[int, str]) -> PreviewSize:
        return self.sizer.set_preview_height(height)

    def set_preview_dimensions(self, width: Union[int, str], height: Union[int, str]) -> PreviewSize:
        return self.sizer.set_dimensions(width, height)

    def rotate(self) -> PreviewSize:
        return self.sizer.rotate()

    def check_configuration(self) -> bool:
        """A template or a dashboard id is required; without either an empty grid is shown."""
        if self.template is None and self.dashboard_id is None:
            logger.error("[PREVIEW] Neither the template nor the dashboard id has been specified")
            return False
        return True

    # Gestures

    def handle_click(self, grid_item_id: str) -> None:
        self.selection.handle_click(grid_item_id, self.edit_mode)

    def drop(self, node: SurfaceNode) -> SurfaceNode:
        """A palette item released on the grid."""
        return self._gesture_surface().drop(node)

    def move(self, nodes: List[SurfaceNode]) -> List[SurfaceNode]:
        """Items moved or resized on the grid."""
        return self._gesture_surface().move(nodes)

    def remove_widget(self, widget_id: str) -> Optional[Widget]:
        return self.document.remove_widget(widget_id)

    # Render

    async def render(self) -> PreviewSnapshot:
        """One render pass: configuration check, surface setup if still pending, widget content."""
        self.check_configuration()
        if self.adapter.surface is None:
            self._setup_grid(force=False)

        template = self.template or Template()
        widgets: List[RenderedWidget] = []
        if self.load_state != LoadState.FAILED:
            contents = await self.content_resolver.resolve_all(template.widgets, self.edit_mode)
            selected_id = self.selection.selected_widget_id
            widgets = [
                RenderedWidget(widget=widget, content=content, selected=widget.id == selected_id)
                for widget, content in zip(template.widgets, contents)
            ]

        return PreviewSnapshot(
            load_state=self.load_state,
            error=self.error,
            edit_mode=self.edit_mode,
            columns=template.columns,
            preview_size=self.sizer.size,
            container_style=self.sizer.container_style,
            size_options=self.sizer.size_options() if self.edit_mode else [],
            cell_metrics=self.adapter.cell_metrics,
            selected_widget_id=self.selection.selected_widget_id,
            widgets=widgets
        )

    def marked_item_ids(self) -> List[str]:
        """Ids of surface items carrying the selection marker."""
        return [item.id for item in self.adapter.get_items() if item.has_marker(SELECTED_MARKER)]

    # Internals

    def _setup_grid(self, force: bool) -> None:
        self.adapter.initialize(self.template, self.edit_mode, force)
        # New surface items carry no marker, and the selected widget may be gone
        self.selection.refresh_marker()

    def _on_template_replaced(self, template: Optional[Template], origin: ChangeOrigin) -> None:
        # After a move/resize the surface already shows the new geometry
        if origin == ChangeOrigin.CHANGED:
            return
        self._setup_grid(force=True)

    def _handle_resize(self, observation: ResizeObservation) -> None:
        if self.adapter.root is not None:
            self.adapter.root.width = observation.width
            self.adapter.root.height = observation.height
        self._setup_grid(force=True)

    def _gesture_surface(self) -> HeadlessGridSurface:
        surface = self.adapter.surface
        if not isinstance(surface, HeadlessGridSurface):
            raise SurfaceGestureError("No headless surface to apply gestures to")
        return surface

    def _fail(self, error: str) -> None:
        logger.error(f"[PREVIEW] {error}")
        self.load_state = LoadState.FAILED
        self.error = error
