"""Tests for the layout surface adapter on the headless surface."""

import pytest

from dashboard_builder.canvas.events import EventEmitter
from dashboard_builder.canvas.headless_surface import HeadlessGridSurface, SurfaceGestureError
from dashboard_builder.canvas.layout_document import ChangeOrigin, LayoutDocument
from dashboard_builder.canvas.surface import SurfaceNode, SurfaceRoot
from dashboard_builder.canvas.surface_adapter import LayoutSurfaceAdapter
from dashboard_builder.models.template_models import Template, WidgetType

from factories import EventRecorder, make_template, make_widget


def build_adapter(template, edit_mode=True, root_width=1200):
    recorder = EventRecorder()
    events = EventEmitter()
    events.subscribe_all(recorder)
    document = LayoutDocument(template)
    adapter = LayoutSurfaceAdapter(document, events, HeadlessGridSurface, SurfaceRoot(width=root_width, height=600))
    adapter.initialize(template, edit_mode)
    return adapter, document, recorder


class TestInitialize:
    def test_without_root_is_deferred(self):
        adapter = LayoutSurfaceAdapter(LayoutDocument(), EventEmitter(), HeadlessGridSurface)

        assert adapter.initialize(Template(), edit_mode=True) is False
        assert adapter.surface is None
        assert adapter.get_items() == []

    def test_edit_mode_configuration(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template, edit_mode=True)

        config = adapter.surface.config
        assert config.columns == 12
        assert config.accept_drops is True
        assert config.static is False
        assert config.margin == 4
        assert config.resize_handles == "all"
        assert config.float_pack is True

    def test_view_mode_configuration(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template, edit_mode=False)

        assert adapter.surface.config.accept_drops is False
        assert adapter.surface.config.static is True

    def test_one_item_per_widget(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template)

        assert sorted(item.id for item in adapter.get_items()) == ["g1", "g2"]

    def test_publishes_cell_metrics(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template, root_width=1200)

        assert adapter.cell_metrics.width == 100
        assert adapter.cell_metrics.height == 100
        assert adapter.root.style["background-size"] == "100px 100px"
        assert adapter.root.style["height"] == "100%"
        assert adapter.root.style["min-height"] == "100%"

    def test_existing_surface_kept_without_force(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template)
        surface = adapter.surface

        assert adapter.initialize(two_widget_template, True) is False
        assert adapter.surface is surface

    def test_force_destroys_previous_surface(self, two_widget_template):
        adapter, document, _ = build_adapter(two_widget_template)
        surface = adapter.surface

        assert adapter.initialize(two_widget_template, False, force=True) is True

        assert surface.destroyed is True
        assert adapter.surface is not surface
        assert adapter.surface.config.static is True
        assert document.template is two_widget_template


class TestChanged:
    def test_geometry_is_copied_exactly(self):
        template = make_template(make_widget("w1", "g1", x=0, y=0, w=2, h=2))
        adapter, document, recorder = build_adapter(template)

        adapter.surface.move([SurfaceNode(id="g1", x=3, y=1, w=2, h=3)])

        item = document.template.widgets[0].grid_item
        assert (item.x, item.y, item.w, item.h) == (3, 1, 2, 3)
        assert item.id == "g1"
        assert (item.min_w, item.min_h) == (2, 2)
        assert item.locked is False

    def test_batch_is_published_once(self, two_widget_template):
        adapter, document, recorder = build_adapter(two_widget_template)
        origins = []
        document.subscribe(lambda template, origin: origins.append(origin))

        adapter.surface.move([
            SurfaceNode(id="g1", x=0, y=4, w=2, h=2),
            SurfaceNode(id="g2", x=6, y=0, w=4, h=4),
        ])

        assert origins == [ChangeOrigin.CHANGED]
        assert recorder.names == ["changed"]
        assert recorder.events[0][1]["template"] is document.template
        assert document.template.find_widget("w2").grid_item.x == 6

    def test_unmatched_nodes_are_ignored(self, two_widget_template):
        adapter, document, recorder = build_adapter(two_widget_template)
        before = document.template

        adapter._handle_changed([SurfaceNode(id="bookkeeping", x=1, y=1, w=1, h=1)])

        assert document.template is before
        assert recorder.events == []

    def test_mixed_batch_applies_matching_nodes(self, two_widget_template):
        adapter, document, recorder = build_adapter(two_widget_template)

        adapter._handle_changed([
            SurfaceNode(id="bookkeeping", x=1, y=1, w=1, h=1),
            SurfaceNode(id="g1", x=2, y=2, w=2, h=2),
        ])

        assert document.template.find_widget("w1").grid_item.x == 2
        assert recorder.names == ["changed"]

    def test_static_surface_rejects_moves(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template, edit_mode=False)

        with pytest.raises(SurfaceGestureError):
            adapter.surface.move([SurfaceNode(id="g1", x=3, y=0, w=2, h=2)])


class TestDropped:
    def test_drop_creates_widget_and_removes_placeholder(self):
        adapter, document, recorder = build_adapter(Template())

        adapter.surface.drop(SurfaceNode(x=1, y=2, w=2, h=2, widget_type=WidgetType.CHART))

        widgets = document.template.widgets
        assert len(widgets) == 1
        assert widgets[0].display_name == "Chart #1"
        assert (widgets[0].grid_item.x, widgets[0].grid_item.y) == (1, 2)
        # Nothing rebuilds the surface here, so only the placeholder removal is visible
        assert adapter.get_items() == []
        assert recorder.names == ["dropped"]
        assert recorder.events[0][1].widget_type == WidgetType.CHART

    def test_widget_id_is_not_the_node_id(self):
        adapter, document, _ = build_adapter(Template())

        adapter.surface.drop(SurfaceNode(id="palette-chart", x=0, y=0, w=2, h=2, widget_type=WidgetType.CHART))

        widget = document.template.widgets[0]
        assert widget.grid_item.id != "palette-chart"
        assert widget.id != "palette-chart"

    def test_drop_without_type_is_ignored(self):
        adapter, document, recorder = build_adapter(Template())

        adapter.surface.drop(SurfaceNode(x=0, y=0, w=2, h=2))

        assert document.template.widgets == []
        assert adapter.get_items() == []
        assert recorder.events == []

    def test_view_mode_rejects_drops(self):
        adapter, _, _ = build_adapter(Template(), edit_mode=False)

        with pytest.raises(SurfaceGestureError):
            adapter.surface.drop(SurfaceNode(x=0, y=0, w=2, h=2, widget_type=WidgetType.CHART))


class TestHeadlessSurface:
    def test_clamps_to_columns_and_minimum_size(self, two_widget_template):
        adapter, document, _ = build_adapter(two_widget_template)

        adapter.surface.move([SurfaceNode(id="g2", x=11, y=0, w=1, h=1)])

        item = document.template.find_widget("w2").grid_item
        assert (item.w, item.h) == (4, 4)
        assert item.x + item.w <= 12

    def test_locked_item_does_not_move(self):
        widget = make_widget()
        widget.grid_item.locked = True
        adapter, document, recorder = build_adapter(make_template(widget))

        adapter.surface.move([SurfaceNode(id="g1", x=5, y=5, w=2, h=2)])

        assert document.template.widgets[0].grid_item.x == 0
        assert recorder.events == []

    def test_destroyed_surface_rejects_gestures(self, two_widget_template):
        adapter, _, _ = build_adapter(two_widget_template)
        surface = adapter.surface
        adapter.destroy()

        with pytest.raises(SurfaceGestureError):
            surface.move([SurfaceNode(id="g1", x=1, y=0, w=2, h=2)])
