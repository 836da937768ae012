"""Shared pytest fixtures for dashboard builder tests."""

import pytest

from dashboard_builder.canvas.preview import DashboardPreview
from dashboard_builder.canvas.surface import SurfaceRoot
from dashboard_builder.models.template_models import WidgetType

from factories import EventRecorder, make_template, make_widget


@pytest.fixture
def two_widget_template():
    """A chart (g1) and a map (g2) side by side."""
    return make_template(
        make_widget("w1", "g1", WidgetType.CHART, x=0, y=0, display_name="Chart #1"),
        make_widget("w2", "g2", WidgetType.MAP, x=4, y=0, w=4, h=4, min_w=4, min_h=4, display_name="Map #1"),
    )


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def edit_preview(two_widget_template, recorder):
    """Mounted preview in edit mode, 1200px wide so cells are 100px."""
    preview = DashboardPreview()
    preview.events.subscribe_all(recorder)
    preview.set_edit_mode(True)
    preview.mount(SurfaceRoot(width=1200, height=600))
    preview.set_template(two_widget_template)
    return preview
