"""Tests for the preview API routes."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from dashboard_builder.api import preview_routes
from dashboard_builder.canvas.session_manager import PreviewSessionManager
from dashboard_builder.server import app
from dashboard_builder.services.dashboard_client import DashboardResponse

from factories import make_template, make_widget

TEMPLATE = {
    "columns": 12,
    "widgets": [
        {
            "id": "w1",
            "displayName": "Chart #1",
            "widgetType": "CHART",
            "gridItem": {"id": "g1", "x": 0, "y": 0, "w": 2, "h": 2, "minW": 2, "minH": 2},
            "widgetConfig": {"attributeRefs": [{"id": "a1", "name": "temperature"}]},
        },
        {
            "id": "w2",
            "displayName": "Map #1",
            "widgetType": "MAP",
            "gridItem": {"id": "g2", "x": 4, "y": 0, "w": 4, "h": 4, "minW": 4, "minH": 4},
        },
    ],
}


@pytest.fixture
def dashboard_client():
    client = AsyncMock()
    client.get.return_value = DashboardResponse(
        success=True, dashboard_id="d1", template=make_template(make_widget())
    )
    return client


@pytest.fixture
def manager(dashboard_client):
    manager = PreviewSessionManager(dashboard_client=dashboard_client)
    preview_routes.session_manager = manager
    yield manager
    preview_routes.session_manager = None


@pytest.fixture
def client(manager):
    return TestClient(app)


def open_session(client, **body):
    body.setdefault("template", TEMPLATE)
    body.setdefault("edit_mode", True)
    body.setdefault("container_width", 1200)
    body.setdefault("container_height", 600)
    response = client.post("/api/preview/session", json=body)
    assert response.status_code == 200
    return response.json()["session_id"]


class TestSession:
    def test_create_and_render(self, client):
        session_id = open_session(client)

        response = client.get(f"/api/preview/{session_id}")

        assert response.status_code == 200
        snapshot = response.json()
        assert snapshot["load_state"] == "ready"
        assert snapshot["edit_mode"] is True
        assert snapshot["cell_metrics"] == {"width": 100.0, "height": 100.0}
        assert [w["widget"]["id"] for w in snapshot["widgets"]] == ["w1", "w2"]
        assert snapshot["widgets"][0]["content"]["kind"] == "chart"
        assert snapshot["widgets"][0]["content"]["uses_mock_data"] is True
        assert snapshot["widgets"][1]["content"]["kind"] == "map"

    def test_create_from_dashboard_id(self, client, dashboard_client):
        response = client.post("/api/preview/session", json={"dashboard_id": "d1"})

        assert response.json()["load_state"] == "ready"
        dashboard_client.get.assert_awaited_once_with("d1")

    def test_create_without_template_or_dashboard(self, client):
        response = client.post("/api/preview/session", json={})

        assert response.status_code == 200
        assert response.json()["load_state"] == "empty"

    def test_template_endpoint(self, client):
        session_id = open_session(client)

        template = client.get(f"/api/preview/{session_id}/template").json()["template"]

        assert template["widgets"][0]["gridItem"]["id"] == "g1"

    def test_unknown_session(self, client):
        assert client.get("/api/preview/nope").status_code == 404
        assert client.delete("/api/preview/nope").status_code == 404

    def test_close_session(self, client, manager):
        session_id = open_session(client)

        assert client.delete(f"/api/preview/{session_id}").status_code == 200
        assert manager.list_sessions() == []


class TestGestures:
    def test_dropped(self, client):
        session_id = open_session(client)

        response = client.post(
            f"/api/preview/{session_id}/dropped",
            json={"x": 0, "y": 4, "w": 2, "h": 2, "widgetType": "CHART"},
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body["template"]["widgets"]) == 3
        assert body["template"]["widgets"][-1]["displayName"] == "Chart #2"
        assert [n["event"] for n in body["notifications"]] == ["dropped"]

    def test_dropped_in_view_mode(self, client):
        session_id = open_session(client, edit_mode=False)

        response = client.post(
            f"/api/preview/{session_id}/dropped",
            json={"x": 0, "y": 4, "w": 2, "h": 2, "widgetType": "MAP"},
        )

        assert response.status_code == 409

    def test_changed(self, client):
        session_id = open_session(client)

        response = client.post(
            f"/api/preview/{session_id}/changed",
            json={"nodes": [{"id": "g1", "x": 3, "y": 6, "w": 2, "h": 3}]},
        )

        body = response.json()
        item = body["template"]["widgets"][0]["gridItem"]
        assert (item["x"], item["y"], item["w"], item["h"]) == (3, 6, 2, 3)
        assert [n["event"] for n in body["notifications"]] == ["changed"]

    def test_click_toggles_selection(self, client):
        session_id = open_session(client)

        first = client.post(f"/api/preview/{session_id}/click/g1").json()
        second = client.post(f"/api/preview/{session_id}/click/g1").json()

        assert first["selected_widget_id"] == "w1"
        assert [n["event"] for n in first["notifications"]] == ["selected"]
        assert second["selected_widget_id"] is None
        assert [n["event"] for n in second["notifications"]] == ["deselected"]

    def test_selection_endpoint(self, client):
        session_id = open_session(client)

        response = client.put(f"/api/preview/{session_id}/selection", json={"widget_id": "w2"})
        assert response.json()["selected_widget_id"] == "w2"

        missing = client.put(f"/api/preview/{session_id}/selection", json={"widget_id": "w9"})
        assert missing.status_code == 404

    def test_remove_widget(self, client):
        session_id = open_session(client)

        response = client.delete(f"/api/preview/{session_id}/widgets/w1")

        assert [w["id"] for w in response.json()["template"]["widgets"]] == ["w2"]
        assert client.delete(f"/api/preview/{session_id}/widgets/w1").status_code == 404

    def test_edit_mode_switch(self, client):
        session_id = open_session(client)

        client.put(f"/api/preview/{session_id}/edit-mode", json={"edit_mode": False})
        snapshot = client.get(f"/api/preview/{session_id}").json()

        assert snapshot["edit_mode"] is False
        assert snapshot["size_options"] == []


class TestSizing:
    def test_preset(self, client):
        session_id = open_session(client)

        response = client.put(f"/api/preview/{session_id}/size", json={"preview_size": "SMALL"})

        assert response.json() == {"width": "480px", "height": "853px", "size_option": "SMALL"}

    def test_explicit_dimensions(self, client):
        session_id = open_session(client)

        response = client.put(f"/api/preview/{session_id}/size", json={"preview_width": 1000, "preview_height": "500px"})

        assert response.json()["size_option"] == "CUSTOM"

    def test_rotate(self, client):
        session_id = open_session(client)
        client.put(f"/api/preview/{session_id}/size", json={"preview_size": "SMALL"})

        response = client.post(f"/api/preview/{session_id}/size/rotate")

        assert response.json() == {"width": "853px", "height": "480px", "size_option": "CUSTOM"}

    def test_resize_rebuilds_with_new_cell_size(self, client):
        session_id = open_session(client)

        response = client.post(f"/api/preview/{session_id}/resize", json={"width": 600, "height": 400})

        assert response.json()["cell_metrics"] == {"width": 50.0, "height": 50.0}


class TestServiceInfo:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_info(self, client):
        info = client.get("/api/info").json()

        assert {t["type"] for t in info["widget_types"]} == {"CHART", "MAP"}
        assert [p["option"] for p in info["size_presets"]] == ["LARGE", "MEDIUM", "SMALL", "FULLSCREEN"]
        assert info["grid"] == {"default_columns": 12, "margin": 4}
