"""
Preview Routes
==============

API routes for preview sessions. The browser grid forwards its gestures
here and receives the notifications they raised.
"""

import logging
from typing import Optional, Dict, Any, List, Union
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, ValidationError

from ..canvas.headless_surface import SurfaceGestureError
from ..canvas.preview import PreviewSnapshot
from ..canvas.session_manager import PreviewSession, PreviewSessionManager
from ..canvas.surface import SurfaceNode
from ..models.preview_models import DashboardSizeOption, PreviewSize
from ..models.template_models import Template

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/preview", tags=["preview"])

# Injected by server
session_manager: Optional[PreviewSessionManager] = None


class CreateSessionRequest(BaseModel):
    """Request to open a preview. Either a template or a dashboard id is expected."""
    template: Optional[Template] = None
    dashboard_id: Optional[str] = None
    edit_mode: bool = False
    preview_size: DashboardSizeOption = DashboardSizeOption.MEDIUM
    container_width: Optional[float] = Field(default=None, gt=0)
    container_height: Optional[float] = Field(default=None, gt=0)


class CreateSessionResponse(BaseModel):
    session_id: str
    load_state: str
    error: Optional[str] = None


class ChangedRequest(BaseModel):
    """Items moved or resized in one gesture."""
    nodes: List[SurfaceNode]


class ResizeRequest(BaseModel):
    """Container size observed by the browser."""
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class EditModeRequest(BaseModel):
    edit_mode: bool


class SizeRequest(BaseModel):
    """Preset or explicit dimensions (numbers are pixels)."""
    preview_size: Optional[DashboardSizeOption] = None
    preview_width: Optional[Union[int, str]] = None
    preview_height: Optional[Union[int, str]] = None


class SelectRequest(BaseModel):
    widget_id: Optional[str] = None


class GestureResponse(BaseModel):
    """Template after a gesture and the notifications it raised."""
    template: Optional[Template] = None
    notifications: List[Dict[str, Any]] = Field(default_factory=list)
    selected_widget_id: Optional[str] = None


def get_session_manager() -> PreviewSessionManager:
    """Dependency to get the session manager."""
    if session_manager is None:
        raise HTTPException(500, "Session manager not initialized")
    return session_manager


def get_session(session_id: str) -> PreviewSession:
    session = get_session_manager().get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _gesture_response(session: PreviewSession) -> GestureResponse:
    return GestureResponse(
        template=session.preview.template,
        notifications=session.drain_notifications(),
        selected_widget_id=session.preview.selection.selected_widget_id
    )


@router.post("/session")
async def create_session(request: CreateSessionRequest) -> CreateSessionResponse:
    """Open a preview for a template or a stored dashboard."""
    manager = get_session_manager()
    session = manager.create_session(
        edit_mode=request.edit_mode,
        size_option=request.preview_size,
        container_width=request.container_width,
        container_height=request.container_height
    )
    preview = session.preview
    if request.template is not None:
        preview.set_template(request.template)
    elif request.dashboard_id is not None:
        await preview.set_dashboard_id(request.dashboard_id)
    else:
        preview.check_configuration()

    return CreateSessionResponse(
        session_id=session.session_id,
        load_state=preview.load_state.value,
        error=preview.error
    )


@router.get("/{session_id}")
async def render_session(session_id: str) -> PreviewSnapshot:
    """Render pass: layout, container style and resolved widget content."""
    return await get_session(session_id).preview.render()


@router.get("/{session_id}/template")
async def get_template(session_id: str) -> Dict[str, Any]:
    """Current template of the session."""
    template = get_session(session_id).preview.template
    return {"session_id": session_id, "template": template}


@router.delete("/{session_id}")
async def close_session(session_id: str):
    if not get_session_manager().remove_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"message": "Session closed", "session_id": session_id}


@router.post("/{session_id}/dropped")
async def item_dropped(session_id: str, node: SurfaceNode) -> GestureResponse:
    """A palette item was dropped on the grid."""
    session = get_session(session_id)
    try:
        session.preview.drop(node)
    except SurfaceGestureError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _gesture_response(session)


@router.post("/{session_id}/changed")
async def items_changed(session_id: str, request: ChangedRequest) -> GestureResponse:
    """Items were moved or resized on the grid."""
    session = get_session(session_id)
    try:
        session.preview.move(request.nodes)
    except SurfaceGestureError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _gesture_response(session)


@router.post("/{session_id}/click/{grid_item_id}")
async def item_clicked(session_id: str, grid_item_id: str) -> GestureResponse:
    session = get_session(session_id)
    session.preview.handle_click(grid_item_id)
    return _gesture_response(session)


@router.put("/{session_id}/selection")
async def set_selection(session_id: str, request: SelectRequest) -> GestureResponse:
    session = get_session(session_id)
    preview = session.preview
    if request.widget_id is None:
        preview.set_selected_widget(None)
    else:
        widget = preview.template.find_widget(request.widget_id) if preview.template else None
        if widget is None:
            raise HTTPException(status_code=404, detail="Widget not found")
        preview.set_selected_widget(widget)
    return _gesture_response(session)


@router.delete("/{session_id}/widgets/{widget_id}")
async def remove_widget(session_id: str, widget_id: str) -> GestureResponse:
    session = get_session(session_id)
    if session.preview.remove_widget(widget_id) is None:
        raise HTTPException(status_code=404, detail="Widget not found")
    return _gesture_response(session)


@router.post("/{session_id}/resize")
async def container_resized(session_id: str, request: ResizeRequest) -> Dict[str, Any]:
    """The browser observed a new container size."""
    session = get_session(session_id)
    session.resize_notifier.notify(request.width, request.height)
    return {"session_id": session_id, "cell_metrics": session.preview.adapter.cell_metrics}


@router.put("/{session_id}/edit-mode")
async def set_edit_mode(session_id: str, request: EditModeRequest) -> GestureResponse:
    session = get_session(session_id)
    session.preview.set_edit_mode(request.edit_mode)
    return _gesture_response(session)


@router.put("/{session_id}/size")
async def set_size(session_id: str, request: SizeRequest) -> PreviewSize:
    """Apply a preset, explicit dimensions, or both (dimensions win)."""
    preview = get_session(session_id).preview
    if request.preview_size is not None:
        preview.set_preview_size(request.preview_size)
    if request.preview_width is not None:
        preview.set_preview_width(request.preview_width)
    if request.preview_height is not None:
        preview.set_preview_height(request.preview_height)
    return preview.sizer.size


@router.post("/{session_id}/size/rotate")
async def rotate(session_id: str) -> PreviewSize:
    return get_session(session_id).preview.rotate()
