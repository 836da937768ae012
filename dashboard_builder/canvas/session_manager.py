"""
Preview Session Manager
=======================

Keeps the live previews of the service, one per session. Sessions live in
memory only; storing templates is up to the caller receiving them.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from ..models.preview_models import (
    DashboardSizeOption, SIZE_PRESETS, get_size_by_option, parse_px
)
from ..services.content_resolver import ContentResolver
from ..services.dashboard_client import DashboardClient
from .events import PreviewEvent
from .preview import DashboardPreview
from .size_negotiator import ResizeNotifier
from .surface import SurfaceRoot

logger = logging.getLogger(__name__)

# Container size assumed until the browser reports the real one
DEFAULT_CONTAINER_SIZE = (1280, 720)


class PreviewSession:
    """A preview with its resize source and the notifications it raised."""

    def __init__(self, session_id: str, preview: DashboardPreview):
        self.session_id = session_id
        self.preview = preview
        self.resize_notifier = ResizeNotifier()
        self.notifications: List[Dict[str, Any]] = []
        preview.events.subscribe_all(self._record)

    def _record(self, event: PreviewEvent, detail: Any) -> None:
        self.notifications.append({"event": event.value, "detail": detail})

    def drain_notifications(self) -> List[Dict[str, Any]]:
        """Notifications raised since the last drain."""
        notifications, self.notifications = self.notifications, []
        return notifications


class PreviewSessionManager:
    """Manages preview sessions."""

    def __init__(
        self,
        dashboard_client: Optional[DashboardClient] = None,
        content_resolver: Optional[ContentResolver] = None,
        presets: Optional[Dict[DashboardSizeOption, Tuple[str, str]]] = None
    ):
        self.dashboard_client = dashboard_client
        self.content_resolver = content_resolver
        self.presets = presets or SIZE_PRESETS
        self._cache: Dict[str, PreviewSession] = {}
        logger.info("[SESSION-MANAGER] Initialized")

    def create_session(
        self,
        edit_mode: bool = False,
        size_option: DashboardSizeOption = DashboardSizeOption.MEDIUM,
        container_width: Optional[float] = None,
        container_height: Optional[float] = None,
        session_id: Optional[str] = None
    ) -> PreviewSession:
        """Create a session with a mounted preview."""
        if session_id is None:
            session_id = str(uuid.uuid4())

        preview = DashboardPreview(
            dashboard_client=self.dashboard_client,
            content_resolver=self.content_resolver,
            size_option=size_option,
            presets=self.presets
        )
        preview.set_edit_mode(edit_mode)
        session = PreviewSession(session_id, preview)

        width, height = self._initial_container_size(size_option, container_width, container_height)
        preview.mount(SurfaceRoot(width=width, height=height), session.resize_notifier)

        self._cache[session_id] = session
        logger.info(f"[SESSION-MANAGER] Created session {session_id} (edit_mode={edit_mode})")
        return session

    def get_session(self, session_id: str) -> Optional[PreviewSession]:
        return self._cache.get(session_id)

    def remove_session(self, session_id: str) -> bool:
        session = self._cache.pop(session_id, None)
        if session is None:
            return False
        session.preview.unmount()
        logger.info(f"[SESSION-MANAGER] Removed session {session_id}")
        return True

    def list_sessions(self) -> List[str]:
        return list(self._cache.keys())

    def _initial_container_size(
        self,
        size_option: DashboardSizeOption,
        container_width: Optional[float],
        container_height: Optional[float]
    ):
        preset = get_size_by_option(size_option, self.presets)
        preset_width = parse_px(preset[0]) if preset else None
        preset_height = parse_px(preset[1]) if preset else None
        width = container_width or preset_width or DEFAULT_CONTAINER_SIZE[0]
        height = container_height or preset_height or DEFAULT_CONTAINER_SIZE[1]
        return width, height
