"""
Preview Notifications
=====================

Consumer-facing notifications raised by the preview components.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class PreviewEvent(str, Enum):
    """Notification names."""
    DROPPED = "dropped"
    CHANGED = "changed"
    SELECTED = "selected"
    DESELECTED = "deselected"


Listener = Callable[[PreviewEvent, Any], None]


class EventEmitter:
    """Dispatches notifications to subscribed listeners in subscription order."""

    def __init__(self):
        self._listeners: Dict[PreviewEvent, List[Listener]] = {event: [] for event in PreviewEvent}

    def subscribe(self, event: PreviewEvent, listener: Listener) -> None:
        if listener not in self._listeners[event]:
            self._listeners[event].append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        """Subscribe one listener to every notification."""
        for event in PreviewEvent:
            self.subscribe(event, listener)

    def unsubscribe(self, event: PreviewEvent, listener: Listener) -> None:
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def emit(self, event: PreviewEvent, detail: Any = None) -> None:
        logger.debug(f"[EVENTS] {event.value}")
        for listener in list(self._listeners[event]):
            listener(event, detail)
