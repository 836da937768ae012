"""
Size Negotiator
===============

Resolves the preview container size from a preset or explicit dimensions,
derives the container style, and rebuilds the surface when the environment
resizes the container.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..models.preview_models import (
    DashboardSizeOption, PreviewSize, ContainerStyle, ResizeObservation, SizeOptionEntry,
    SIZE_PRESETS, get_size_by_option, get_option_by_size, normalize_length, selectable_size_entries
)

logger = logging.getLogger(__name__)

ResizeCallback = Callable[[ResizeObservation], None]


class ResizeSource(ABC):
    """Environment notifications about the container's rendered size."""

    @abstractmethod
    def subscribe(self, callback: ResizeCallback) -> None:
        pass

    @abstractmethod
    def unsubscribe(self, callback: ResizeCallback) -> None:
        pass


class ResizeNotifier(ResizeSource):
    """Resize source fed by the host (e.g. sizes reported by the browser)."""

    def __init__(self):
        self._callbacks: List[ResizeCallback] = []

    def subscribe(self, callback: ResizeCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: ResizeCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def notify(self, width: float, height: float) -> None:
        observation = ResizeObservation(width=width, height=height)
        for callback in list(self._callbacks):
            callback(observation)


class SizeNegotiator:
    """
    Preview size state.

    Invariant: unless the option is CUSTOM, width and height are the
    preset's dimensions.
    """

    def __init__(
        self,
        rebuild: Callable[[ResizeObservation], None],
        presets: Optional[Dict[DashboardSizeOption, Tuple[str, str]]] = None,
        size_option: DashboardSizeOption = DashboardSizeOption.MEDIUM
    ):
        self.rebuild = rebuild
        self.presets = presets or SIZE_PRESETS
        self.size = PreviewSize(size_option=DashboardSizeOption.CUSTOM)
        self._source: Optional[ResizeSource] = None
        self._last_observed: Optional[ResizeObservation] = None
        self.set_preview_size(size_option)

    @property
    def size_option(self) -> DashboardSizeOption:
        return self.size.size_option

    @property
    def fullscreen(self) -> bool:
        return self.size.size_option == DashboardSizeOption.FULLSCREEN

    def set_preview_size(self, option: DashboardSizeOption) -> PreviewSize:
        """Apply a preset. CUSTOM keeps the current dimensions."""
        dimensions = get_size_by_option(option, self.presets)
        if dimensions is not None:
            width, height = dimensions
            self.size = PreviewSize(width=width, height=height, size_option=option)
        else:
            self.size = self.size.model_copy(update={"size_option": option})
        logger.info(f"[SIZE] Preview size set to {option.value} ({self.size.width} x {self.size.height})")
        return self.size

    def set_preview_width(self, width: Union[int, str]) -> PreviewSize:
        return self.set_dimensions(width, self.size.height)

    def set_preview_height(self, height: Union[int, str]) -> PreviewSize:
        return self.set_dimensions(self.size.width, height)

    def set_dimensions(self, width: Union[int, str], height: Union[int, str]) -> PreviewSize:
        """Apply explicit dimensions and recompute the matching option."""
        width = normalize_length(width)
        height = normalize_length(height)
        option = get_option_by_size(width, height, self.presets)
        self.size = PreviewSize(width=width, height=height, size_option=option)
        logger.info(f"[SIZE] Preview dimensions set to [{width} {height}] -> {option.value}")
        return self.size

    def rotate(self) -> PreviewSize:
        """Swap width and height."""
        return self.set_dimensions(self.size.height, self.size.width)

    @property
    def container_style(self) -> ContainerStyle:
        if self.fullscreen:
            return ContainerStyle(
                css_class="maingrid__fullscreen",
                fullscreen=True,
                width="100%",
                height="auto",
                border="none",
                border_radius="0",
                background="transparent",
                overflow_y="auto",
                position="relative",
                show_grid_lines=False
            )
        return ContainerStyle(width=self.size.width, height=self.size.height)

    def size_options(self) -> List[SizeOptionEntry]:
        return selectable_size_entries(self.presets)

    # Environment-driven resizes

    def attach(self, source: ResizeSource) -> None:
        self.detach()
        self._source = source
        source.subscribe(self.handle_container_resize)
        logger.debug("[SIZE] Observing container resizes")

    def detach(self) -> None:
        if self._source is not None:
            self._source.unsubscribe(self.handle_container_resize)
            self._source = None

    def handle_container_resize(self, observation: ResizeObservation) -> bool:
        """
        The container's rendered size was reported.

        Cell pixel sizes depend on the container, so any change forces a
        surface rebuild. Returns True if a rebuild was triggered.
        """
        if self._last_observed == observation:
            return False
        self._last_observed = observation
        logger.info(f"[SIZE] Container resized to {observation.width:g} x {observation.height:g}, rebuilding")
        self.rebuild(observation)
        return True
