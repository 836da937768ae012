"""
Preview Models for Dashboard Builder
=====================================

Models for the preview container: size presets, negotiated size and
the resulting container style.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, Field


class DashboardSizeOption(str, Enum):
    """Named preview sizes."""
    LARGE = "LARGE"
    MEDIUM = "MEDIUM"
    SMALL = "SMALL"
    CUSTOM = "CUSTOM"
    FULLSCREEN = "FULLSCREEN"


# (width, height) per preset, CUSTOM has no entry
SIZE_PRESETS: Dict[DashboardSizeOption, Tuple[str, str]] = {
    DashboardSizeOption.LARGE: ("1920px", "1080px"),
    DashboardSizeOption.MEDIUM: ("1280px", "720px"),
    DashboardSizeOption.SMALL: ("480px", "853px"),
    DashboardSizeOption.FULLSCREEN: ("100%", "100%"),
}

SIZE_OPTION_LABELS = {
    DashboardSizeOption.LARGE: "Large",
    DashboardSizeOption.MEDIUM: "Medium",
    DashboardSizeOption.SMALL: "Small",
    DashboardSizeOption.CUSTOM: "Custom",
    DashboardSizeOption.FULLSCREEN: "Fullscreen",
}

# Options offered in the edit-mode preset selector
SELECTABLE_SIZE_OPTIONS = [
    DashboardSizeOption.LARGE,
    DashboardSizeOption.MEDIUM,
    DashboardSizeOption.SMALL,
    DashboardSizeOption.CUSTOM,
]


def size_option_to_string(option: DashboardSizeOption) -> str:
    return SIZE_OPTION_LABELS[option]


def string_to_size_option(value: str) -> DashboardSizeOption:
    """Map a selector label (or enum value) back to its option."""
    for option, label in SIZE_OPTION_LABELS.items():
        if value == label or value == option.value:
            return option
    raise ValueError(f"Unknown size option: {value}")


def normalize_length(value: Union[int, float, str]) -> str:
    """
    Normalize a CSS length.

    Numbers are pixels (fractions kept), strings are kept as given (whitespace stripped).
    A bare numeric string gets a px suffix.
    """
    if isinstance(value, (int, float)):
        if float(value).is_integer():
            value = int(value)
        return f"{value}px"
    value = value.strip()
    if value.isdigit():
        return f"{value}px"
    return value


def parse_px(value: Optional[str]) -> Optional[int]:
    """Pixel count of a "<n>px" length, None for other units."""
    if value is None or not value.endswith("px"):
        return None
    try:
        return int(float(value[:-2]))
    except ValueError:
        return None


def get_size_by_option(
    option: DashboardSizeOption,
    presets: Optional[Dict[DashboardSizeOption, Tuple[str, str]]] = None
) -> Optional[Tuple[str, str]]:
    """(width, height) for a preset, None for CUSTOM or an unknown preset."""
    return (presets or SIZE_PRESETS).get(option)


def get_option_by_size(
    width: Optional[str],
    height: Optional[str],
    presets: Optional[Dict[DashboardSizeOption, Tuple[str, str]]] = None
) -> DashboardSizeOption:
    """Reverse lookup: the preset matching exactly these dimensions, otherwise CUSTOM."""
    for option, size in (presets or SIZE_PRESETS).items():
        if size == (width, height):
            return option
    return DashboardSizeOption.CUSTOM


class PreviewSize(BaseModel):
    """Negotiated size of the preview container."""
    width: str = "1280px"
    height: str = "720px"
    size_option: DashboardSizeOption = DashboardSizeOption.MEDIUM


class SizeOptionEntry(BaseModel):
    """An entry of the preset selector."""
    option: DashboardSizeOption
    label: str
    width: Optional[str] = None
    height: Optional[str] = None


class ContainerStyle(BaseModel):
    """Style applied to the container holding the grid surface."""
    css_class: str = "maingrid"
    fullscreen: bool = False
    width: str = "1280px"
    height: str = "720px"
    border: str = "3px solid #909090"
    border_radius: str = "8px"
    background: str = "#FFFFFF"
    overflow_x: str = "hidden"
    overflow_y: str = "scroll"
    position: str = "absolute"
    padding: str = "4px"
    show_grid_lines: bool = True

    def to_css(self) -> Dict[str, str]:
        """CSS properties as a dict."""
        return {
            "width": self.width,
            "height": self.height,
            "border": self.border,
            "border-radius": self.border_radius,
            "background": self.background,
            "overflow-x": self.overflow_x,
            "overflow-y": self.overflow_y,
            "position": self.position,
            "padding": self.padding,
        }


class CellMetrics(BaseModel):
    """Effective pixel size of one grid cell."""
    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @property
    def background_size(self) -> str:
        return f"{self.width:g}px {self.height:g}px"


class ResizeObservation(BaseModel):
    """A container size reported by the environment."""
    width: float = Field(ge=0)
    height: float = Field(ge=0)


def selectable_size_entries(
    presets: Optional[Dict[DashboardSizeOption, Tuple[str, str]]] = None
) -> List[SizeOptionEntry]:
    entries = []
    for option in SELECTABLE_SIZE_OPTIONS:
        size = get_size_by_option(option, presets)
        entries.append(SizeOptionEntry(
            option=option,
            label=size_option_to_string(option),
            width=size[0] if size else None,
            height=size[1] if size else None
        ))
    return entries
