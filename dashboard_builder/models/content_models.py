"""
Content Models for Dashboard Builder
=====================================

Data payloads resolved for widget bodies, and the asset records they are built from.
"""

from typing import List, Optional, Dict, Any, Literal, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field


class AttributeValue(BaseModel):
    """A named attribute of an asset."""
    name: str
    type: Optional[str] = None
    value: Optional[Any] = None
    timestamp: Optional[int] = None


class AssetRecord(BaseModel):
    """An asset as returned by the asset data service."""
    id: str
    name: Optional[str] = None
    type: Optional[str] = None
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict)


class MockPoint(BaseModel):
    """One point of a synthetic series."""
    x: float
    y: float


class ChartDataset(BaseModel):
    """A series as consumed by the chart component."""
    model_config = ConfigDict(populate_by_name=True)

    label: str
    data: List[MockPoint] = Field(default_factory=list)
    background_color: str = Field(alias="backgroundColor")
    border_color: str = Field(alias="borderColor")
    fill: bool = False
    point_radius: int = Field(default=2, alias="pointRadius")


class ChartContent(BaseModel):
    """Data payload of a CHART widget."""
    kind: Literal["chart"] = "chart"
    assets: List[AssetRecord] = Field(default_factory=list)
    # (index into assets, attribute)
    asset_attributes: List[Tuple[int, AttributeValue]] = Field(default_factory=list)
    period: Optional[str] = None
    show_legend: bool = False
    show_controls: bool = False
    uses_mock_data: bool = False
    datasets: Optional[List[ChartDataset]] = None


class MapContent(BaseModel):
    """Data payload of a MAP widget."""
    kind: Literal["map"] = "map"
    center: Tuple[float, float] = (5.454250, 51.445990)
    zoom: float = 5


class ErrorContent(BaseModel):
    """Placeholder for a widget whose content could not be resolved."""
    kind: Literal["error"] = "error"
    message: str = "Error!"


WidgetContent = Union[ChartContent, MapContent, ErrorContent]
