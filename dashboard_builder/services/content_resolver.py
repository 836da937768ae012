"""
Content Resolver for Dashboard Builder
=======================================

Resolves the data payload of a widget body.

In edit mode nothing is fetched: placeholder assets and a synthetic
random-walk series stand in for the real data. In view mode the widget's
attribute references are resolved through the asset data service.
"""

import asyncio
import logging
import math
import random
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from ..models.content_models import (
    AssetRecord, AttributeValue, ChartContent, ChartDataset, ErrorContent, MapContent,
    MockPoint, WidgetContent
)
from ..models.template_models import Widget, WidgetType
from .asset_client import AssetClient

logger = logging.getLogger(__name__)

# Series colours, recycled by series index
MOCK_COLORS = ["#3869B1", "#DA7E30", "#3F9852", "#CC2428", "#6B4C9A", "#922427", "#958C3D", "#535055"]

MOCK_SEED_VALUE = 100
MOCK_MAX_STEP = 2
MOCK_POINTS = 20

PLACEHOLDER_ASSET_NAME = "Asset X"
PLACEHOLDER_ASSET_TYPE = "ThingAsset"

DEFAULT_PERIOD = "day"
PERIOD_MS = {
    "hour": 60 * 60 * 1000,
    "day": 24 * 60 * 60 * 1000,
    "week": 7 * 24 * 60 * 60 * 1000,
    "month": 30 * 24 * 60 * 60 * 1000,
    "year": 365 * 24 * 60 * 60 * 1000,
}

DEFAULT_MAP_CENTER = (5.454250, 51.445990)
DEFAULT_MAP_ZOOM = 5


def now_ms() -> float:
    """Current time in epoch milliseconds."""
    return time.time() * 1000


def generate_mock_data(
    widget: Widget,
    start_of_period: float,
    end_of_period: Optional[float] = None,
    amount: int = 10,
    rng: Optional[random.Random] = None
) -> List[ChartDataset]:
    """
    Synthetic series for a chart widget, one per attribute reference.

    Points are evenly spaced from start_of_period to end_of_period (now when
    not given). Values are a random walk from 100 where consecutive values
    differ by at most 2.
    """
    if widget.widget_type != WidgetType.CHART:
        return []

    rng = rng or random.Random()
    end = end_of_period if end_of_period is not None else now_ms()
    # amount <= 0 yields series without points
    interval = (end - start_of_period) / amount if amount > 0 else 0

    datasets = []
    for index, attr_ref in enumerate(widget.attribute_refs):
        points = []
        prev_value = MOCK_SEED_VALUE
        for i in range(amount):
            value = math.floor(rng.uniform(prev_value - MOCK_MAX_STEP, prev_value + MOCK_MAX_STEP))
            points.append(MockPoint(x=start_of_period + i * interval, y=value))
            prev_value = value

        color = MOCK_COLORS[index % len(MOCK_COLORS)]
        datasets.append(ChartDataset(
            label=attr_ref.name,
            data=points,
            background_color=color,
            border_color=color,
            fill=False,
            point_radius=2
        ))
    return datasets


class ContentResolver:
    """
    Decides between real and synthetic data per widget.

    Usage:
        resolver = ContentResolver(asset_client)
        content = await resolver.resolve(widget, edit_mode=False)
    """

    def __init__(
        self,
        asset_client: Optional[AssetClient] = None,
        clock: Callable[[], float] = now_ms,
        rng: Optional[random.Random] = None
    ):
        self.asset_client = asset_client
        self.clock = clock
        self.rng = rng or random.Random()

    async def resolve_all(self, widgets: List[Widget], edit_mode: bool) -> List[WidgetContent]:
        """Resolve every widget; a failing widget does not affect its siblings."""
        return list(await asyncio.gather(*(self.resolve(widget, edit_mode) for widget in widgets)))

    async def resolve(self, widget: Widget, edit_mode: bool) -> WidgetContent:
        if widget.grid_item is None:
            return ErrorContent()

        try:
            if widget.widget_type == WidgetType.CHART:
                return await self._resolve_chart(widget, edit_mode)
            if widget.widget_type == WidgetType.MAP:
                return self._resolve_map(widget)
        except (ValidationError, TypeError) as e:
            logger.warning(f"[ContentResolver] Invalid config on '{widget.display_name}': {e}")
            return ErrorContent()

        logger.warning(f"[ContentResolver] No content for widget type {widget.widget_type}")
        return ErrorContent()

    def period_start(self, period: str, now: float) -> float:
        return now - PERIOD_MS.get(period, PERIOD_MS[DEFAULT_PERIOD])

    async def _resolve_chart(self, widget: Widget, edit_mode: bool) -> WidgetContent:
        config = widget.widget_config
        attribute_refs = widget.attribute_refs
        period = config.get("period") or DEFAULT_PERIOD
        content = ChartContent(
            period=period,
            show_legend=bool(config.get("showLegend", False)),
            show_controls=bool(config.get("showTimestampControls", False)),
        )

        if edit_mode:
            for attr_ref in attribute_refs:
                if not any(asset.id == attr_ref.id for asset in content.assets):
                    content.assets.append(AssetRecord(
                        id=attr_ref.id,
                        name=PLACEHOLDER_ASSET_NAME,
                        type=PLACEHOLDER_ASSET_TYPE
                    ))
            content.asset_attributes = [(0, AttributeValue(name=ref.name)) for ref in attribute_refs]

            now = self.clock()
            content.datasets = generate_mock_data(
                widget, self.period_start(period, now), now, MOCK_POINTS, rng=self.rng
            )
            content.uses_mock_data = True
            return content

        if not attribute_refs:
            return content
        if self.asset_client is None:
            return ErrorContent(message="No asset service configured")

        response = await self.asset_client.query_assets([ref.id for ref in attribute_refs])
        if not response.success:
            return ErrorContent(message=response.error or "Failed to load attribute data")

        content.assets = response.assets
        for attr_ref in attribute_refs:
            asset_index = next((i for i, asset in enumerate(response.assets) if asset.id == attr_ref.id), None)
            attribute = response.assets[asset_index].attributes.get(attr_ref.name) if asset_index is not None else None
            if attribute is None:
                logger.debug(f"[ContentResolver] Unresolved attribute {attr_ref.id}/{attr_ref.name} dropped")
                continue
            content.asset_attributes.append((asset_index, attribute))
        return content

    def _resolve_map(self, widget: Widget) -> MapContent:
        config = widget.widget_config
        center = config.get("center")
        if center is None:
            center = DEFAULT_MAP_CENTER
        return MapContent(center=center, zoom=config.get("zoom", DEFAULT_MAP_ZOOM))
