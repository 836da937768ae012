"""
Asset Client for Dashboard Builder
===================================

HTTP client for the asset data service. Used to resolve the attribute
references of widgets to real asset records when not in edit mode.
"""

import os
import logging
from typing import Optional, List, Dict, Any
import httpx
from pydantic import BaseModel, Field, ValidationError

from ..models.content_models import AssetRecord

logger = logging.getLogger(__name__)

ASSET_API_URL = os.getenv(
    "ASSET_API_URL",
    "http://localhost:8080/api/master"
)


class AssetQueryResponse(BaseModel):
    """Response from an asset query."""
    success: bool
    assets: List[AssetRecord] = Field(default_factory=list)
    error: Optional[str] = None


def parse_asset(data: Dict[str, Any]) -> AssetRecord:
    """Parse an asset, naming attributes after their key when the name is missing."""
    attributes = {}
    for key, value in (data.get("attributes") or {}).items():
        if isinstance(value, dict):
            attributes[key] = {"name": key, **value}
    return AssetRecord.model_validate({**data, "attributes": attributes})


class AssetClient:
    """
    Client for the asset data service.

    Usage:
        client = AssetClient()
        response = await client.query_assets(["asset-1", "asset-2"])
        if response.success:
            assets = response.assets
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0):
        self.base_url = base_url or ASSET_API_URL
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        logger.info(f"[AssetClient] Initialized with base URL: {self.base_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"}
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def query_assets(self, ids: List[str]) -> AssetQueryResponse:
        """
        Query assets by id in one batch.

        Args:
            ids: Asset ids to resolve

        Returns:
            AssetQueryResponse with the assets found. Ids that do not resolve
            are simply absent from the result.
        """
        if not ids:
            return AssetQueryResponse(success=True)

        url = f"{self.base_url}/asset/query"
        payload = {"ids": list(dict.fromkeys(ids))}

        try:
            client = await self._get_client()
            response = await client.post(url, json=payload)

            if response.status_code != 200:
                error_msg = f"Asset service error: HTTP {response.status_code}"
                logger.error(f"[AssetClient] {error_msg}")
                return AssetQueryResponse(success=False, error=error_msg)

            data = response.json()
            assets = [parse_asset(item) for item in data if isinstance(item, dict)]
            logger.info(f"[AssetClient] Resolved {len(assets)} of {len(payload['ids'])} assets")
            return AssetQueryResponse(success=True, assets=assets)

        except httpx.TimeoutException:
            logger.error("[AssetClient] Timeout calling asset service")
            return AssetQueryResponse(success=False, error="Asset service timeout")
        except httpx.RequestError as e:
            logger.error(f"[AssetClient] Network error: {e}")
            return AssetQueryResponse(success=False, error=f"Network error: {str(e)}")
        except (ValueError, ValidationError) as e:
            logger.error(f"[AssetClient] Invalid response: {e}")
            return AssetQueryResponse(success=False, error=f"Invalid response: {str(e)}")
