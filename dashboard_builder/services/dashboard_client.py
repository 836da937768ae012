"""
Dashboard Client for Dashboard Builder
=======================================

HTTP client for the document store. Fetches a dashboard's layout template
when the preview is given a dashboard id instead of a template.
"""

import os
import logging
from typing import Optional
import httpx
from pydantic import BaseModel, ValidationError

from ..models.template_models import Template

logger = logging.getLogger(__name__)

DASHBOARD_API_URL = os.getenv(
    "DASHBOARD_API_URL",
    "http://localhost:8080/api/master"
)


class DashboardResponse(BaseModel):
    """Response from a dashboard fetch."""
    success: bool
    dashboard_id: str
    display_name: Optional[str] = None
    template: Optional[Template] = None
    error: Optional[str] = None


class DashboardClient:
    """Client for the document store."""

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0):
        self.base_url = base_url or DASHBOARD_API_URL
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        logger.info(f"[DashboardClient] Initialized with base URL: {self.base_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, dashboard_id: str) -> DashboardResponse:
        """Fetch a dashboard by id."""
        url = f"{self.base_url}/dashboard/{dashboard_id}"
        logger.info(f"[DashboardClient] Fetching dashboard {dashboard_id}")

        try:
            client = await self._get_client()
            response = await client.get(url)

            if response.status_code == 404:
                return DashboardResponse(
                    success=False,
                    dashboard_id=dashboard_id,
                    error=f"Dashboard '{dashboard_id}' not found"
                )
            if response.status_code != 200:
                error_msg = f"Dashboard service error: HTTP {response.status_code}"
                logger.error(f"[DashboardClient] {error_msg}")
                return DashboardResponse(success=False, dashboard_id=dashboard_id, error=error_msg)

            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            template = Template.model_validate(data.get("template") or {})
            return DashboardResponse(
                success=True,
                dashboard_id=dashboard_id,
                display_name=data.get("displayName"),
                template=template
            )

        except httpx.TimeoutException:
            logger.error("[DashboardClient] Timeout calling dashboard service")
            return DashboardResponse(
                success=False,
                dashboard_id=dashboard_id,
                error="Dashboard service timeout - please try again"
            )
        except httpx.RequestError as e:
            logger.error(f"[DashboardClient] Network error: {e}")
            return DashboardResponse(success=False, dashboard_id=dashboard_id, error=f"Network error: {str(e)}")
        except ValidationError as e:
            logger.error(f"[DashboardClient] Invalid template for {dashboard_id}: {e}")
            return DashboardResponse(success=False, dashboard_id=dashboard_id, error=f"Invalid template: {str(e)}")
        except ValueError as e:
            logger.error(f"[DashboardClient] Invalid response: {e}")
            return DashboardResponse(success=False, dashboard_id=dashboard_id, error=f"Invalid response: {str(e)}")
