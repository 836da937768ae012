"""
Dashboard Builder Server
=========================

FastAPI server keeping dashboard layout templates in sync with the grid
the browser renders them on.

Features:
- Preview sessions holding a layout template and a headless grid surface
- Drop/move/resize/click gestures forwarded by the browser grid
- Preset and custom preview sizes, fullscreen mode, resize-driven rebuilds
- Widget content from the asset service, or synthetic data in edit mode
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Import services
from .services.asset_client import AssetClient, ASSET_API_URL
from .services.content_resolver import ContentResolver
from .services.dashboard_client import DashboardClient, DASHBOARD_API_URL

# Import session manager
from .canvas.session_manager import PreviewSessionManager

# Import models exposed by /api/info
from .models.preview_models import SIZE_PRESETS, size_option_to_string
from .models.template_models import DEFAULT_COLUMNS, WIDGET_TYPE_CONFIG
from .canvas.surface_adapter import SURFACE_MARGIN

# Import API routers
from .api import preview_routes


# Shared service instances
session_manager: PreviewSessionManager = None
asset_client: AssetClient = None
dashboard_client: DashboardClient = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global session_manager, asset_client, dashboard_client

    logger.info("[DASHBOARD-BUILDER] Starting up...")

    asset_client = AssetClient(timeout=30.0)
    dashboard_client = DashboardClient(timeout=30.0)

    session_manager = PreviewSessionManager(
        dashboard_client=dashboard_client,
        content_resolver=ContentResolver(asset_client)
    )

    # Inject into route modules
    preview_routes.session_manager = session_manager

    logger.info("[DASHBOARD-BUILDER] Services initialized")

    yield

    # Cleanup
    logger.info("[DASHBOARD-BUILDER] Shutting down...")
    for session_id in session_manager.list_sessions():
        session_manager.remove_session(session_id)
    if asset_client:
        await asset_client.close()
    if dashboard_client:
        await dashboard_client.close()


# Create FastAPI app
app = FastAPI(
    title="Dashboard Builder",
    description="Grid layout synchronization for dashboard templates",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(preview_routes.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "dashboard-builder",
        "asset_api": ASSET_API_URL,
        "dashboard_api": DASHBOARD_API_URL
    }


@app.get("/api/info")
async def api_info():
    """Get API information, widget types and size presets."""
    return {
        "service": "Dashboard Builder",
        "version": "1.0.0",
        "widget_types": [
            {
                "type": widget_type.value,
                "label": config["label"],
                "min_size": {"w": config["min_size"][0], "h": config["min_size"][1]},
            }
            for widget_type, config in WIDGET_TYPE_CONFIG.items()
        ],
        "size_presets": [
            {
                "option": option.value,
                "label": size_option_to_string(option),
                "width": width,
                "height": height
            }
            for option, (width, height) in SIZE_PRESETS.items()
        ],
        "grid": {
            "default_columns": DEFAULT_COLUMNS,
            "margin": SURFACE_MARGIN
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dashboard_builder.server:app",
        host="0.0.0.0",
        port=8080,
        reload=True
    )
