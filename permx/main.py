"""
Permx Main Application

FastAPI application entry point for administering group permissions.
"""

from fastapi import FastAPI
import logging

from . import __version__
from .api.routes import router
from .config import get_config


# Configure logging
logging.basicConfig(
    level=get_config().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Permx Permission Administration",
    description="""
## Permx - Group Permission Administration

Lists the permissions provided by the active modules and manages the
per-group overrides that supersede each permission's default state.

**Operations:**
- `GET /api/v1/permissions` - List known permissions
- `GET /api/v1/groups/{group_id}/permissions` - Describe a group's permissions
- `PUT /api/v1/groups/{group_id}/permissions/{module_id}/{permission_id}` - Set or clear an override
    """,
    version=__version__,
    debug=get_config().debug,
)

# Include router
app.include_router(router)


@app.on_event("startup")
async def startup_event():
    """Initialize on startup."""
    logging.info("Permx permission administration starting...")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logging.info("Permx permission administration shutting down...")


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "name": "Permx Permission Administration",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
