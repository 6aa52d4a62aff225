"""API route modules."""

from finsight.api.routes.health import router as health_router
from finsight.api.routes.insights import router as insights_router

__all__ = ["health_router", "insights_router"]
