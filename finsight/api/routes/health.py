"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from finsight import __version__
from finsight.application.dto.responses import HealthResponse, ProviderHealthResponse
from finsight.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status, uptime, the configured model and cache stats.
    Does not call the model provider.
    """
    from finsight.infrastructure.cache import get_insight_cache
    from finsight.infrastructure.storage.sqlite.migrations import get_migration_status

    settings = get_settings()

    llm_status = ProviderHealthResponse(
        name=settings.llm.provider,
        available=bool(settings.llm.api_key),
        model=settings.llm.model_name,
        error=None if settings.llm.api_key else "API key not configured",
    )

    try:
        start = time.time()
        migration_status = await get_migration_status()
        missing = migration_status["missing_tables"]
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=migration_status["exists"] and not missing,
            latency_ms=(time.time() - start) * 1000,
            error=f"Missing tables: {', '.join(missing)}" if missing else None,
        )
    except Exception as e:
        db_status = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    overall = "healthy" if db_status.available and llm_status.available else "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        llm=llm_status,
        database=db_status,
        cache=get_insight_cache().stats(),
    )
