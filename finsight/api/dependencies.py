"""
Dependency injection container for FastAPI.

Provides the authenticated user and use-case instances to route handlers.
"""

from fastapi import Header, HTTPException, status

from finsight.application.services import (
    get_export_insight_use_case,
    get_generate_insights_use_case,
    get_latest_insights_use_case,
)
from finsight.application.use_cases import (
    ExportInsightUseCase,
    GenerateInsightsUseCase,
    GetLatestInsightsUseCase,
)

USER_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_HEADER),
) -> str:
    """
    Resolve the authenticated user.

    Authentication happens upstream; the gateway forwards the user id
    in the X-User-Id header.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_user_id.strip()


# Use case dependencies
def get_generate_use_case() -> GenerateInsightsUseCase:
    return get_generate_insights_use_case()


def get_latest_use_case() -> GetLatestInsightsUseCase:
    return get_latest_insights_use_case()


def get_export_use_case() -> ExportInsightUseCase:
    return get_export_insight_use_case()
