"""
Insight endpoints: generate, latest and export.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from finsight.api.dependencies import (
    get_current_user_id,
    get_export_use_case,
    get_generate_use_case,
    get_latest_use_case,
)
from finsight.application.dto.requests import ExportInsightRequest, GenerateInsightsRequest
from finsight.application.dto.responses import ErrorResponse, ExportResponse, InsightResponse
from finsight.application.use_cases import (
    ExportInsightUseCase,
    GenerateInsightsUseCase,
    GetLatestInsightsUseCase,
)

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.post(
    "/generate",
    response_model=InsightResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def generate_insights(
    request: GenerateInsightsRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: GenerateInsightsUseCase = Depends(get_generate_use_case),
) -> InsightResponse:
    """
    Generate insights for an inclusive date range.

    Returns the cached or stored insight for the same range when one
    exists. When the model is unavailable the latest stored insight or
    a placeholder is returned instead.
    """
    insight = await use_case.execute(user_id, request.start_date, request.end_date)
    return InsightResponse.from_entity(insight)


@router.get(
    "/latest",
    response_model=InsightResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_latest_insights(
    user_id: str = Depends(get_current_user_id),
    use_case: GetLatestInsightsUseCase = Depends(get_latest_use_case),
) -> InsightResponse:
    """Return the most recently generated insight."""
    insight = await use_case.execute(user_id)
    if insight is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No insights found. Generate insights first.",
        )
    return InsightResponse.from_entity(insight)


@router.post(
    "/export",
    response_model=ExportResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        501: {"model": ErrorResponse},
    },
)
async def export_insight(
    request: ExportInsightRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: ExportInsightUseCase = Depends(get_export_use_case),
) -> ExportResponse:
    """Export a stored insight as a text report."""
    result = await use_case.execute(user_id, request.insight_id, request.format)
    return ExportResponse(
        content=result.content,
        filename=result.filename,
        format=result.format.value,
    )
