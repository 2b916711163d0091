"""Maintenance analytics endpoint."""

from fastapi import APIRouter, Depends, Query

from labtrack.api.dependencies import get_maintenance_analytics_use_case, require_permission
from labtrack.application.dto.responses import ErrorResponse, MaintenanceAnalyticsResponse
from labtrack.application.use_cases import GetMaintenanceAnalyticsUseCase
from labtrack.core.entities.user import Action, Actor

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get(
    "",
    response_model=MaintenanceAnalyticsResponse,
    responses={403: {"model": ErrorResponse}},
)
async def get_maintenance_analytics(
    months: int = Query(default=6, ge=1, le=24, description="Length of the monthly series"),
    use_case: GetMaintenanceAnalyticsUseCase = Depends(get_maintenance_analytics_use_case),
    actor: Actor | None = Depends(require_permission(Action.VIEW_ANALYTICS)),
) -> MaintenanceAnalyticsResponse:
    """
    Maintenance cost and part wear aggregates.

    Includes cost per machine and per location, the most consumed parts,
    a comparison of maintenance types and the parts currently in alert.
    """
    analytics = await use_case.execute(months=months)
    return use_case.to_response(analytics)
