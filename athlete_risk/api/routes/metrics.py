"""
Performance Metrics API Routes

Chart data derived from an athlete's logged activities.
"""

from fastapi import APIRouter, Depends, Query

from athlete_risk.api.dependencies import get_service
from athlete_risk.api.models.responses import ErrorResponse
from athlete_risk.metrics import PerformanceMetrics
from athlete_risk.service import InjuryRiskService

router = APIRouter()


@router.get(
    "/athletes/{athlete_id}/performance-metrics",
    response_model=PerformanceMetrics,
    responses={404: {"model": ErrorResponse}},
)
def get_performance_metrics(
    athlete_id: str,
    days: int = Query(90, ge=1, le=365, description="How far back to read activities"),
    service: InjuryRiskService = Depends(get_service),
) -> PerformanceMetrics:
    """
    Get performance metrics for charts.

    Includes daily activity counts, weekly training hours, heart-rate,
    calorie and fatigue trends, and the intensity distribution.
    """
    return service.performance_metrics(athlete_id, days=days)
