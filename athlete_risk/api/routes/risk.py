"""
Injury Risk API Routes

Endpoints for per-body-part risk, workload history, snapshot history and
body-part advice.
"""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Query

from athlete_risk.api.dependencies import get_service
from athlete_risk.api.models.responses import (
    BodyPartRecommendationsResponse,
    ErrorResponse,
    RiskHistoryResponse,
    WorkloadHistoryResponse,
)
from athlete_risk.schemas import RiskReport
from athlete_risk.service import InjuryRiskService

router = APIRouter()


@router.get(
    "/athletes/{athlete_id}/injury-risk",
    response_model=RiskReport,
    responses={404: {"model": ErrorResponse}},
)
def get_injury_risk(
    athlete_id: str,
    date: Optional[dt.date] = Query(None, description="Day to report (default: today)"),
    service: InjuryRiskService = Depends(get_service),
) -> RiskReport:
    """
    Get an athlete's injury risk for a day.

    Returns:
        body_part_risks for the body diagram, the athlete snapshot
        (overall_risk, null when nothing was logged) and the raw rows
    """
    return service.get_risk(athlete_id, date)


@router.get(
    "/athletes/{athlete_id}/body-part-workloads",
    response_model=WorkloadHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_body_part_workloads(
    athlete_id: str,
    body_part: Optional[str] = Query(None, description="Restrict to one body part"),
    limit: int = Query(100, ge=1, le=1000),
    service: InjuryRiskService = Depends(get_service),
) -> WorkloadHistoryResponse:
    workloads = service.workload_history(athlete_id, body_part=body_part, limit=limit)
    return WorkloadHistoryResponse(workloads=workloads, count=len(workloads))


@router.get(
    "/athletes/{athlete_id}/injury-risk-history",
    response_model=RiskHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_injury_risk_history(
    athlete_id: str,
    limit: int = Query(30, ge=1, le=365),
    service: InjuryRiskService = Depends(get_service),
) -> RiskHistoryResponse:
    snapshots = service.risk_history(athlete_id, limit=limit)
    return RiskHistoryResponse(snapshots=snapshots, count=len(snapshots))


@router.get(
    "/athletes/{athlete_id}/body-parts/{body_part}/recommendations",
    response_model=BodyPartRecommendationsResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_body_part_recommendations(
    athlete_id: str,
    body_part: str,
    service: InjuryRiskService = Depends(get_service),
) -> BodyPartRecommendationsResponse:
    """Region-specific advice for a body part at its latest risk level."""
    return BodyPartRecommendationsResponse(
        athlete_id=athlete_id,
        body_part=body_part,
        recommendations=service.body_part_recommendations(athlete_id, body_part),
    )
