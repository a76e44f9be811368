"""
Injury API Routes

Endpoints for recording and resolving injuries. An active injury raises the
risk computed for its body part.
"""

import datetime as dt
from typing import List

from fastapi import APIRouter, Depends, status

from athlete_risk.api.dependencies import get_service
from athlete_risk.api.models.requests import InjuryCreateRequest
from athlete_risk.api.models.responses import ErrorResponse
from athlete_risk.schemas import InjuryRecord
from athlete_risk.service import InjuryRiskService

router = APIRouter()


@router.post(
    "/athletes/{athlete_id}/injuries",
    response_model=InjuryRecord,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
def record_injury(
    athlete_id: str,
    request: InjuryCreateRequest,
    service: InjuryRiskService = Depends(get_service),
) -> InjuryRecord:
    injury = InjuryRecord(
        athlete_id=athlete_id,
        body_part=request.body_part,
        status=request.status,
        injury_type=request.injury_type,
        occurred_on=request.occurred_on or dt.date.today(),
        notes=request.notes,
    )
    return service.record_injury(injury)


@router.get(
    "/athletes/{athlete_id}/injuries",
    response_model=List[InjuryRecord],
    responses={404: {"model": ErrorResponse}},
)
def list_injuries(athlete_id: str, service: InjuryRiskService = Depends(get_service)) -> List[InjuryRecord]:
    return service.list_injuries(athlete_id)


@router.post(
    "/injuries/{injury_id}/resolve",
    response_model=InjuryRecord,
    responses={404: {"model": ErrorResponse}},
)
def resolve_injury(injury_id: int, service: InjuryRiskService = Depends(get_service)) -> InjuryRecord:
    return service.resolve_injury(injury_id)
