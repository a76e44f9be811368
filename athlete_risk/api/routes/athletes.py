"""
Athlete API Routes

Endpoints for registering and maintaining athlete profiles.
"""

from typing import Dict

from fastapi import APIRouter, Depends, status

from athlete_risk.api.dependencies import get_service
from athlete_risk.api.models.requests import AthleteUpdateRequest
from athlete_risk.api.models.responses import AthleteListResponse, ErrorResponse
from athlete_risk.schemas import Athlete
from athlete_risk.service import InjuryRiskService

router = APIRouter()


@router.post(
    "/athletes",
    response_model=Athlete,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
def create_athlete(athlete: Athlete, service: InjuryRiskService = Depends(get_service)) -> Athlete:
    """Register a new athlete."""
    return service.create_athlete(athlete)


@router.get("/athletes", response_model=AthleteListResponse)
def list_athletes(service: InjuryRiskService = Depends(get_service)) -> AthleteListResponse:
    athletes = service.list_athletes()
    return AthleteListResponse(athletes=athletes, count=len(athletes))


@router.get("/athletes/{athlete_id}", response_model=Athlete, responses={404: {"model": ErrorResponse}})
def get_athlete(athlete_id: str, service: InjuryRiskService = Depends(get_service)) -> Athlete:
    return service.get_athlete(athlete_id)


@router.put("/athletes/{athlete_id}", response_model=Athlete, responses={404: {"model": ErrorResponse}})
def update_athlete(
    athlete_id: str,
    request: AthleteUpdateRequest,
    service: InjuryRiskService = Depends(get_service),
) -> Athlete:
    """
    Update an athlete profile.

    Only fields present in the request body are changed.
    """
    return service.update_athlete(athlete_id, request.model_dump(exclude_unset=True))


@router.delete("/athletes/{athlete_id}", responses={404: {"model": ErrorResponse}})
def delete_athlete(athlete_id: str, service: InjuryRiskService = Depends(get_service)) -> Dict[str, str]:
    """Delete an athlete with all activities, workload rows, snapshots and injuries."""
    service.delete_athlete(athlete_id)
    return {"message": f"Athlete {athlete_id} deleted", "athlete_id": athlete_id}
