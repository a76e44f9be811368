"""
Activity API Routes

Endpoints for logging, editing and deleting workout and sports activities.
Every write recomputes the affected body-part rows and the athlete snapshot.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query

from athlete_risk.api.dependencies import get_service
from athlete_risk.api.models.responses import ActivityListResponse, ErrorResponse
from athlete_risk.schemas import Activity, ActivityDeleteResult, ActivityLogResult
from athlete_risk.service import InjuryRiskService

router = APIRouter()


@router.post(
    "/activities/log",
    response_model=ActivityLogResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def log_activity(
    payload: Dict[str, Any] = Body(..., description="Workout or sports activity"),
    service: InjuryRiskService = Depends(get_service),
) -> ActivityLogResult:
    """
    Log a workout or sports activity.

    Required fields are `athlete_id` and `activity_type` ('workout' or
    'sports'). Affected body parts are detected when not supplied.

    Returns:
        The saved activity, the updated body-part rows, any parts whose
        update failed, and the refreshed athlete snapshot
    """
    return service.log_activity(payload)


@router.get(
    "/athletes/{athlete_id}/activities",
    response_model=ActivityListResponse,
    responses={404: {"model": ErrorResponse}},
)
def list_activities(
    athlete_id: str,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: InjuryRiskService = Depends(get_service),
) -> ActivityListResponse:
    activities = service.list_activities(athlete_id, limit=limit, offset=offset)
    return ActivityListResponse(activities=activities, count=len(activities))


@router.get("/activities/{activity_id}", response_model=Activity, responses={404: {"model": ErrorResponse}})
def get_activity(activity_id: int, service: InjuryRiskService = Depends(get_service)):
    return service.get_activity(activity_id)


@router.put(
    "/activities/{activity_id}",
    response_model=ActivityLogResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_activity(
    activity_id: int,
    payload: Dict[str, Any] = Body(...),
    service: InjuryRiskService = Depends(get_service),
) -> ActivityLogResult:
    """
    Edit an activity.

    Missing fields keep their stored values. Rows for the old and the new
    date are recomputed.
    """
    return service.update_activity(activity_id, payload)


@router.delete(
    "/activities/{activity_id}",
    response_model=ActivityDeleteResult,
    responses={404: {"model": ErrorResponse}},
)
def delete_activity(activity_id: int, service: InjuryRiskService = Depends(get_service)) -> ActivityDeleteResult:
    """Delete an activity and rebuild its day from the remaining activities."""
    return service.delete_activity(activity_id)
