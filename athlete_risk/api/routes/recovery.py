"""
Recovery API Routes

Trigger for the daily passive-recovery pass. Meant to be called once a day by
a scheduler.
"""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Body, Depends

from athlete_risk.api.dependencies import get_service
from athlete_risk.api.models.requests import RecoveryRunRequest
from athlete_risk.api.models.responses import RecoveryRunResponse
from athlete_risk.service import InjuryRiskService

router = APIRouter()


@router.post("/recovery/daily-update", response_model=RecoveryRunResponse)
def run_daily_recovery(
    request: Optional[RecoveryRunRequest] = Body(None),
    service: InjuryRiskService = Depends(get_service),
) -> RecoveryRunResponse:
    """
    Decay every athlete's body parts that were not loaded on the given day.

    Returns:
        Number of body-part rows written
    """
    as_of = (request.as_of_date if request else None) or dt.date.today()
    updated = service.run_recovery(as_of)
    return RecoveryRunResponse(
        as_of_date=as_of,
        updated_rows=updated,
        message=f"Updated recovery rates for {updated} body parts",
    )
